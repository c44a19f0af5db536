"""Custom exceptions for voicedrill."""


class VoicedrillError(Exception):
    """Base exception for all voicedrill errors."""


class ConfigurationError(VoicedrillError):
    """The built-in theory or recipe tables are incomplete."""


class MissingRecipeError(ConfigurationError):
    """A chord type has no registered voicing recipes at all."""


class UnknownNoteError(VoicedrillError, ValueError):
    """A note name is not one of the known sharp or flat spellings."""


class UnknownChordTypeError(VoicedrillError, ValueError):
    """A chord-type tag does not name a supported chord type."""


class UnknownRecipeError(VoicedrillError, ValueError):
    """No voicing recipe is registered under the requested id."""


class UnknownProgressionError(VoicedrillError, ValueError):
    """No progression template is registered under the requested id."""


class SettingsError(VoicedrillError, ValueError):
    """A session settings record holds an invalid value."""
