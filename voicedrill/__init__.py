"""voicedrill: jazz piano voicing drills with voice-led left/right hand voicings."""

__version__ = "0.1.0"
