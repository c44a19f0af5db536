"""Pitch arithmetic: note names, MIDI pitch numbers and transposition."""

from dataclasses import dataclass

from voicedrill.exceptions import UnknownNoteError

# ── MIDI constants ──────────────────────────────────────────────────────────
SEMITONES_PER_OCTAVE = 12
MIDDLE_C_MIDI = 60  # C4 in Scientific Pitch Notation

NOTE_NAMES_SHARP: tuple[str, ...] = (
    "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B",
)
NOTE_NAMES_FLAT: tuple[str, ...] = (
    "C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B",
)

#: Semitone offsets of the major scale, indexed by scale degree - 1.
MAJOR_SCALE_INTERVALS: tuple[int, ...] = (0, 2, 4, 5, 7, 9, 11)


def note_names(prefer_flats: bool = True) -> tuple[str, ...]:
    """Return the 12 pitch-class spellings for the session's enharmonic choice."""
    return NOTE_NAMES_FLAT if prefer_flats else NOTE_NAMES_SHARP


def note_index(name: str) -> int:
    """
    Return the pitch class (0-11) of a note name.

    Both spellings are accepted, so ``"C#"`` and ``"Db"`` both give 1.

    Raises:
        UnknownNoteError: If *name* is not one of the 17 known spellings.
    """
    if name in NOTE_NAMES_SHARP:
        return NOTE_NAMES_SHARP.index(name)
    if name in NOTE_NAMES_FLAT:
        return NOTE_NAMES_FLAT.index(name)
    raise UnknownNoteError(f"Unknown note name '{name}'.")


def pitch_class_to_midi(pitch_class: int, octave: int) -> int:
    """
    Convert a pitch class (0-11) and an octave number to an absolute MIDI note.

    MIDI octave numbering: C-1 = 0, C0 = 12, C1 = 24, ... C4 (Middle C) = 60.
    """
    return (octave + 1) * SEMITONES_PER_OCTAVE + pitch_class


@dataclass(frozen=True)
class Note:
    """
    A pitched note.

    The MIDI pitch is the source of truth; ``name`` and ``octave`` are its
    projections under one enharmonic spelling. Build notes with
    :meth:`from_pitch` so the three fields always agree.

    Attributes:
        name:   Pitch-class spelling, e.g. ``"Eb"``.
        octave: Scientific octave number (C4 = middle C).
        pitch:  MIDI note number.
    """

    name: str
    octave: int
    pitch: int

    @classmethod
    def from_pitch(cls, pitch: int, prefer_flats: bool = True) -> "Note":
        octave = pitch // SEMITONES_PER_OCTAVE - 1
        name = note_names(prefer_flats)[pitch % SEMITONES_PER_OCTAVE]
        return cls(name=name, octave=octave, pitch=pitch)

    @property
    def pitch_class(self) -> int:
        return self.pitch % SEMITONES_PER_OCTAVE

    def __str__(self) -> str:
        return f"{self.name}{self.octave}"


def pitch_to_note(pitch: int, prefer_flats: bool = True) -> Note:
    """Return the :class:`Note` for a MIDI pitch number."""
    return Note.from_pitch(pitch, prefer_flats)


def note_to_pitch(name: str, octave: int) -> int:
    """Return the MIDI pitch of a note name in a given octave (C4 = 60)."""
    return pitch_class_to_midi(note_index(name), octave)


def transpose_note_name(name: str, semitones: int, prefer_flats: bool = True) -> str:
    """Transpose a note name by *semitones* (may be negative), modulo 12."""
    index = (note_index(name) + semitones) % SEMITONES_PER_OCTAVE
    return note_names(prefer_flats)[index]


def degree_root(key: str, degree: int, prefer_flats: bool = True) -> str:
    """
    Return the root of major-scale degree *degree* (1-7) in *key*.

    Degrees beyond 7 wrap around the scale, so degree 8 is the tonic again.
    """
    semitones = MAJOR_SCALE_INTERVALS[(degree - 1) % len(MAJOR_SCALE_INTERVALS)]
    return transpose_note_name(key, semitones, prefer_flats)


def format_notes(notes: list[Note] | tuple[Note, ...]) -> str:
    """Format notes for display, e.g. ``"E3 B3 D4"``."""
    return " ".join(str(note) for note in notes)
