"""Theory tables: chord types, their defining intervals and display names."""

from dataclasses import dataclass
from enum import Enum

from voicedrill.exceptions import UnknownChordTypeError


class ChordType(str, Enum):
    """Closed set of chord types the practice tool knows how to voice."""

    MAJ7 = "maj7"
    MAJ6 = "maj6"
    SIX = "6"
    M7 = "m7"
    M6 = "m6"
    M_MAJ7 = "mMaj7"
    DOM7 = "7"
    DOM7_FLAT9 = "7b9"
    DOM7_SHARP9 = "7#9"
    DOM7_SHARP5 = "7#5"
    DOM7_FLAT13 = "7b13"
    DOM7_ALT = "7alt"
    M7_FLAT5 = "m7b5"
    DIM7 = "dim7"
    DOM7_SUS = "7sus"
    DOM9_SUS = "9sus"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ChordDefinition:
    """
    Reference data for one chord type.

    Attributes:
        chord_type:  The chord type this entry describes.
        name:        Long display name, e.g. "Dominant 7 flat 9".
        short_name:  Suffix used in chord symbols, e.g. "7(b9)".
        intervals:   Defining tones as semitones above the root; starts with 0.
        tensions:    Available tensions, for display only.
        description: One-line character sketch.
    """

    chord_type: ChordType
    name: str
    short_name: str
    intervals: tuple[int, ...]
    tensions: tuple[int, ...]
    description: str


#: Interval names used when listing a chord's tones.
INTERVAL_NAMES: dict[int, str] = {
    0: "R",
    1: "b2",
    2: "2/9",
    3: "b3/#9",
    4: "3",
    5: "4/11",
    6: "b5/#11",
    7: "5",
    8: "#5/b13",
    9: "6/13",
    10: "b7",
    11: "7",
}

#: Shorter names used when labelling the tones of a voicing.
DEGREE_NAMES: dict[int, str] = {
    0: "R",
    1: "b9",
    2: "9",
    3: "#9",
    4: "3",
    5: "11",
    6: "#11",
    7: "5",
    8: "b13",
    9: "13",
    10: "b7",
    11: "7",
}

MINOR_FAMILY: frozenset[ChordType] = frozenset(
    {ChordType.M7, ChordType.M6, ChordType.M_MAJ7, ChordType.M7_FLAT5, ChordType.DIM7}
)

ROMAN_NUMERALS: tuple[str, ...] = ("I", "II", "III", "IV", "V", "VI", "VII")

# ── Chord definitions ───────────────────────────────────────────────────────

CHORD_DEFINITIONS: dict[ChordType, ChordDefinition] = {
    ChordType.MAJ7: ChordDefinition(
        ChordType.MAJ7, "Major 7th", "maj7",
        intervals=(0, 4, 7, 11),  # R 3 5 7
        tensions=(2, 6, 9),  # 9 #11 13
        description="Bright, stable major sound with major 7th",
    ),
    ChordType.MAJ6: ChordDefinition(
        ChordType.MAJ6, "Major 6th", "6",
        intervals=(0, 4, 7, 9),  # R 3 5 6
        tensions=(2,),
        description='Classic major sound, less "jazzy" than maj7',
    ),
    ChordType.SIX: ChordDefinition(
        ChordType.SIX, "Major 6th", "6",
        intervals=(0, 4, 7, 9),
        tensions=(2,),
        description='Classic major sound, less "jazzy" than maj7',
    ),
    ChordType.M7: ChordDefinition(
        ChordType.M7, "Minor 7th", "m7",
        intervals=(0, 3, 7, 10),  # R b3 5 b7
        tensions=(2, 5, 9),
        description="Warm minor sound, very common in jazz",
    ),
    ChordType.M6: ChordDefinition(
        ChordType.M6, "Minor 6th", "m6",
        intervals=(0, 3, 7, 9),
        tensions=(2,),
        description="Minor with major 6th, tonic minor sound",
    ),
    ChordType.M_MAJ7: ChordDefinition(
        ChordType.M_MAJ7, "Minor Major 7th", "m(maj7)",
        intervals=(0, 3, 7, 11),
        tensions=(2, 9),
        description="Dramatic minor sound with major 7th tension",
    ),
    ChordType.DOM7: ChordDefinition(
        ChordType.DOM7, "Dominant 7th", "7",
        intervals=(0, 4, 7, 10),  # R 3 5 b7
        tensions=(2, 9),
        description="The classic V chord, creates tension/resolution",
    ),
    ChordType.DOM7_FLAT9: ChordDefinition(
        ChordType.DOM7_FLAT9, "Dominant 7 flat 9", "7(b9)",
        intervals=(0, 4, 7, 10, 1),
        tensions=(8,),
        description="Dark dominant, common on V to minor",
    ),
    ChordType.DOM7_SHARP9: ChordDefinition(
        ChordType.DOM7_SHARP9, "Dominant 7 sharp 9", "7(#9)",
        intervals=(0, 4, 7, 10, 3),
        tensions=(8,),
        description='The "Hendrix chord", bluesy and aggressive',
    ),
    ChordType.DOM7_SHARP5: ChordDefinition(
        ChordType.DOM7_SHARP5, "Dominant 7 sharp 5", "7(#5)",
        intervals=(0, 4, 8, 10),
        tensions=(2, 1),
        description="Augmented dominant, creates strong pull",
    ),
    ChordType.DOM7_FLAT13: ChordDefinition(
        ChordType.DOM7_FLAT13, "Dominant 7 flat 13", "7(b13)",
        intervals=(0, 4, 7, 10, 8),
        tensions=(2,),
        description="Rich altered sound, common approach chord",
    ),
    ChordType.DOM7_ALT: ChordDefinition(
        ChordType.DOM7_ALT, "Altered Dominant", "7alt",
        intervals=(0, 4, 8, 10, 1, 3),  # R 3 #5 b7 b9 #9
        tensions=(),
        description="Fully altered dominant, maximum tension",
    ),
    ChordType.M7_FLAT5: ChordDefinition(
        ChordType.M7_FLAT5, "Half-Diminished", "m7b5",
        intervals=(0, 3, 6, 10),
        tensions=(2, 5, 8),
        description="The ii chord in minor keys",
    ),
    ChordType.DIM7: ChordDefinition(
        ChordType.DIM7, "Diminished 7th", "°7",
        intervals=(0, 3, 6, 9),
        tensions=(),
        description="Symmetric, can resolve multiple ways",
    ),
    ChordType.DOM7_SUS: ChordDefinition(
        ChordType.DOM7_SUS, "Dominant 7 sus4", "7sus4",
        intervals=(0, 5, 7, 10),
        tensions=(2, 9),
        description="Suspended dominant, delays resolution",
    ),
    ChordType.DOM9_SUS: ChordDefinition(
        ChordType.DOM9_SUS, "Dominant 9 sus4", "9sus4",
        intervals=(0, 5, 7, 10, 2),
        tensions=(9,),
        description="Rich suspended sound with 9th",
    ),
}

CHORD_CATEGORIES: dict[str, tuple[ChordType, ...]] = {
    "Major": (ChordType.MAJ7, ChordType.MAJ6, ChordType.SIX),
    "Minor": (ChordType.M7, ChordType.M6, ChordType.M_MAJ7),
    "Dominant": (
        ChordType.DOM7,
        ChordType.DOM7_FLAT9,
        ChordType.DOM7_SHARP9,
        ChordType.DOM7_SHARP5,
        ChordType.DOM7_FLAT13,
        ChordType.DOM7_ALT,
    ),
    "Diminished": (ChordType.M7_FLAT5, ChordType.DIM7),
    "Suspended": (ChordType.DOM7_SUS, ChordType.DOM9_SUS),
}

# Degree-symbol suffixes differ from chord-symbol suffixes for a few types.
_DEGREE_SUFFIXES: dict[ChordType, str] = {
    ChordType.M7_FLAT5: "ø7",
    ChordType.DOM7_FLAT9: "7b9",
    ChordType.DOM7_SUS: "7sus",
    ChordType.DOM9_SUS: "9sus",
}


def parse_chord_type(text: str | ChordType) -> ChordType:
    """
    Resolve a chord-type tag such as ``"m7b5"`` to a :class:`ChordType`.

    Raises:
        UnknownChordTypeError: If the tag is not a supported chord type.
    """
    try:
        return ChordType(text)
    except ValueError:
        supported = ", ".join(ct.value for ct in ChordType)
        raise UnknownChordTypeError(
            f"Unknown chord type '{text}'. Use one of: {supported}."
        ) from None


def is_minor_family(chord_type: ChordType) -> bool:
    return chord_type in MINOR_FAMILY


def degree_name(interval: int, chord_type: ChordType) -> str:
    """
    Name a voicing tone relative to the chord root, e.g. 10 -> "b7".

    Three semitones read as "b3" on minor-family chords and "#9" elsewhere.
    """
    normalized = interval % 12
    if normalized == 3:
        return "b3" if is_minor_family(chord_type) else "#9"
    return DEGREE_NAMES[normalized]


def format_chord_symbol(root: str, chord_type: ChordType) -> str:
    """Concrete chord symbol, e.g. ``("D", m7) -> "Dm7"``."""
    return f"{root}{CHORD_DEFINITIONS[chord_type].short_name}"


def format_degree_symbol(degree: int, chord_type: ChordType, flat: bool = False) -> str:
    """
    Roman-numeral symbol for a chord on a scale degree, e.g. ``"iim7"``.

    Minor-family chords use a lowercase numeral; *flat* prefixes ``"b"``.
    """
    numeral = ROMAN_NUMERALS[(degree - 1) % len(ROMAN_NUMERALS)]
    if is_minor_family(chord_type):
        numeral = numeral.lower()
    suffix = _DEGREE_SUFFIXES.get(chord_type, CHORD_DEFINITIONS[chord_type].short_name)
    prefix = "b" if flat else ""
    return f"{prefix}{numeral}{suffix}"
