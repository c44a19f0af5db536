"""Progression templates and their realization in a concrete key."""

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from voicedrill.chord_types import ChordType, format_chord_symbol, format_degree_symbol
from voicedrill.exceptions import UnknownProgressionError
from voicedrill.pitch import degree_root, transpose_note_name


@dataclass(frozen=True)
class ProgressionChord:
    """
    One chord of a template, relative to the key.

    Attributes:
        degree:     Major-scale degree of the root (1-7).
        chord_type: Chord type built on that root.
        symbol:     Roman-numeral display symbol, e.g. "iim7".
        flat:       Lower the degree root a semitone (bVII, bVI).
    """

    degree: int
    chord_type: ChordType
    symbol: str
    flat: bool = False


@dataclass(frozen=True)
class ProgressionTemplate:
    """A named, key-independent chord progression."""

    id: str
    name: str
    short_name: str
    chords: tuple[ProgressionChord, ...]
    description: str = ""


@dataclass(frozen=True)
class RealizedChord:
    """
    A template chord instantiated in a key.

    Attributes:
        root:       Root note name, e.g. "D".
        chord_type: Chord type.
        symbol:     Concrete chord symbol, e.g. "Dm7".
        degree:     Scale degree the chord came from.
        roman:      Roman-numeral symbol from the template, e.g. "iim7".
    """

    root: str
    chord_type: ChordType
    symbol: str
    degree: int
    roman: str = ""


def _chord(degree: int, chord_type: ChordType, flat: bool = False) -> ProgressionChord:
    return ProgressionChord(degree, chord_type, format_degree_symbol(degree, chord_type, flat), flat)


_M7 = ChordType.M7
_DOM7 = ChordType.DOM7
_MAJ7 = ChordType.MAJ7

PROGRESSION_TEMPLATES: tuple[ProgressionTemplate, ...] = (
    ProgressionTemplate(
        "ii-v-i-major", "ii-V-I (Major)", "ii-V-I",
        (_chord(2, _M7), _chord(5, _DOM7), _chord(1, _MAJ7)),
        "The most common jazz progression",
    ),
    ProgressionTemplate(
        "ii-v-i-minor", "ii-V-i (Minor)", "ii-V-i",
        (_chord(2, ChordType.M7_FLAT5), _chord(5, ChordType.DOM7_FLAT9), _chord(1, _M7)),
        "Minor key ii-V-i with altered dominant",
    ),
    ProgressionTemplate(
        "i-vi-ii-v", "I-vi-ii-V (Turnaround)", "Turnaround",
        (_chord(1, _MAJ7), _chord(6, _M7), _chord(2, _M7), _chord(5, _DOM7)),
        "Classic turnaround progression",
    ),
    ProgressionTemplate(
        "iii-vi-ii-v", "iii-vi-ii-V", "iii-vi-ii-V",
        (_chord(3, _M7), _chord(6, _DOM7), _chord(2, _M7), _chord(5, _DOM7)),
        "Extended turnaround with secondary dominant",
    ),
    ProgressionTemplate(
        "backdoor", "Backdoor (iv-bVII-I)", "Backdoor",
        (_chord(4, _M7), _chord(7, _DOM7, flat=True), _chord(1, _MAJ7)),
        "Backdoor resolution via bVII",
    ),
    ProgressionTemplate(
        "sus-cadence", "Sus Cadence (ii-V9sus-I)", "Sus Cadence",
        (_chord(2, _M7), _chord(5, ChordType.DOM9_SUS), _chord(1, _MAJ7)),
        "Smooth sus4 resolution",
    ),
    ProgressionTemplate(
        "rhythm-changes-a", "Rhythm Changes A", "Rhythm A",
        (_chord(1, _MAJ7), _chord(6, _DOM7), _chord(2, _M7), _chord(5, _DOM7)) * 2,
        "First 8 bars of rhythm changes",
    ),
    ProgressionTemplate(
        "minor-blues", "Minor Blues (first 4)", "Minor Blues",
        (_chord(1, _M7), _chord(4, _M7), _chord(1, _M7), _chord(1, _M7)),
        "First 4 bars of minor blues",
    ),
    ProgressionTemplate(
        "coltrane-turnaround", "Coltrane Changes", "Coltrane",
        (
            _chord(1, _MAJ7),
            ProgressionChord(3, _DOM7, "V7/bVI", flat=True),  # bIII7, the dominant of bVI
            _chord(6, _MAJ7, flat=True),
            _chord(5, _DOM7),
        ),
        "Giant Steps-style changes (simplified)",
    ),
    ProgressionTemplate(
        "altered-ii-v-i", "Altered ii-V-I", "Altered ii-V-I",
        (_chord(2, _M7), _chord(5, ChordType.DOM7_ALT), _chord(1, _MAJ7)),
        "ii-V-I with fully altered dominant",
    ),
    ProgressionTemplate(
        "minor-cliche", "Minor Line Cliche", "Minor Cliche",
        (_chord(1, _M7), _chord(1, ChordType.M_MAJ7), _chord(1, _M7), _chord(1, ChordType.M6)),
        "Descending chromatic line on minor",
    ),
)


def get_progression(template_id: str) -> ProgressionTemplate:
    """
    Return the template registered under *template_id*.

    Raises:
        UnknownProgressionError: If no template has that id.
    """
    for template in PROGRESSION_TEMPLATES:
        if template.id == template_id:
            return template
    known = ", ".join(t.id for t in PROGRESSION_TEMPLATES)
    raise UnknownProgressionError(f"Unknown progression '{template_id}'. Use one of: {known}.")


def random_template(rng: np.random.Generator | None = None) -> ProgressionTemplate:
    """Pick a progression template uniformly at random."""
    rng = rng if rng is not None else np.random.default_rng()
    return PROGRESSION_TEMPLATES[int(rng.integers(len(PROGRESSION_TEMPLATES)))]


def realize_progression(
    template: ProgressionTemplate,
    key: str,
    prefer_flats: bool = True,
) -> list[RealizedChord]:
    """
    Instantiate *template* in *key*.

    Each root is the major-scale degree root of the key, lowered one more
    semitone for chords marked ``flat``.
    """
    realized: list[RealizedChord] = []
    for chord in template.chords:
        root = degree_root(key, chord.degree, prefer_flats)
        if chord.flat:
            root = transpose_note_name(root, -1, prefer_flats)
        realized.append(
            RealizedChord(
                root=root,
                chord_type=chord.chord_type,
                symbol=format_chord_symbol(root, chord.chord_type),
                degree=chord.degree,
                roman=chord.symbol,
            )
        )
    return realized


def extend_progression(chords: Sequence[RealizedChord], target_bars: int) -> list[RealizedChord]:
    """
    Repeat or truncate *chords* to exactly *target_bars* entries.

    A progression that is already long enough is truncated to its first
    *target_bars* chords; a shorter one repeats from the start and the last
    repetition is cut short. Empty input gives an empty list.
    """
    if not chords or target_bars <= 0:
        return []
    if len(chords) >= target_bars:
        return list(chords[:target_bars])

    result: list[RealizedChord] = []
    while len(result) < target_bars:
        remaining = target_bars - len(result)
        result.extend(chords[:remaining])
    return result
