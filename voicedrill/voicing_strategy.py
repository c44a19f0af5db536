"""VoicingStrategy: realizes voicing recipes as pitched notes and picks voicings for progressions."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol, Union

import numpy as np

from voicedrill.chord_types import ChordType, format_chord_symbol
from voicedrill.pitch import SEMITONES_PER_OCTAVE, Note, note_index
from voicedrill.voicing_recipes import (
    VOICING_RECIPES,
    VoicingRecipe,
    VoicingStyle,
    registered_recipes,
    voicings_for_chord,
)

logger = logging.getLogger(__name__)

# ── Register windows (MIDI, inclusive) ──────────────────────────────────────
LH_LOW = 36   # C2
LH_HIGH = 55  # G3
RH_LOW = 55   # G3, same as LH_HIGH
RH_HIGH = 84  # C6

DEFAULT_LH_ANCHOR = 48  # C3
DEFAULT_RH_ANCHOR = 67  # G4

#: Alternate anchors tried by the smooth and random voicers.
LH_ANCHORS: tuple[int, ...] = (45, 48, 51)  # A2, C3, Eb3
RH_ANCHORS: tuple[int, ...] = (64, 67, 70)  # E4, G4, Bb4

#: Octave shifts needed to bring a pitch into its window. Anchors are clamped
#: into the window first, so a placed pitch is never more than one octave out.
MAX_OCTAVE_SHIFTS = 2

#: Cost of a previous note when the candidate voicing has no notes at all.
MISSING_NOTE_PENALTY = 12


@dataclass(frozen=True)
class Voicing:
    """
    A chord realized as concrete notes for each hand.

    Attributes:
        root:             Chord root name, e.g. "Bb".
        chord_type:       The chord type that was voiced.
        recipe:           The recipe the notes were realized from.
        left_hand_notes:  Left-hand notes, ascending by pitch.
        right_hand_notes: Right-hand notes, ascending by pitch.
    """

    root: str
    chord_type: ChordType
    recipe: VoicingRecipe
    left_hand_notes: tuple[Note, ...] = ()
    right_hand_notes: tuple[Note, ...] = ()

    @property
    def all_notes(self) -> tuple[Note, ...]:
        """Both hands combined, ascending by pitch."""
        return tuple(sorted(self.left_hand_notes + self.right_hand_notes, key=lambda n: n.pitch))

    @property
    def pitches(self) -> tuple[int, ...]:
        return tuple(note.pitch for note in self.all_notes)

    @property
    def symbol(self) -> str:
        return format_chord_symbol(self.root, self.chord_type)


class ChordLike(Protocol):
    """Anything naming a chord root and type, e.g. RealizedChord."""

    @property
    def root(self) -> str: ...

    @property
    def chord_type(self) -> ChordType: ...


ChordInput = Union[tuple[str, ChordType], ChordLike]


# ── Realization ──────────────────────────────────────────────────────────────

def _clamp_to_window(pitch: int, low: int, high: int) -> int:
    """Shift *pitch* by whole octaves until it lies in ``[low, high]``."""
    for _ in range(MAX_OCTAVE_SHIFTS):
        if pitch < low:
            pitch += SEMITONES_PER_OCTAVE
        elif pitch > high:
            pitch -= SEMITONES_PER_OCTAVE
        else:
            break
    return pitch


def _nearest_pitch(pitch_class: int, anchor: int) -> int:
    """Return the pitch of *pitch_class* closest to *anchor* (a tritone goes up)."""
    delta = (pitch_class - anchor) % SEMITONES_PER_OCTAVE
    if delta > SEMITONES_PER_OCTAVE // 2:
        delta -= SEMITONES_PER_OCTAVE
    return anchor + delta


def _place_hand(
    root_pitch_class: int,
    intervals: Sequence[int],
    anchor: int,
    low: int,
    high: int,
) -> list[int]:
    """
    Place one hand's intervals as MIDI pitches inside ``[low, high]``.

    Intervals are placed in recipe order. A pitch that does not rise above the
    previously placed one moves up an octave, or, if that passes *high*, down
    two octaves and back into the window. The result is sorted ascending.
    """
    anchor = min(max(anchor, low), high)
    placed: list[int] = []

    for interval in intervals:
        pitch_class = (root_pitch_class + interval) % SEMITONES_PER_OCTAVE
        pitch = _clamp_to_window(_nearest_pitch(pitch_class, anchor), low, high)

        if placed and pitch <= placed[-1]:
            pitch += SEMITONES_PER_OCTAVE
            if pitch > high:
                # Best effort: under register pressure this can land below
                # the previous note, so only the final sort restores order.
                pitch -= 2 * SEMITONES_PER_OCTAVE
                pitch = _clamp_to_window(pitch, low, high)

        placed.append(pitch)

    return sorted(placed)


def realize_voicing(
    root: str,
    chord_type: ChordType,
    recipe: VoicingRecipe,
    prefer_flats: bool = True,
    left_anchor: int = DEFAULT_LH_ANCHOR,
    right_anchor: int = DEFAULT_RH_ANCHOR,
) -> Voicing:
    """
    Realize *recipe* on *root* as concrete notes.

    Pure and deterministic: the same arguments always give the same notes.
    A hand with no intervals yields an empty note tuple.

    Args:
        root:         Chord root name (sharp or flat spelling).
        chord_type:   Chord type being voiced.
        recipe:       Intervals to place in each hand.
        prefer_flats: Spell the resulting notes with flats.
        left_anchor:  Left-hand centre pitch for octave placement.
        right_anchor: Right-hand centre pitch for octave placement.

    Returns:
        Voicing whose left-hand notes lie in [LH_LOW, LH_HIGH] and whose
        right-hand notes lie in [RH_LOW, RH_HIGH].
    """
    root_pc = note_index(root)
    left = _place_hand(root_pc, recipe.left_hand_intervals, left_anchor, LH_LOW, LH_HIGH)
    right = _place_hand(root_pc, recipe.right_hand_intervals, right_anchor, RH_LOW, RH_HIGH)

    return Voicing(
        root=root,
        chord_type=chord_type,
        recipe=recipe,
        left_hand_notes=tuple(Note.from_pitch(p, prefer_flats) for p in left),
        right_hand_notes=tuple(Note.from_pitch(p, prefer_flats) for p in right),
    )


def voice_leading_distance(previous: Voicing, candidate: Voicing) -> int:
    """
    Total movement from *previous* to *candidate*, in semitones.

    Each note of the previous voicing is matched to its nearest note in the
    candidate and the absolute differences are summed. A previous note with
    nothing to move to costs MISSING_NOTE_PENALTY.
    """
    prev = np.array([note.pitch for note in previous.all_notes], dtype=int)
    cand = np.array([note.pitch for note in candidate.all_notes], dtype=int)

    if prev.size == 0:
        return 0
    if cand.size == 0:
        return MISSING_NOTE_PENALTY * int(prev.size)

    distances = np.abs(prev[:, np.newaxis] - cand[np.newaxis, :])
    return int(distances.min(axis=1).sum())


# ── Abstract base ────────────────────────────────────────────────────────────

class VoicingStrategy(ABC):
    """
    Abstract Strategy for choosing a voicing for each chord of a progression.

    Concrete subclasses implement ``voice()``; the shared helper resolves the
    candidate recipes for a chord type under the configured style filter.
    """

    def __init__(
        self,
        styles: Iterable[VoicingStyle] = (),
        prefer_flats: bool = True,
        recipes: Mapping[ChordType, tuple[VoicingRecipe, ...]] = VOICING_RECIPES,
    ) -> None:
        """
        Args:
            styles:       Style filter; empty means every style.
            prefer_flats: Spell realized notes with flats.
            recipes:      Recipe catalog to draw candidates from.
        """
        self.styles = tuple(VoicingStyle(style) for style in styles)
        self.prefer_flats = prefer_flats
        self.recipes = recipes

    def _candidate_recipes(self, chord_type: ChordType) -> tuple[VoicingRecipe, ...]:
        """
        Return the recipes matching the style filter.

        Falls back to the chord type's first registered recipe when the filter
        matches nothing.

        Raises:
            MissingRecipeError: If the chord type has no recipes at all.
        """
        registered = registered_recipes(chord_type, self.recipes)
        recipes = voicings_for_chord(chord_type, self.styles, self.recipes)
        if not recipes:
            logger.debug(
                "No %s recipe matches styles %s; falling back to %s",
                chord_type.value,
                [style.value for style in self.styles],
                registered[0].id,
            )
            return registered[:1]
        return recipes

    @abstractmethod
    def voice(
        self,
        root: str,
        chord_type: ChordType,
        previous: Voicing | None = None,
    ) -> Voicing:
        """
        Choose and realize a voicing for one chord.

        Args:
            root:       Chord root name.
            chord_type: Chord type to voice.
            previous:   The voicing of the preceding chord, if any.
        """

    def voice_progression(self, chords: Iterable[ChordInput]) -> list[Voicing]:
        """
        Voice chords strictly left to right, feeding each result forward.

        Items are ``(root, chord_type)`` pairs or objects with ``root`` and
        ``chord_type`` attributes (e.g. RealizedChord).
        """
        voicings: list[Voicing] = []
        previous: Voicing | None = None
        for chord in chords:
            if isinstance(chord, tuple):
                root, chord_type = chord
            else:
                root, chord_type = chord.root, chord.chord_type
            previous = self.voice(root, chord_type, previous)
            voicings.append(previous)
        return voicings


# ── Concrete strategies ──────────────────────────────────────────────────────

class SmoothVoicer(VoicingStrategy):
    """
    Voice-leading voicer: minimizes hand movement from the previous chord.

    Every candidate recipe is realized at every (LH, RH) anchor pair from
    LH_ANCHORS x RH_ANCHORS and scored with :func:`voice_leading_distance`.
    Only a strictly smaller distance replaces the current best, so ties go to
    the first candidate in recipe order, then left anchor, then right anchor.

    The first chord of a progression has no previous voicing and uses the
    first candidate recipe at the default anchors.
    """

    def voice(
        self,
        root: str,
        chord_type: ChordType,
        previous: Voicing | None = None,
    ) -> Voicing:
        recipes = self._candidate_recipes(chord_type)

        if previous is None:
            return realize_voicing(root, chord_type, recipes[0], self.prefer_flats)

        candidates = (
            realize_voicing(root, chord_type, recipe, self.prefer_flats, lh_anchor, rh_anchor)
            for recipe in recipes
            for lh_anchor in LH_ANCHORS
            for rh_anchor in RH_ANCHORS
        )
        # min() keeps the first of several equally close candidates.
        best = min(candidates, key=lambda candidate: voice_leading_distance(previous, candidate))

        logger.debug(
            "Smooth voicing for %s: %s (distance %d)",
            best.symbol,
            best.recipe.id,
            voice_leading_distance(previous, best),
        )
        return best


class RandomVoicer(VoicingStrategy):
    """
    Random voicer: a uniformly random matching recipe at a random anchor pair.

    Independent of the previous voicing. Pass a seeded
    ``numpy.random.Generator`` for reproducible drills.
    """

    def __init__(
        self,
        styles: Iterable[VoicingStyle] = (),
        prefer_flats: bool = True,
        rng: np.random.Generator | None = None,
        recipes: Mapping[ChordType, tuple[VoicingRecipe, ...]] = VOICING_RECIPES,
    ) -> None:
        super().__init__(styles, prefer_flats, recipes)
        self.rng = rng if rng is not None else np.random.default_rng()

    def voice(
        self,
        root: str,
        chord_type: ChordType,
        previous: Voicing | None = None,
    ) -> Voicing:
        recipes = self._candidate_recipes(chord_type)
        recipe = recipes[int(self.rng.integers(len(recipes)))]
        lh_anchor = LH_ANCHORS[int(self.rng.integers(len(LH_ANCHORS)))]
        rh_anchor = RH_ANCHORS[int(self.rng.integers(len(RH_ANCHORS)))]
        return realize_voicing(root, chord_type, recipe, self.prefer_flats, lh_anchor, rh_anchor)


def get_voicer(
    smooth: bool,
    styles: Iterable[VoicingStyle] = (),
    prefer_flats: bool = True,
    rng: np.random.Generator | None = None,
) -> VoicingStrategy:
    """Return the SmoothVoicer or RandomVoicer for the requested mode."""
    if smooth:
        return SmoothVoicer(styles, prefer_flats)
    return RandomVoicer(styles, prefer_flats, rng=rng)


# ── Public API ───────────────────────────────────────────────────────────────

def choose_smooth_voicing(
    root: str,
    chord_type: ChordType,
    previous: Voicing | None,
    styles: Iterable[VoicingStyle] = (),
    prefer_flats: bool = True,
) -> Voicing:
    """Voicing of *root*/*chord_type* with the least movement from *previous*."""
    return SmoothVoicer(styles, prefer_flats).voice(root, chord_type, previous)


def choose_random_voicing(
    root: str,
    chord_type: ChordType,
    styles: Iterable[VoicingStyle] = (),
    prefer_flats: bool = True,
    rng: np.random.Generator | None = None,
) -> Voicing:
    """
    A random matching voicing of *root*/*chord_type*.

    Raises:
        MissingRecipeError: If the chord type has no registered recipes.
    """
    return RandomVoicer(styles, prefer_flats, rng=rng).voice(root, chord_type)


def generate_progression_voicings(
    chords: Iterable[ChordInput],
    smooth: bool = True,
    styles: Iterable[VoicingStyle] = (),
    prefer_flats: bool = True,
    rng: np.random.Generator | None = None,
) -> list[Voicing]:
    """Voice a whole progression; the result has one voicing per input chord."""
    return get_voicer(smooth, styles, prefer_flats, rng=rng).voice_progression(chords)
