"""Unit tests for voicing realization and voice-leading selection."""

from dataclasses import dataclass
from itertools import product

import numpy as np
import pytest

from voicedrill.chord_types import ChordType
from voicedrill.exceptions import MissingRecipeError
from voicedrill.pitch import NOTE_NAMES_FLAT, Note
from voicedrill.progressions import get_progression, realize_progression
from voicedrill.voicing_recipes import VOICING_RECIPES, VoicingRecipe, VoicingStyle
from voicedrill.voicing_strategy import (
    LH_ANCHORS,
    LH_HIGH,
    LH_LOW,
    MISSING_NOTE_PENALTY,
    RH_ANCHORS,
    RH_HIGH,
    RH_LOW,
    RandomVoicer,
    SmoothVoicer,
    Voicing,
    choose_random_voicing,
    choose_smooth_voicing,
    generate_progression_voicings,
    get_voicer,
    realize_voicing,
    voice_leading_distance,
)

MAJ7_SHELL = VOICING_RECIPES[ChordType.MAJ7][0]


def _recipe(recipe_id: str, lh: tuple[int, ...], rh: tuple[int, ...] = ()) -> VoicingRecipe:
    return VoicingRecipe(recipe_id, recipe_id, VoicingStyle.SHELL, lh, rh)


def _voicing(lh: list[int], rh: list[int], chord_type: ChordType = ChordType.DOM7) -> Voicing:
    return Voicing(
        root="G",
        chord_type=chord_type,
        recipe=_recipe("hand-built", ()),
        left_hand_notes=tuple(Note.from_pitch(p) for p in lh),
        right_hand_notes=tuple(Note.from_pitch(p) for p in rh),
    )


# ---------------------------------------------------------------------------
# realize_voicing
# ---------------------------------------------------------------------------

def test_c_maj7_shell_places_guide_tones_and_tensions() -> None:
    voicing = realize_voicing("C", ChordType.MAJ7, MAJ7_SHELL)

    assert [n.name for n in voicing.left_hand_notes] == ["B", "E"]
    assert [n.pitch for n in voicing.left_hand_notes] == [47, 52]
    assert [str(n) for n in voicing.right_hand_notes] == ["D4", "G4"]


def test_realize_voicing_is_deterministic() -> None:
    recipe = VOICING_RECIPES[ChordType.M7][1]
    first = realize_voicing("Eb", ChordType.M7, recipe, True, 45, 70)
    second = realize_voicing("Eb", ChordType.M7, recipe, True, 45, 70)
    assert first == second


def test_every_catalog_voicing_stays_in_its_register() -> None:
    for chord_type, recipes in VOICING_RECIPES.items():
        for recipe, root, lh_anchor, rh_anchor in product(
            recipes, NOTE_NAMES_FLAT, LH_ANCHORS, RH_ANCHORS
        ):
            voicing = realize_voicing(root, chord_type, recipe, True, lh_anchor, rh_anchor)
            for note in voicing.left_hand_notes:
                assert LH_LOW <= note.pitch <= LH_HIGH, (recipe.id, root, note)
            for note in voicing.right_hand_notes:
                assert RH_LOW <= note.pitch <= RH_HIGH, (recipe.id, root, note)


def test_every_catalog_hand_is_strictly_ascending() -> None:
    for chord_type, recipes in VOICING_RECIPES.items():
        for recipe, root in product(recipes, NOTE_NAMES_FLAT):
            voicing = realize_voicing(root, chord_type, recipe)
            for notes in (voicing.left_hand_notes, voicing.right_hand_notes):
                pitches = [n.pitch for n in notes]
                assert all(a < b for a, b in zip(pitches, pitches[1:])), (recipe.id, root)


def test_note_count_matches_recipe() -> None:
    recipe = VOICING_RECIPES[ChordType.DOM7][2]  # rootless A: four LH notes, empty RH
    voicing = realize_voicing("G", ChordType.DOM7, recipe)
    assert len(voicing.left_hand_notes) == 4
    assert voicing.right_hand_notes == ()


def test_empty_recipe_yields_empty_hands() -> None:
    voicing = realize_voicing("C", ChordType.MAJ7, _recipe("empty", ()))
    assert voicing.left_hand_notes == ()
    assert voicing.right_hand_notes == ()


def test_interval_above_octave_reduces_to_pitch_class() -> None:
    high_ninth = realize_voicing("C", ChordType.MAJ7, _recipe("ninth-up", (4,), (14,)))
    ninth = realize_voicing("C", ChordType.MAJ7, _recipe("ninth", (4,), (2,)))
    assert high_ninth.right_hand_notes == ninth.right_hand_notes


def test_notes_follow_enharmonic_preference() -> None:
    flats = realize_voicing("Db", ChordType.MAJ7, MAJ7_SHELL, prefer_flats=True)
    sharps = realize_voicing("C#", ChordType.MAJ7, MAJ7_SHELL, prefer_flats=False)
    assert [n.pitch for n in flats.all_notes] == [n.pitch for n in sharps.all_notes]
    assert "Eb" in [n.name for n in flats.right_hand_notes]
    assert "D#" in [n.name for n in sharps.right_hand_notes]


def test_anchor_outside_register_is_clamped() -> None:
    voicing = realize_voicing("C", ChordType.MAJ7, MAJ7_SHELL, True, 100, 20)
    assert all(LH_LOW <= n.pitch <= LH_HIGH for n in voicing.left_hand_notes)
    assert all(RH_LOW <= n.pitch <= RH_HIGH for n in voicing.right_hand_notes)


def test_crowded_recipe_keeps_register_but_may_double_a_pitch() -> None:
    # The crowding drop for the second C lands below the first, so the third
    # C is no longer pushed up and doubles the first one.
    voicing = realize_voicing("C", ChordType.MAJ7, _recipe("crowded", (0, 12, 24)))
    pitches = [n.pitch for n in voicing.left_hand_notes]
    assert pitches == [36, 48, 48]
    assert all(LH_LOW <= p <= LH_HIGH for p in pitches)


def test_voicing_helpers() -> None:
    voicing = realize_voicing("C", ChordType.MAJ7, MAJ7_SHELL)
    assert voicing.symbol == "Cmaj7"
    assert voicing.pitches == (47, 52, 62, 67)
    assert voicing.all_notes == voicing.left_hand_notes + voicing.right_hand_notes


# ---------------------------------------------------------------------------
# voice_leading_distance
# ---------------------------------------------------------------------------

def test_distance_is_zero_for_identical_voicings() -> None:
    voicing = realize_voicing("F", ChordType.DOM7, VOICING_RECIPES[ChordType.DOM7][0])
    assert voice_leading_distance(voicing, voicing) == 0


def test_distance_ignores_note_order() -> None:
    previous = _voicing([47, 52], [62, 67])
    reversed_previous = _voicing([52, 47], [67, 62])
    candidate = _voicing([48, 53], [])
    assert voice_leading_distance(previous, candidate) == voice_leading_distance(
        reversed_previous, candidate
    )


def test_distance_sums_nearest_note_moves() -> None:
    previous = _voicing([47, 52], [62, 67])
    candidate = _voicing([48, 53], [])
    assert voice_leading_distance(previous, candidate) == 1 + 1 + 9 + 14


def test_distance_penalizes_missing_candidate_notes() -> None:
    previous = _voicing([47, 52], [62])
    assert voice_leading_distance(previous, _voicing([], [])) == 3 * MISSING_NOTE_PENALTY


def test_distance_from_empty_previous_is_zero() -> None:
    assert voice_leading_distance(_voicing([], []), _voicing([48], [60])) == 0


# ---------------------------------------------------------------------------
# Smooth selection
# ---------------------------------------------------------------------------

def test_smooth_prefers_candidate_sharing_pitches() -> None:
    # G7 holding G2 B2 | D4 F4 resolves to Cmaj7.
    previous = _voicing([43, 47], [62, 65])
    no_common = _recipe("no-common-tones", (0, 4), (7, 11))
    common = _recipe("common-tones", (7, 11), (4, 7))
    voicer = SmoothVoicer(recipes={ChordType.MAJ7: (no_common, common)})

    voicing = voicer.voice("C", ChordType.MAJ7, previous)

    assert voicing.recipe.id == "common-tones"
    assert [n.pitch for n in voicing.left_hand_notes] == [43, 47]


def test_smooth_ties_go_to_first_recipe() -> None:
    previous = _voicing([47, 52], [62, 67])
    first = _recipe("first", (4, 11), (2, 7))
    second = _recipe("second", (4, 11), (2, 7))
    voicer = SmoothVoicer(recipes={ChordType.MAJ7: (first, second)})
    assert voicer.voice("C", ChordType.MAJ7, previous).recipe.id == "first"


def test_smooth_without_previous_uses_first_recipe_at_default_anchors() -> None:
    voicing = choose_smooth_voicing("C", ChordType.MAJ7, None)
    assert voicing == realize_voicing("C", ChordType.MAJ7, MAJ7_SHELL)


def test_smooth_respects_style_filter() -> None:
    previous = realize_voicing("D", ChordType.M7, VOICING_RECIPES[ChordType.M7][0])
    voicing = choose_smooth_voicing("G", ChordType.DOM7, previous, [VoicingStyle.ROOTLESS_B])
    assert voicing.recipe.style is VoicingStyle.ROOTLESS_B


def test_unmatched_style_falls_back_to_first_recipe() -> None:
    voicing = choose_smooth_voicing("C", ChordType.MAJ7, None, [VoicingStyle.QUARTAL])
    assert voicing.recipe.id == "maj7-shell"


def test_smooth_choice_is_minimal_over_candidate_grid() -> None:
    previous = realize_voicing("D", ChordType.M7, VOICING_RECIPES[ChordType.M7][1])
    chosen = choose_smooth_voicing("G", ChordType.DOM7, previous)
    best = min(
        voice_leading_distance(previous, realize_voicing("G", ChordType.DOM7, r, True, lh, rh))
        for r, lh, rh in product(VOICING_RECIPES[ChordType.DOM7], LH_ANCHORS, RH_ANCHORS)
    )
    assert voice_leading_distance(previous, chosen) == best


def test_missing_recipes_is_a_configuration_error() -> None:
    with pytest.raises(MissingRecipeError):
        SmoothVoicer(recipes={}).voice("C", ChordType.MAJ7)
    with pytest.raises(MissingRecipeError):
        RandomVoicer(recipes={}).voice("C", ChordType.MAJ7)


# ---------------------------------------------------------------------------
# Random selection
# ---------------------------------------------------------------------------

def test_random_voicing_is_reproducible_with_seed() -> None:
    first = choose_random_voicing("A", ChordType.M7, rng=np.random.default_rng(7))
    second = choose_random_voicing("A", ChordType.M7, rng=np.random.default_rng(7))
    assert first == second


def test_random_voicing_comes_from_candidate_grid() -> None:
    styles = [VoicingStyle.SHELL, VoicingStyle.QUARTAL]
    rng = np.random.default_rng(3)
    for _ in range(20):
        voicing = choose_random_voicing("F", ChordType.M7, styles, rng=rng)
        assert voicing.recipe.style in styles
        assert any(
            voicing == realize_voicing("F", ChordType.M7, voicing.recipe, True, lh, rh)
            for lh, rh in product(LH_ANCHORS, RH_ANCHORS)
        )


# ---------------------------------------------------------------------------
# Progressions
# ---------------------------------------------------------------------------

def test_progression_voicings_chain_previous_results() -> None:
    chords = realize_progression(get_progression("i-vi-ii-v"), "F")
    voicings = generate_progression_voicings(chords, smooth=True)

    assert len(voicings) == len(chords)
    assert voicings[0] == choose_smooth_voicing("F", ChordType.MAJ7, None)
    for prev, chord, voicing in zip(voicings, chords[1:], voicings[1:]):
        assert voicing == choose_smooth_voicing(chord.root, chord.chord_type, prev)


def test_progression_accepts_root_and_type_pairs() -> None:
    pairs = [("D", ChordType.M7), ("G", ChordType.DOM7), ("C", ChordType.MAJ7)]
    voicings = generate_progression_voicings(pairs)
    assert [v.symbol for v in voicings] == ["Dm7", "G7", "Cmaj7"]


@dataclass(frozen=True)
class _LeadSheetChord:
    root: str
    chord_type: ChordType


def test_progression_accepts_objects_with_root_and_chord_type() -> None:
    chords = [_LeadSheetChord("D", ChordType.M7), _LeadSheetChord("G", ChordType.DOM7)]
    pairs = [("D", ChordType.M7), ("G", ChordType.DOM7)]
    assert generate_progression_voicings(chords) == generate_progression_voicings(pairs)


def test_smooth_tie_across_anchors_keeps_first_anchor_pair() -> None:
    # A single-note hand voiced on its own pitch class lands on the same note
    # from every anchor, so all nine anchor pairs tie.
    previous = _voicing([48], [67])
    recipe = _recipe("root-and-fifth", (0,), (7,))
    voicing = SmoothVoicer(recipes={ChordType.MAJ7: (recipe,)}).voice("C", ChordType.MAJ7, previous)
    assert voicing == realize_voicing("C", ChordType.MAJ7, recipe, True, LH_ANCHORS[0], RH_ANCHORS[0])


def test_random_progression_matches_length() -> None:
    pairs = [("C", ChordType.MAJ7)] * 5
    voicings = generate_progression_voicings(pairs, smooth=False, rng=np.random.default_rng(1))
    assert len(voicings) == 5


def test_empty_progression() -> None:
    assert generate_progression_voicings([]) == []


def test_get_voicer_selects_strategy() -> None:
    assert isinstance(get_voicer(True), SmoothVoicer)
    assert isinstance(get_voicer(False), RandomVoicer)
