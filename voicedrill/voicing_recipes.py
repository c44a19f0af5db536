"""Voicing recipes: which chord tones go to which hand, per chord type."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum

from voicedrill.chord_types import ChordType
from voicedrill.exceptions import MissingRecipeError, UnknownRecipeError


class VoicingStyle(str, Enum):
    """Recipe style tags used to filter the catalog."""

    SHELL = "shell"
    ROOTLESS_A = "rootless-a"
    ROOTLESS_B = "rootless-b"
    QUARTAL = "quartal"
    FULL = "full"

    def __str__(self) -> str:
        return self.value


STYLE_NAMES: dict[VoicingStyle, str] = {
    VoicingStyle.SHELL: "Shell/Guide Tones",
    VoicingStyle.ROOTLESS_A: "Rootless Type A",
    VoicingStyle.ROOTLESS_B: "Rootless Type B",
    VoicingStyle.QUARTAL: "Quartal/Sus",
    VoicingStyle.FULL: "Full (with Root)",
}


@dataclass(frozen=True)
class VoicingRecipe:
    """
    A named template of which intervals each hand plays.

    Intervals are semitones above the chord root. Values above 11 are
    allowed (14 = a ninth voiced an octave up) and are reduced modulo 12
    when the recipe is realized.

    Attributes:
        id:                   Unique recipe id, e.g. "m7-rootless-a".
        name:                 Display name, e.g. "Rootless A".
        style:                Style tag used for filtering.
        left_hand_intervals:  Intervals for the left hand, in placement order.
        right_hand_intervals: Intervals for the right hand, in placement order.
        description:          One-line practice hint.
    """

    id: str
    name: str
    style: VoicingStyle
    left_hand_intervals: tuple[int, ...]
    right_hand_intervals: tuple[int, ...]
    description: str = ""


def _recipe(
    recipe_id: str,
    name: str,
    style: VoicingStyle,
    lh: tuple[int, ...],
    rh: tuple[int, ...],
    description: str,
) -> VoicingRecipe:
    return VoicingRecipe(recipe_id, name, style, lh, rh, description)


_SHELL = VoicingStyle.SHELL
_ROOTLESS_A = VoicingStyle.ROOTLESS_A
_ROOTLESS_B = VoicingStyle.ROOTLESS_B
_QUARTAL = VoicingStyle.QUARTAL
_FULL = VoicingStyle.FULL

# ── Recipe catalog ──────────────────────────────────────────────────────────
# Interval comments list the chord tones in placement order.

VOICING_RECIPES: dict[ChordType, tuple[VoicingRecipe, ...]] = {
    ChordType.MAJ7: (
        _recipe("maj7-shell", "Shell (3-7)", _SHELL, (4, 11), (2, 7),  # 3 7 | 9 5
                "Basic guide tones, essential maj7 sound"),
        _recipe("maj7-rootless-a", "Rootless A", _ROOTLESS_A, (4, 7, 11, 2), (6,),  # 3 5 7 9 | #11
                "Classic Bill Evans voicing"),
        _recipe("maj7-rootless-b", "Rootless B", _ROOTLESS_B, (11, 2, 4, 7), (9,),  # 7 9 3 5 | 13
                "Inverted rootless voicing"),
        _recipe("maj7-full", "Full Voicing", _FULL, (0, 7), (4, 11, 2),
                "With root in bass"),
    ),
    ChordType.MAJ6: (
        _recipe("maj6-shell", "Shell (3-6)", _SHELL, (4, 9), (2, 7),
                "Guide tones for 6th chord"),
        _recipe("maj6-full", "Full Voicing", _FULL, (0, 7), (4, 9, 2),
                "Complete 6/9 sound"),
    ),
    ChordType.SIX: (
        _recipe("6-shell", "Shell (3-6)", _SHELL, (4, 9), (2, 7),
                "Guide tones for 6th chord"),
        _recipe("6-full", "Full Voicing", _FULL, (0, 7), (4, 9, 2),
                "Complete 6/9 sound"),
    ),
    ChordType.M7: (
        _recipe("m7-shell", "Shell (b3-b7)", _SHELL, (3, 10), (2, 7),
                "Essential minor 7th guide tones"),
        _recipe("m7-rootless-a", "Rootless A", _ROOTLESS_A, (3, 7, 10, 2), (5,),
                "Rootless voicing for ii chord"),
        _recipe("m7-rootless-b", "Rootless B", _ROOTLESS_B, (10, 2, 3, 7), (9,),
                "Inverted rootless minor"),
        _recipe("m7-quartal", "Quartal", _QUARTAL, (10, 2, 7), (3, 10),  # b7 9 5 | b3 b7
                "Modern stacked 4ths sound"),
        _recipe("m7-full", "Full Voicing", _FULL, (0, 7), (3, 10, 2),
                "With root in bass"),
    ),
    ChordType.M6: (
        _recipe("m6-shell", "Shell (b3-6)", _SHELL, (3, 9), (2, 7),
                "Minor 6th guide tones"),
        _recipe("m6-full", "Full Voicing", _FULL, (0, 7), (3, 9, 2),
                "Tonic minor sound"),
    ),
    ChordType.M_MAJ7: (
        _recipe("mMaj7-shell", "Shell (b3-7)", _SHELL, (3, 11), (2, 7),
                "Dramatic minor major 7 sound"),
        _recipe("mMaj7-full", "Full Voicing", _FULL, (0, 7), (3, 11, 2),
                "With root, cinematic"),
    ),
    ChordType.DOM7: (
        _recipe("7-shell", "Shell (3-b7)", _SHELL, (4, 10), (2, 9),  # 3 b7 | 9 13
                "Essential dominant guide tones"),
        _recipe("7-shell-inv", "Shell (b7-3)", _SHELL, (10, 4), (2, 9),
                "Inverted shell voicing"),
        _recipe("7-rootless-a", "Rootless A", _ROOTLESS_A, (4, 9, 10, 2), (),  # 3 13 b7 9
                "Classic dominant rootless"),
        _recipe("7-rootless-b", "Rootless B", _ROOTLESS_B, (10, 2, 4, 9), (),
                "Inverted dominant rootless"),
        _recipe("7-full", "Full Voicing", _FULL, (0, 7), (4, 10, 2),
                "With root in bass"),
    ),
    ChordType.DOM7_FLAT9: (
        _recipe("7b9-shell", "Shell (3-b7-b9)", _SHELL, (4, 10), (1, 8),  # 3 b7 | b9 b13
                "Dark dominant sound"),
        _recipe("7b9-rootless", "Rootless", _ROOTLESS_A, (4, 8, 10, 1), (),
                "V to minor voicing"),
        _recipe("7b9-full", "Full Voicing", _FULL, (0,), (4, 10, 1, 8),
                "Complete altered sound"),
    ),
    ChordType.DOM7_SHARP9: (
        _recipe("7#9-shell", "Shell (3-b7-#9)", _SHELL, (4, 10), (3, 8),
                "The Hendrix chord"),
        _recipe("7#9-rootless", "Rootless", _ROOTLESS_A, (4, 8, 10, 3), (),
                "Bluesy altered voicing"),
        _recipe("7#9-full", "Full Voicing", _FULL, (0,), (4, 10, 3),
                "Powerful blues sound"),
    ),
    ChordType.DOM7_SHARP5: (
        _recipe("7#5-shell", "Shell (3-b7)", _SHELL, (4, 10), (8, 2),
                "Augmented dominant"),
        _recipe("7#5-full", "Full Voicing", _FULL, (0, 8), (4, 10, 2),
                "Strong augmented pull"),
    ),
    ChordType.DOM7_FLAT13: (
        _recipe("7b13-shell", "Shell (3-b7-b13)", _SHELL, (4, 10), (2, 8),
                "Rich approach sound"),
        _recipe("7b13-rootless", "Rootless", _ROOTLESS_A, (4, 8, 10, 2), (),
                "Smooth voice leading option"),
        _recipe("7b13-full", "Full Voicing", _FULL, (0,), (4, 10, 2, 8),
                "Complete b13 color"),
    ),
    ChordType.DOM7_ALT: (
        _recipe("7alt-shell", "Shell (3-b7)", _SHELL, (4, 10), (1, 8),
                "Maximum tension shell"),
        _recipe("7alt-rootless", "Rootless", _ROOTLESS_A, (4, 8, 10, 1), (3,),
                "Full altered voicing"),
        _recipe("7alt-tritone", "Tritone Sub", _ROOTLESS_B, (10, 1, 4, 8), (3,),
                "Think tritone substitution"),
    ),
    ChordType.M7_FLAT5: (
        _recipe("m7b5-shell", "Shell (b3-b7)", _SHELL, (3, 10), (6, 2),
                "Half-diminished guide tones"),
        _recipe("m7b5-rootless", "Rootless", _ROOTLESS_A, (3, 6, 10, 2), (5,),
                "ii chord in minor"),
        _recipe("m7b5-full", "Full Voicing", _FULL, (0, 6), (3, 10, 2),
                "With root and b5"),
    ),
    ChordType.DIM7: (
        _recipe("dim7-shell", "Shell", _SHELL, (3, 9), (6, 0),
                "Symmetric diminished"),
        _recipe("dim7-full", "Full Voicing", _FULL, (0, 6), (3, 9),
                "Complete dim7 stack"),
    ),
    ChordType.DOM7_SUS: (
        _recipe("7sus-shell", "Shell (4-b7)", _SHELL, (5, 10), (2, 7),
                "Suspended guide tones"),
        _recipe("7sus-quartal", "Quartal", _QUARTAL, (10, 2, 7), (5, 0),
                'Stacked 4ths, very "So What"'),
        _recipe("7sus-full", "Full Voicing", _FULL, (0, 7), (5, 10, 2),
                "With root"),
    ),
    ChordType.DOM9_SUS: (
        _recipe("9sus-shell", "Shell (4-b7-9)", _SHELL, (5, 10), (2, 9),
                "Rich suspended sound"),
        _recipe("9sus-quartal", "Quartal", _QUARTAL, (10, 2, 7), (5, 9),
                "Open quartal voicing"),
        _recipe("9sus-full", "Full Voicing", _FULL, (0, 7), (5, 10, 2, 9),
                "Complete 9sus4 sound"),
    ),
}


def validate_recipe_table(table: Mapping[ChordType, Iterable[VoicingRecipe]]) -> None:
    """
    Check that every chord type has at least one recipe.

    Raises:
        MissingRecipeError: Naming every chord type without recipes.
    """
    missing = [ct.value for ct in ChordType if not tuple(table.get(ct, ()))]
    if missing:
        raise MissingRecipeError(
            f"No voicing recipes registered for chord type(s): {', '.join(missing)}."
        )


validate_recipe_table(VOICING_RECIPES)


def registered_recipes(
    chord_type: ChordType,
    table: Mapping[ChordType, tuple[VoicingRecipe, ...]] = VOICING_RECIPES,
) -> tuple[VoicingRecipe, ...]:
    """
    Return every recipe registered for *chord_type*, in catalog order.

    Raises:
        MissingRecipeError: If the chord type has no recipes at all.
    """
    recipes = table.get(chord_type, ())
    if not recipes:
        raise MissingRecipeError(f"No voicing recipes found for chord type: {chord_type}")
    return recipes


def voicings_for_chord(
    chord_type: ChordType,
    styles: Iterable[VoicingStyle] | None = None,
    table: Mapping[ChordType, tuple[VoicingRecipe, ...]] = VOICING_RECIPES,
) -> tuple[VoicingRecipe, ...]:
    """
    Return the recipes for *chord_type*, filtered by style.

    An empty or missing style filter returns every recipe. A filter that
    matches nothing returns an empty tuple; the engine decides the fallback.
    """
    recipes = table.get(chord_type, ())
    wanted = {VoicingStyle(style) for style in styles or ()}
    if not wanted:
        return tuple(recipes)
    return tuple(recipe for recipe in recipes if recipe.style in wanted)


def get_voicing_recipe(recipe_id: str) -> VoicingRecipe:
    """
    Look a recipe up by id across all chord types.

    Raises:
        UnknownRecipeError: If no recipe has that id.
    """
    for recipes in VOICING_RECIPES.values():
        for recipe in recipes:
            if recipe.id == recipe_id:
                return recipe
    raise UnknownRecipeError(f"Unknown voicing recipe '{recipe_id}'.")
