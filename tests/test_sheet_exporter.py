"""Unit tests for SheetExporter (the HTML path needs music21 and verovio)."""

import pytest

from voicedrill.chord_types import ChordType
from voicedrill.pitch import Note
from voicedrill.progressions import get_progression, realize_progression
from voicedrill.sheet_exporter import SheetExporter
from voicedrill.voicing_recipes import VOICING_RECIPES, VoicingRecipe, VoicingStyle
from voicedrill.voicing_strategy import Voicing, generate_progression_voicings, realize_voicing


def _drill() -> tuple[list, list[Voicing]]:
    chords = realize_progression(get_progression("ii-v-i-major"), "Bb")
    return chords, generate_progression_voicings(chords)


def test_unsupported_format_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unsupported output format"):
        SheetExporter(output_format="pdf")


def test_format_is_normalized() -> None:
    assert SheetExporter(output_format=" MD-VexFlow ").output_format == "md-vexflow"


def test_render_requires_voicings() -> None:
    with pytest.raises(ValueError, match="No voicings"):
        SheetExporter(output_format="md-vexflow").render([])


# ---------------------------------------------------------------------------
# Legend and VexFlow document
# ---------------------------------------------------------------------------

def test_legend_lists_symbol_roman_and_hands() -> None:
    chords, voicings = _drill()
    legend = SheetExporter()._legend(voicings, chords)
    assert len(legend) == 3
    assert legend[0].startswith("Cm7 (iim7) - ")
    assert "LH " in legend[0] and " | RH " in legend[0]


def test_legend_without_chords() -> None:
    voicing = realize_voicing("C", ChordType.MAJ7, VOICING_RECIPES[ChordType.MAJ7][0])
    assert SheetExporter()._legend([voicing], None) == [
        "Cmaj7 - Shell (3-7): LH B2 E3 | RH D4 G4"
    ]


def test_note_key_and_accidental() -> None:
    exporter = SheetExporter()
    key = exporter._note_to_key(Note.from_pitch(51))
    assert key == "eb/3"
    assert exporter._extract_accidental(key) == "b"
    assert exporter._extract_accidental("f#/4") == "#"
    assert exporter._extract_accidental("c/4") is None


def test_empty_hand_becomes_whole_bar_rest() -> None:
    exporter = SheetExporter()
    treble = exporter._hand_to_vexflow((), clef="treble")
    bass = exporter._hand_to_vexflow((), clef="bass")
    assert treble[0].duration == "wr" and treble[0].keys == ["b/4"]
    assert bass[0].duration == "wr" and bass[0].keys == ["d/3"]


def test_document_has_one_measure_per_voicing() -> None:
    _, voicings = _drill()
    document = SheetExporter(title="Drill")._voicings_to_document(voicings)
    assert document.title == "Drill"
    assert (document.beats, document.beat_value) == (4, 4)
    assert [m.symbol for m in document.measures] == ["Cm7", "F7", "Bbmaj7"]
    assert all(len(m.treble) == 1 and len(m.bass) == 1 for m in document.measures)


def test_rootless_dominant_rests_in_right_hand() -> None:
    recipe = VoicingRecipe("lh-only", "LH only", VoicingStyle.ROOTLESS_A, (4, 9, 10, 2), ())
    voicing = realize_voicing("G", ChordType.DOM7, recipe)
    measure = SheetExporter()._voicings_to_document([voicing]).measures[0]
    assert measure.treble[0].duration == "wr"
    assert len(measure.bass[0].keys) == 4


def test_md_vexflow_export_writes_file(tmp_path) -> None:
    chords, voicings = _drill()
    output = tmp_path / "drill.md"
    SheetExporter(title="ii-V-I in Bb", output_format="md-vexflow").export(
        voicings, str(output), chords=chords
    )
    content = output.read_text(encoding="utf-8")
    assert content.startswith("# ii-V-I in Bb")
    assert "1. Cm7 (iim7)" in content
    assert '"symbol":"Bbmaj7"' in content


# ---------------------------------------------------------------------------
# music21 / verovio
# ---------------------------------------------------------------------------

def test_music21_pitch_names_use_dash_for_flats() -> None:
    exporter = SheetExporter()
    assert exporter._music21_pitch_name(Note.from_pitch(58)) == "B-3"
    assert exporter._music21_pitch_name(Note.from_pitch(61, prefer_flats=False)) == "C#4"
    assert exporter._music21_pitch_name(Note.from_pitch(60)) == "C4"


@pytest.mark.integration
def test_html_export_engraves_svg(tmp_path) -> None:
    pytest.importorskip("music21")
    pytest.importorskip("verovio")

    chords, voicings = _drill()
    output = tmp_path / "drill.html"
    SheetExporter(title="ii-V-I in Bb").export(voicings, str(output), chords=chords)

    html = output.read_text(encoding="utf-8")
    assert "<h1>ii-V-I in Bb</h1>" in html
    assert '<div class="page">' in html
    assert "<svg" in html
