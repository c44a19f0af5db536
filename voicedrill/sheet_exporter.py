"""SheetExporter: writes a voiced progression as a printable practice sheet."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Final

from voicedrill.pitch import Note, format_notes
from voicedrill.progressions import RealizedChord
from voicedrill.sheet_models import ScoreDocument, VexflowMeasure, VexflowNote
from voicedrill.sheet_renderers import (
    SheetRenderer,
    VerovioHtmlRenderer,
    VexflowMarkdownRenderer,
)
from voicedrill.voicing_strategy import Voicing

SUPPORTED_FORMATS: Final[set[str]] = {"html", "md-vexflow"}

TIME_SIGNATURE: Final[str] = "4/4"
BAR_QUARTER_LENGTH: Final[float] = 4.0


class SheetExporter:
    """
    Write one bar per voicing: right hand on the treble staff, left hand on
    the bass staff, each held for the whole bar.

    Supported formats:
    - ``html``: music21 score -> MusicXML -> verovio SVG in one HTML file.
    - ``md-vexflow``: Markdown with an embedded VexFlow renderer.
    """

    def __init__(self, title: str = "", output_format: str = "html") -> None:
        self.title = title
        normalized = output_format.strip().lower()
        if normalized not in SUPPORTED_FORMATS:
            supported = ", ".join(sorted(SUPPORTED_FORMATS))
            raise ValueError(f"Unsupported output format '{output_format}'. Use one of: {supported}.")
        self.output_format = normalized
        self.renderer = self._build_renderer(normalized)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_renderer(self, output_format: str) -> SheetRenderer:
        if output_format == "html":
            return VerovioHtmlRenderer()
        return VexflowMarkdownRenderer()

    def _legend(
        self,
        voicings: Sequence[Voicing],
        chords: Sequence[RealizedChord] | None,
    ) -> list[str]:
        lines = []
        for idx, voicing in enumerate(voicings):
            roman = f" ({chords[idx].roman})" if chords and idx < len(chords) else ""
            lines.append(
                f"{voicing.symbol}{roman} - {voicing.recipe.name}: "
                f"LH {format_notes(voicing.left_hand_notes) or '-'} | "
                f"RH {format_notes(voicing.right_hand_notes) or '-'}"
            )
        return lines

    # VexFlow ----------------------------------------------------------

    def _note_to_key(self, note: Note) -> str:
        return f"{note.name.lower()}/{note.octave}"

    def _extract_accidental(self, key: str) -> str | None:
        pitch_name = key.split("/", maxsplit=1)[0]
        accidental = pitch_name[1:]
        return accidental if accidental in {"#", "b"} else None

    def _hand_to_vexflow(self, notes: Sequence[Note], clef: str) -> list[VexflowNote]:
        if not notes:
            rest_key = "b/4" if clef == "treble" else "d/3"
            return [VexflowNote(keys=[rest_key], duration="wr", accidentals=[None])]
        keys = [self._note_to_key(note) for note in notes]
        return [
            VexflowNote(
                keys=keys,
                duration="w",
                accidentals=[self._extract_accidental(key) for key in keys],
            )
        ]

    def _voicings_to_document(self, voicings: Sequence[Voicing]) -> ScoreDocument:
        beats, beat_value = (int(part) for part in TIME_SIGNATURE.split("/"))
        measures = [
            VexflowMeasure(
                symbol=voicing.symbol,
                treble=self._hand_to_vexflow(voicing.right_hand_notes, clef="treble"),
                bass=self._hand_to_vexflow(voicing.left_hand_notes, clef="bass"),
            )
            for voicing in voicings
        ]
        return ScoreDocument(
            title=self.title,
            time_signature=TIME_SIGNATURE,
            beats=beats,
            beat_value=beat_value,
            measures=measures,
        )

    # music21 / MusicXML -------------------------------------------------

    def _music21_pitch_name(self, note: Note) -> str:
        """music21 spells flats with '-', e.g. Bb3 -> 'B-3'."""
        return f"{note.name[0]}{note.name[1:].replace('b', '-')}{note.octave}"

    def _hand_to_music21(self, notes: Sequence[Note]) -> Any:
        from music21 import chord, note as m21_note

        if not notes:
            return m21_note.Rest(quarterLength=BAR_QUARTER_LENGTH)
        return chord.Chord(
            [self._music21_pitch_name(n) for n in notes],
            quarterLength=BAR_QUARTER_LENGTH,
        )

    def _voicings_to_score(self, voicings: Sequence[Voicing]) -> Any:
        from music21 import clef, expressions, metadata, meter, stream

        score = stream.Score()
        score.metadata = metadata.Metadata(title=self.title)

        right_hand = stream.Part()
        right_hand.partName = "Right Hand"
        right_hand.append(clef.TrebleClef())
        right_hand.append(meter.TimeSignature(TIME_SIGNATURE))

        left_hand = stream.Part()
        left_hand.partName = "Left Hand"
        left_hand.append(clef.BassClef())
        left_hand.append(meter.TimeSignature(TIME_SIGNATURE))

        for voicing in voicings:
            right_hand.append(expressions.TextExpression(voicing.symbol))
            right_hand.append(self._hand_to_music21(voicing.right_hand_notes))
            left_hand.append(self._hand_to_music21(voicing.left_hand_notes))

        score.insert(0, right_hand)
        score.insert(0, left_hand)
        return score

    def _score_to_musicxml_bytes(self, score: Any) -> bytes:
        from music21.musicxml.m21ToXml import GeneralObjectExporter

        exporter = GeneralObjectExporter(score)
        return exporter.parse()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(
        self,
        voicings: Sequence[Voicing],
        chords: Sequence[RealizedChord] | None = None,
    ) -> str:
        """
        Render the practice sheet to a string in the selected format.

        Args:
            voicings: One voicing per bar.
            chords:   The realized chords, used for the roman-numeral legend.

        Raises:
            ValueError: If there is nothing to render or engraving fails.
        """
        if not voicings:
            raise ValueError("No voicings to render.")

        legend = self._legend(voicings, chords)
        if self.output_format == "html":
            return self.renderer.render(
                title=self.title,
                legend=legend,
                musicxml_bytes=self._score_to_musicxml_bytes(self._voicings_to_score(voicings)),
            )
        return self.renderer.render(
            title=self.title,
            legend=legend,
            score_document=self._voicings_to_document(voicings),
        )

    def export(
        self,
        voicings: Sequence[Voicing],
        output_path: str,
        chords: Sequence[RealizedChord] | None = None,
    ) -> None:
        """
        Render the practice sheet and write it to disk.

        Raises:
            ValueError: If rendering fails or there are no voicings.
            OSError: If the output file cannot be written.
        """
        content = self.render(voicings, chords)
        with open(output_path, "w", encoding="utf-8") as fh:
            fh.write(content)
