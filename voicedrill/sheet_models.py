"""Data models for practice-sheet rendering outputs."""

from dataclasses import dataclass


@dataclass(frozen=True)
class VexflowNote:
    """A single VexFlow note, chord or rest token."""

    keys: list[str]
    duration: str
    accidentals: list[str | None]


@dataclass(frozen=True)
class VexflowMeasure:
    """One bar of the drill: the chord symbol plus both hands."""

    symbol: str
    treble: list[VexflowNote]
    bass: list[VexflowNote]


@dataclass(frozen=True)
class ScoreDocument:
    """Neutral practice-sheet representation consumed by the VexFlow renderer."""

    title: str
    time_signature: str
    beats: int
    beat_value: int
    measures: list[VexflowMeasure]
