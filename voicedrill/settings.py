"""PracticeSettings: the per-session settings record passed into the engine.

Validated with pydantic so a hand-edited or stale settings file is rejected
with a SettingsError before any of its values reach the engine.
"""

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from voicedrill.exceptions import SettingsError
from voicedrill.pitch import note_index
from voicedrill.progressions import get_progression
from voicedrill.voicing_recipes import VoicingStyle

#: Bar counts offered by the practice screen; any positive count is accepted.
BAR_OPTIONS: tuple[int, ...] = (3, 4, 6, 8, 12)

Mode = Literal["accompaniment", "solo"]


def _describe(exc: ValidationError) -> str:
    """One line per invalid field, e.g. ``bars: Input should be a valid integer``."""
    problems = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "record"
        message = error["msg"].removeprefix("Value error, ")
        problems.append(f"{field}: {message}")
    return "Invalid settings: " + "; ".join(problems)


class PracticeSettings(BaseModel):
    """
    Session settings, built once and passed by value.

    Scalar fields are strict: ``"false"`` is not a bool and ``5.5`` is not a
    bar count. Unknown keys are ignored so records written by other front ends
    still load.

    Attributes:
        key:            Practice key, e.g. "Bb".
        prefer_flats:   Spell notes with flats instead of sharps.
        progression_id: Template id, e.g. "ii-v-i-major".
        bars:           Number of bars to fill.
        mode:           "accompaniment" uses ``voicing_styles``;
                        "solo" always uses full voicings.
        voicing_styles: Style filter for accompaniment mode.
        smooth:         Voice-lead the progression instead of picking at random.
        seed:           Seed for random mode, or None for a fresh drill each time.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    key: StrictStr = Field(default="C", description="Practice key.")
    prefer_flats: StrictBool = True
    progression_id: StrictStr = Field(default="ii-v-i-major", description="Template id.")
    bars: StrictInt = Field(default=4, ge=1, description="Number of bars to fill.")
    mode: Mode = "accompaniment"
    voicing_styles: tuple[VoicingStyle, ...] = (VoicingStyle.SHELL, VoicingStyle.ROOTLESS_A)
    smooth: StrictBool = True
    seed: StrictInt | None = None

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise SettingsError(_describe(exc)) from None

    @field_validator("key")
    @classmethod
    def key_must_be_a_note_name(cls, v: str) -> str:
        note_index(v)
        return v

    @field_validator("progression_id")
    @classmethod
    def progression_must_exist(cls, v: str) -> str:
        get_progression(v)
        return v

    def effective_styles(self) -> tuple[VoicingStyle, ...]:
        """Style filter actually handed to the engine."""
        if self.mode == "solo":
            return (VoicingStyle.FULL,)
        return self.voicing_styles

    def replace(self, **changes: Any) -> "PracticeSettings":
        """Return a validated copy with *changes* applied; ``None`` values are ignored."""
        values = self.model_dump()
        values.update({k: v for k, v in changes.items() if v is not None})
        return PracticeSettings(**values)

    @classmethod
    def from_mapping(cls, record: Mapping[str, Any]) -> "PracticeSettings":
        """
        Build settings from a flat key-value record.

        Raises:
            SettingsError: If a known key holds an invalid value.
        """
        try:
            return cls.model_validate(dict(record))
        except ValidationError as exc:
            raise SettingsError(_describe(exc)) from None

    def to_mapping(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


def load_settings(path: str | Path) -> PracticeSettings:
    """
    Read settings from a JSON file.

    Raises:
        SettingsError: If the file is not a JSON object or holds invalid values.
        OSError: If the file cannot be read.
    """
    with open(path, encoding="utf-8") as fh:
        try:
            record = json.load(fh)
        except json.JSONDecodeError as exc:
            raise SettingsError(f"Settings file '{path}' is not valid JSON: {exc}") from None
    if not isinstance(record, dict):
        raise SettingsError(f"Settings file '{path}' must hold a JSON object.")
    return PracticeSettings.from_mapping(record)


def save_settings(settings: PracticeSettings, path: str | Path) -> None:
    """Write settings to a JSON file."""
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(settings.to_mapping(), fh, indent=2)
        fh.write("\n")
