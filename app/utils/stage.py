"""
Kindred — Stage descriptor classification

Stage descriptors are free text entered at onboarding ("Stage 2",
"Stage 3", "5 years cancer-free", "Survivor").  They are parsed once, when
a profile is saved, into two independent facts:

  - ``survivor``: the text mentions "survivor" or "year(s)".
  - ``stage_number``: the text mentions "stage" and carries a number
    ("Stage 2, 3 years out" has stage number 2; "5 years" has none).

Two descriptors match when both are survivors, or failing that when both
carry the same stage number.

The persisted ``stage_kind`` column is a summary label (``SURVIVOR`` wins
over ``NUMBERED``); ``stage_number`` is stored alongside it unchanged.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_SURVIVOR_PATTERN = re.compile(r"survivor|year", re.IGNORECASE)
_STAGE_PATTERN = re.compile(r"stage", re.IGNORECASE)
_NUMBER_PATTERN = re.compile(r"\d+")


class StageKind(str, Enum):
    NUMBERED = "numbered"
    SURVIVOR = "survivor"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Stage:
    survivor: bool = False
    stage_number: int | None = None

    @property
    def is_survivor(self) -> bool:
        return self.survivor

    @property
    def kind(self) -> StageKind:
        if self.survivor:
            return StageKind.SURVIVOR
        if self.stage_number is not None:
            return StageKind.NUMBERED
        return StageKind.UNKNOWN

    def same_numbered_stage(self, other: "Stage") -> bool:
        return self.stage_number is not None and self.stage_number == other.stage_number

    @classmethod
    def from_columns(cls, kind: str | None, number: int | None) -> "Stage":
        """Rebuild a classification from its persisted columns.

        Unrecognised ``kind`` values read as unknown and drop the number.
        """
        if kind == StageKind.SURVIVOR.value:
            return cls(survivor=True, stage_number=number)
        if kind == StageKind.NUMBERED.value:
            return cls(stage_number=number)
        return UNKNOWN_STAGE


UNKNOWN_STAGE = Stage()


def _first_number(text: str) -> int | None:
    match = _NUMBER_PATTERN.search(text)
    return int(match.group()) if match else None


def classify_stage(descriptor: str | None) -> Stage:
    """Parse a free-text stage descriptor into a ``Stage``."""
    if not descriptor or not descriptor.strip():
        return UNKNOWN_STAGE

    survivor = bool(_SURVIVOR_PATTERN.search(descriptor))
    stage_number = _first_number(descriptor) if _STAGE_PATTERN.search(descriptor) else None

    if not survivor and stage_number is None:
        return UNKNOWN_STAGE
    return Stage(survivor=survivor, stage_number=stage_number)
