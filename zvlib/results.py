"""
Typed outcomes shared by every ZoneVault stage.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


class Outcome(Enum):
    """How a stage (or a single zone within the restore loop) ended."""

    OK = "ok"
    NO_OP = "no-op"
    PRECONDITION_FAILED = "precondition-failed"
    INVALID_INPUT = "invalid-input"
    # A local file could not be written
    IO_FAILED = "io-failed"
    # Service answered but rejected the call
    CALL_FAILED = "call-failed"
    # Service could not be reached or authenticated against
    UNREACHABLE = "unreachable"


@dataclass
class StageResult:
    """Result of one menu stage."""

    outcome: Outcome
    message: str
    path: Optional[Path] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK


@dataclass
class ZoneRestoreResult:
    """Result of restoring a single zone."""

    zone_name: str
    outcome: Outcome
    message: str
    zone_id: Optional[str] = None
    created: bool = False
    change_id: Optional[str] = None
    change_count: int = 0

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK


@dataclass
class RestoreReport:
    """Per-zone results for one restore run."""

    zones: List[ZoneRestoreResult] = field(default_factory=list)

    @property
    def succeeded(self) -> List[ZoneRestoreResult]:
        return [z for z in self.zones if z.ok]

    @property
    def failed(self) -> List[ZoneRestoreResult]:
        return [z for z in self.zones if not z.ok]

    def to_stage_result(self) -> StageResult:
        """Collapse the per-zone results into a single menu-level result."""
        if not self.zones:
            return StageResult(Outcome.NO_OP, "No zones were selected; nothing restored.")

        summary = f"Restored {len(self.succeeded)} of {len(self.zones)} zone(s)."
        if not self.failed:
            return StageResult(Outcome.OK, summary, details={"report": self})

        failed_names = ", ".join(z.zone_name for z in self.failed)
        # A partial restore is reported with the first failing zone's outcome
        return StageResult(
            self.failed[0].outcome,
            f"{summary} Failed: {failed_names}",
            details={"report": self},
        )
