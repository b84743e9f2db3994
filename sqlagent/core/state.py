"""Per-execution pipeline state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Optional

CANCEL_MARKER = "cancel"


@dataclass
class PipelineState:
    """
    Mutable state of one pipeline run.

    Created fresh when execution starts and handed to the completion
    callback as ``(errors_or_none, results)``.
    """

    results: Dict[Hashable, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)
    last_name: Optional[Hashable] = None
    canceled: bool = False
    insert_id: Optional[Any] = None
    in_transaction: bool = False
    pending_rollback: bool = False

    @property
    def errors_or_none(self) -> Optional[List[str]]:
        """The error list, or None while nothing has failed."""
        return self.errors if self.errors else None

    @property
    def success(self) -> bool:
        return not self.errors

    def record_error(self, error: Any) -> None:
        """Append an error message; marks a pending rollback inside a transaction."""
        self.errors.append(str(error))
        if self.in_transaction:
            self.pending_rollback = True

    def outcome(self) -> tuple:
        """The ``(errors_or_none, results)`` pair delivered at completion."""
        return self.errors_or_none, self.results

    def __repr__(self) -> str:
        status = "canceled" if self.canceled else ("success" if self.success else "failed")
        return f"PipelineState({status}, {len(self.results)} results, {len(self.errors)} errors)"
