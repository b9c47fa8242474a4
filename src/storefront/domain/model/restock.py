"""Restock subscriptions: "tell me when it's back" requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


def is_restock_transition(previous: int | None, new: int | None) -> bool:
    """True only when stock moves from nothing to something.

    Untracked quantities (``None``) count as zero on the way in and never
    count as a restock on the way out.
    """
    if new is None:
        return False
    return (previous or 0) <= 0 < new


@dataclass
class RestockSubscription:
    user_id: str
    item_id: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    notified_at: datetime | None = None

    @property
    def key(self) -> str:
        return f"{self.user_id}:{self.item_id}"

    @property
    def is_pending(self) -> bool:
        return self.notified_at is None

    def mark_notified(self) -> None:
        self.notified_at = datetime.now(timezone.utc)

    def rearm(self) -> None:
        """Wait for the next restock again after a previous notice went out."""
        self.notified_at = None
