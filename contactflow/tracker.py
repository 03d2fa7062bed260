"""Process-wide registry of forms that are mid-submission."""

from typing import FrozenSet, Set


class SubmissionStateTracker:
    """Set of form identifiers with a submission in flight.

    ``try_begin`` is the re-entrancy guard: at most one submission per form id
    is active at a time. ``end`` is idempotent.

    Examples:
        >>> tracker = SubmissionStateTracker()
        >>> tracker.try_begin("contact")
        True
        >>> tracker.try_begin("contact")
        False
        >>> tracker.end("contact")
        >>> tracker.end("contact")
        >>> "contact" in tracker
        False
    """

    def __init__(self) -> None:
        self._active: Set[str] = set()

    def try_begin(self, form_id: str) -> bool:
        """Mark ``form_id`` active; False if it already was."""
        if form_id in self._active:
            return False
        self._active.add(form_id)
        return True

    def end(self, form_id: str) -> None:
        """Release ``form_id``; releasing an inactive id does nothing."""
        self._active.discard(form_id)

    def is_active(self, form_id: str) -> bool:
        return form_id in self._active

    @property
    def active(self) -> FrozenSet[str]:
        return frozenset(self._active)

    def __contains__(self, form_id: object) -> bool:
        return form_id in self._active

    def __len__(self) -> int:
        return len(self._active)


__all__ = [
    "SubmissionStateTracker",
]
