"""Lifecycle classification of ticket statuses.

Statuses are reference data edited by administrators, so a ticket's
lifecycle meaning is derived from the status name. This module is the only
place that interprets names; the ticket service asks it whether a status is
terminal and which status to use when closing or reopening.

Any status may follow any other status. There is no transition table.
"""
from typing import Iterable, Protocol, TypeVar

TERMINAL_KEYWORDS = ("closed", "resolved")
REOPEN_KEYWORDS = ("open", "reopened")


class _Named(Protocol):
    id: int
    name: str


S = TypeVar("S", bound=_Named)


def _matches(name: str, keywords: tuple[str, ...]) -> bool:
    lowered = (name or "").lower()
    return any(k in lowered for k in keywords)


def is_terminal(name: str) -> bool:
    """True when a ticket in status ``name`` counts as closed."""
    return _matches(name, TERMINAL_KEYWORDS)


def pick_terminal(statuses: Iterable[S]) -> S | None:
    for s in sorted(statuses, key=lambda s: s.id):
        if is_terminal(s.name):
            return s
    return None


def pick_reopen(statuses: Iterable[S]) -> S | None:
    # "Reopened" also contains "open"; lowest id wins
    for s in sorted(statuses, key=lambda s: s.id):
        if _matches(s.name, REOPEN_KEYWORDS) and not is_terminal(s.name):
            return s
    return None
