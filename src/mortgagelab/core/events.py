"""
Event classes for the flexi loan timeline.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Any, NamedTuple


class EventKind(str, Enum):
    """Kinds of entries in a flexi loan timeline."""

    LOAN_START = "loan_start"
    ADVANCE = "advance"
    DUE_DATE = "due_date"
    SMART_LOGIC_TRIGGER = "smart_logic_trigger"


class FlexiEvent(NamedTuple):
    """
    Time-stamped record of a flexi loan occurrence.

    Attributes:
        date: Calendar date the event applies to
        kind: Event type (see EventKind)
        details: Read-only mapping with balances and amounts at the event
        sequence: Insertion order within the log; ties on ``date`` sort by it
    """

    date: date
    kind: EventKind
    details: Mapping[str, Any]
    sequence: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "kind": self.kind.value,
            "sequence": self.sequence,
            **dict(self.details),
        }


class EventLog:
    """
    Append-only, ordered log of FlexiEvent records.

    Events can be appended but never modified or removed, and must arrive in
    non-decreasing date order. ``extend`` returns the same log so transitions
    can be chained.
    """

    __slots__ = ("_events",)

    def __init__(self) -> None:
        self._events: list[FlexiEvent] = []

    def append(
        self, when: date, kind: EventKind, details: Mapping[str, Any] | None = None
    ) -> FlexiEvent:
        if self._events and when < self._events[-1].date:
            raise ValueError(
                f"Event dated {when} would precede {self._events[-1].date}"
            )
        event = FlexiEvent(
            date=when,
            kind=EventKind(kind),
            details=MappingProxyType(dict(details or {})),
            sequence=len(self._events),
        )
        self._events.append(event)
        return event

    def extend(self, drafts) -> EventLog:
        """Append ``(date, kind, details)`` drafts in order."""
        for when, kind, details in drafts:
            self.append(when, kind, details)
        return self

    def snapshot(self) -> tuple[FlexiEvent, ...]:
        return tuple(self._events)

    def of_kind(self, kind: EventKind) -> list[FlexiEvent]:
        return [e for e in self._events if e.kind == kind]

    def __iter__(self) -> Iterator[FlexiEvent]:
        return iter(tuple(self._events))

    def __len__(self) -> int:
        return len(self._events)

    def __getitem__(self, idx: int) -> FlexiEvent:
        return self._events[idx]
