# File: filesize_recon/tasks/events.py

"""
Change events delivered to incremental (``process``) runs.

A batch is an ordered list of events for one or more catalog tables. Order
matters: an UPDATE is applied as a DELETE of the old value followed by a
PUT of the new one, so events are never reordered.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional

from filesize_recon.tasks.catalog import ObjectInfo

KEY_TABLE = "keyTable"


class EventAction(str, Enum):
    PUT = "PUT"
    DELETE = "DELETE"
    UPDATE = "UPDATE"


@dataclass(frozen=True)
class UpdateEvent:
    """
    One change to a catalog key.

    ``value`` is the new value for PUT and UPDATE and the removed value for
    DELETE. ``old_value`` is only set for UPDATE. ``action`` may hold
    something other than an EventAction when the feed sends an action this
    version does not know about.
    """

    action: Any
    key: str
    value: Optional[Any] = None
    old_value: Optional[Any] = None
    table: str = KEY_TABLE
    sequence_number: int = 0


class UpdateEventBatch:
    def __init__(self, events: Iterable[UpdateEvent] = ()) -> None:
        self._events: List[UpdateEvent] = list(events)

    def __iter__(self) -> Iterator[UpdateEvent]:
        return iter(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def is_empty(self) -> bool:
        return not self._events

    def last_sequence_number(self) -> int:
        if not self._events:
            return 0
        return self._events[-1].sequence_number

    def filter(self, tables: Iterable[str]) -> "UpdateEventBatch":
        wanted = set(tables)
        return UpdateEventBatch(e for e in self._events if e.table in wanted)


def _object_info(key: str, raw: Optional[dict]) -> Optional[ObjectInfo]:
    if raw is None:
        return None
    return ObjectInfo(key_name=raw.get("key_name", key), data_size=int(raw["data_size"]))


def _parse_action(raw: str) -> Any:
    try:
        return EventAction(raw)
    except ValueError:
        # Left as-is so the task can skip it.
        return raw


def load_event_batch(path: Path | str) -> UpdateEventBatch:
    """
    Read a JSON-lines event file into a batch.

    Each non-blank line is an object like::

        {"action": "UPDATE", "key": "/vol/bucket/a",
         "value": {"data_size": 5000}, "old_value": {"data_size": 500},
         "table": "keyTable", "sequence_number": 7}
    """
    events: List[UpdateEvent] = []
    with open(path, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
                key = record["key"]
                events.append(
                    UpdateEvent(
                        action=_parse_action(record["action"]),
                        key=key,
                        value=_object_info(key, record.get("value")),
                        old_value=_object_info(key, record.get("old_value")),
                        table=record.get("table", KEY_TABLE),
                        sequence_number=int(record.get("sequence_number", 0)),
                    )
                )
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"{path}:{line_no}: invalid event: {e}") from e
    return UpdateEventBatch(events)
