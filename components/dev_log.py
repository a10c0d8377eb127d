"""components.dev_log — What each actor did, and when.

A bounded log resource.  Schedule directives, relocations, guard
reactions, dialogue opens and closes, applied effects and caught
per-actor crashes all land here, stamped with the game minute.  The
Tab overlay shows the tail; the tests look up entries by category.

    log_actor(world, eid, "schedule", "directive → patrol",
              details={"period": "breakfast"})

Categories in use: schedule, behavior, dialogue, effect, error.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field


@dataclass
class LogEntry:
    t: float            # game minutes since day 1, 00:00
    eid: int
    name: str
    cat: str
    msg: str
    details: dict | None = None

    def line(self) -> str:
        return f"{self.t:7.1f} {self.name[:14]:<14} [{self.cat}] {self.msg}"


@dataclass
class DevLog:
    capacity: int = 500
    entries: deque = field(default_factory=deque)

    def __post_init__(self):
        self.entries = deque(self.entries, maxlen=self.capacity)

    def record(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    def recent(self, n: int = 50) -> list[LogEntry]:
        """Newest last."""
        return list(self.entries)[-n:]

    def for_cat(self, cat: str) -> list[LogEntry]:
        return [e for e in self.entries if e.cat == cat]


def log_actor(world, eid: int, cat: str, msg: str, details: dict | None = None) -> None:
    """Record against actor *eid*; a world without a DevLog ignores it."""
    log = world.res(DevLog)
    if log is None:
        return
    from components.social import Identity
    from components.resources import GameClock
    ident = world.get(eid, Identity)
    clock = world.res(GameClock)
    log.record(LogEntry(
        t=clock.time.total_minutes if clock else 0.0,
        eid=eid,
        name=ident.name if ident else f"e{eid}",
        cat=cat,
        msg=msg,
        details=details,
    ))
