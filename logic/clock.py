"""logic/clock.py — Game clock, schedule periods, and waiting.

The clock turns real elapsed milliseconds into game-minutes
(``scale`` game-minutes per real second) and maps the time of day onto
a named **period**, the window the actor schedules are keyed by.

    result = advance(clock.time, real_delta_ms=16.0, scale=1.0)
    if result.period_changed:
        apply_schedule(world, result.new_period)

Periods are ordered and non-overlapping; exactly one (lockdown) wraps
past midnight, which the containment test handles by treating
``end <= start`` as "end is tomorrow".

Public API
----------
``Period``, ``DEFAULT_PERIODS``, ``PERIODS``, ``load_periods``
``period_for_time``, ``get_period``, ``time_to_minutes``
``advance``, ``initial_time``, ``format_time``, ``next_period``
``minutes_until_period``, ``clock_may_advance``
``tick_clock``, ``begin_wait``, ``cancel_wait``
"""

from __future__ import annotations
import math
from dataclasses import dataclass

from components import GameClock, GameTime, UIMode, UIState, Transition
from core.constants import MINUTES_PER_DAY, TIME_SCALE, WAIT_SCALE
from core.tuning import get as _tun


# ── Periods ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Period:
    id: str
    name: str
    start_hour: int
    start_minute: int
    end_hour: int
    end_minute: int

    @property
    def start(self) -> int:
        return time_to_minutes(self.start_hour, self.start_minute)

    @property
    def end(self) -> int:
        return time_to_minutes(self.end_hour, self.end_minute)

    @property
    def wraps(self) -> bool:
        return self.end <= self.start

    def contains(self, hour: int, minute: int) -> bool:
        now = time_to_minutes(hour, minute)
        start, end = self.start, self.end
        if self.wraps:
            # 22:00–06:00: move the end (and any time before the start) into tomorrow
            end += MINUTES_PER_DAY
            if now < start:
                now += MINUTES_PER_DAY
        return start <= now < end


DEFAULT_PERIODS: tuple[Period, ...] = (
    Period("early_morning", "Wake-Up", 6, 0, 7, 0),
    Period("breakfast", "Breakfast", 7, 0, 8, 0),
    Period("morning_work", "Morning Work", 8, 0, 12, 0),
    Period("lunch", "Lunch", 12, 0, 13, 0),
    Period("afternoon_work", "Afternoon Work", 13, 0, 16, 0),
    Period("recreation", "Recreation", 16, 0, 18, 0),
    Period("dinner", "Dinner", 18, 0, 20, 0),
    Period("evening_free", "Evening Free Time", 20, 0, 22, 0),
    Period("lockdown", "Lockdown", 22, 0, 6, 0),
)

# Active period table; replaced wholesale by ``load_periods``.
PERIODS: list[Period] = list(DEFAULT_PERIODS)


def load_periods(entries: list[dict]) -> int:
    """Replace the period table from ``[[period]]`` TOML entries.

    An empty list keeps the current table.  Returns the number loaded.
    """
    if not entries:
        return 0
    loaded = []
    for e in entries:
        sh, sm = _parse_hhmm(e["start"])
        eh, em = _parse_hhmm(e["end"])
        loaded.append(Period(e["id"], e.get("name", e["id"]), sh, sm, eh, em))
    PERIODS[:] = loaded
    return len(loaded)


def _parse_hhmm(value) -> tuple[int, int]:
    if isinstance(value, str):
        h, _, m = value.partition(":")
        return int(h), int(m or 0)
    return int(value), 0


def time_to_minutes(hour: int, minute: int) -> int:
    """Minutes since midnight."""
    return hour * 60 + minute


def period_for_time(hour: int, minute: int,
                    periods: list[Period] | None = None) -> str:
    """Return the id of the first period containing ``hour:minute``.

    A time that falls in a gap of a hand-edited table resolves to the
    last configured period.
    """
    table = PERIODS if periods is None else periods
    for period in table:
        if period.contains(hour, minute):
            return period.id
    return table[-1].id if table else ""


def get_period(period_id: str, periods: list[Period] | None = None) -> Period | None:
    table = PERIODS if periods is None else periods
    for period in table:
        if period.id == period_id:
            return period
    return None


# ── Advancing ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AdvanceResult:
    new_time: GameTime
    period_changed: bool
    new_period: str


def advance(current: GameTime, real_delta_ms: float, scale: float = TIME_SCALE,
            periods: list[Period] | None = None) -> AdvanceResult:
    """Advance *current* by *real_delta_ms* real milliseconds.

    ``scale`` is game-minutes per real second.  Minutes roll into hours
    (mod 24) and hours into days.  ``period_changed`` compares the
    period before and after; it is the only thing that should trigger
    the schedule applier.
    """
    old_period = period_for_time(current.hour, current.minute, periods)

    elapsed = max(0.0, real_delta_ms) / 1000.0 * max(0.0, scale)

    minutes = current.minute + current.fraction + elapsed
    hour = current.hour
    day = current.day
    while minutes >= 60.0:
        minutes -= 60.0
        hour += 1
    while hour >= 24:
        hour -= 24
        day += 1

    whole = min(59, max(0, int(math.floor(minutes))))
    new_time = GameTime(
        day=day,
        hour=hour,
        minute=whole,
        total_minutes=current.total_minutes + elapsed,
        fraction=max(0.0, minutes - whole),
    )
    new_period = period_for_time(new_time.hour, new_time.minute, periods)
    return AdvanceResult(new_time, new_period != old_period, new_period)


def initial_time() -> GameTime:
    """06:00 on day 1, lights on."""
    return GameTime(day=1, hour=6, minute=0, total_minutes=0.0)


def format_time(time: GameTime) -> str:
    return f"{time.hour:02d}:{time.minute:02d}"


def next_period(time: GameTime,
                periods: list[Period] | None = None) -> tuple[str, int]:
    """Return ``(period_id, minutes_until)`` for the period after the current one."""
    table = PERIODS if periods is None else periods
    if not table:
        return "", 0
    current = period_for_time(time.hour, time.minute, table)
    idx = next((i for i, p in enumerate(table) if p.id == current), -1)
    upcoming = table[(idx + 1) % len(table)]
    return upcoming.id, minutes_until_period(time, upcoming.id, table)


def minutes_until_period(time: GameTime, period_id: str,
                         periods: list[Period] | None = None) -> int:
    """Whole minutes from *time* until *period_id* next starts (1…1440)."""
    period = get_period(period_id, periods)
    if period is None:
        return 0
    now = time_to_minutes(time.hour, time.minute)
    start = period.start
    if start <= now:
        start += MINUTES_PER_DAY
    return start - now


# ── Per-tick driver ──────────────────────────────────────────────────

def clock_may_advance(mode: UIMode, transitioning: bool) -> bool:
    """Time flows in normal play and while a plain text box is up."""
    if transitioning:
        return False
    if mode in (UIMode.NORMAL, UIMode.TEXT):
        return True
    if mode in (UIMode.MENU, UIMode.INVENTORY, UIMode.DIALOGUE):
        return False
    raise ValueError(f"unhandled UI mode {mode!r}")


def tick_clock(world, real_delta_ms: float) -> AdvanceResult | None:
    """Advance the world's GameClock resource for one frame.

    Returns ``None`` when time is frozen (modal UI or room transition).
    While the player is waiting, time runs at ``clock.wait_scale`` and
    stops exactly on the wait target.
    """
    clock = world.res(GameClock)
    if clock is None:
        return None
    ui = world.res(UIState)
    trans = world.res(Transition)
    mode = ui.mode if ui else UIMode.NORMAL
    if not clock_may_advance(mode, bool(trans and trans.active)):
        return None

    scale = clock.scale
    delta = real_delta_ms
    if clock.wait_target is not None:
        scale = _tun("clock", "wait_scale", WAIT_SCALE)
        remaining = clock.wait_target - clock.time.total_minutes
        if scale > 0:
            delta = min(delta, max(0.0, remaining) / scale * 1000.0)

    result = advance(clock.time, delta, scale)
    clock.time = result.new_time
    clock.period = result.new_period

    if clock.wait_target is not None and \
            clock.time.total_minutes >= clock.wait_target - 1e-6:
        clock.wait_target = None
        print(f"[CLOCK] Finished waiting at {format_time(clock.time)}")

    return result


def begin_wait(world, period_id: str | None = None) -> tuple[bool, str]:
    """Start fast-forwarding to the next start of *period_id*.

    Defaults to the period after the current one.  Refuses while any
    actor in the room could see the player.  Returns ``(ok, message)``.
    """
    from logic.restrictions import can_wait_safely

    clock = world.res(GameClock)
    if clock is None:
        return False, ""
    if not can_wait_safely(world):
        return False, "You can't wait here. Someone is watching."
    if period_id is None:
        period_id, minutes = next_period(clock.time)
    else:
        minutes = minutes_until_period(clock.time, period_id)
    period = get_period(period_id)
    if period is None or minutes <= 0:
        return False, ""
    # Measure from the floored minute so the target lands on the boundary.
    clock.wait_target = clock.time.total_minutes - clock.time.fraction + minutes
    print(f"[CLOCK] Waiting {minutes} min until {period.name}")
    return True, f"You wait until {period.name.lower()}."


def cancel_wait(world) -> None:
    clock = world.res(GameClock)
    if clock is not None:
        clock.wait_target = None
