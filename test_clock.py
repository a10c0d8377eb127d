"""test_clock.py — Game clock, periods, UI gating, and waiting.

Run:  python test_clock.py
"""
from __future__ import annotations
import sys, traceback

# ── Bootstrap ────────────────────────────────────────────────────────
from core.tuning import load as _load_tuning
_load_tuning()

from core.ecs import World
from components import GameClock, GameTime, PlayerState, Transition, UIMode, UIState
from logic.clock import (
    DEFAULT_PERIODS, Period, advance, begin_wait, cancel_wait,
    clock_may_advance, format_time, get_period, load_periods,
    minutes_until_period, next_period, period_for_time, tick_clock,
)


# ── Test harness ─────────────────────────────────────────────────────

_passed = 0
_failed = 0

def ok(label: str):
    global _passed
    _passed += 1
    print(f"  [PASS] {label}")

def fail(label: str, detail: str = ""):
    global _failed
    _failed += 1
    msg = f"  [FAIL] {label}"
    if detail:
        msg += f" — {detail}"
    print(msg)

def check(cond: bool, label: str, detail: str = ""):
    if cond:
        ok(label)
    else:
        fail(label, detail)
        raise AssertionError(f"{label} {detail}")


TABLE = list(DEFAULT_PERIODS)


def _clock_world(hour: int, minute: int) -> World:
    w = World()
    t = GameTime(day=1, hour=hour, minute=minute, total_minutes=0.0)
    w.set_res(GameClock(time=t, period=period_for_time(hour, minute, TABLE)))
    w.set_res(UIState())
    w.set_res(Transition())
    w.set_res(PlayerState(location="nowhere"))
    return w


# ═══════════════════════════════════════════════════════════════════════
#  TEST 1: Period lookup
# ═══════════════════════════════════════════════════════════════════════

def test_period_lookup():
    print("\n── Period lookup ──")
    check(period_for_time(6, 0, TABLE) == "early_morning", "06:00 is wake-up")
    check(period_for_time(7, 59, TABLE) == "breakfast", "07:59 is breakfast")
    check(period_for_time(12, 0, TABLE) == "lunch", "12:00 starts lunch (start inclusive)")
    check(period_for_time(21, 59, TABLE) == "evening_free", "21:59 still evening")
    check(period_for_time(22, 0, TABLE) == "lockdown", "22:00 starts lockdown")
    check(period_for_time(0, 0, TABLE) == "lockdown", "midnight inside wrapping lockdown")
    check(period_for_time(5, 59, TABLE) == "lockdown", "05:59 inside wrapping lockdown")

    lockdown = get_period("lockdown", TABLE)
    check(lockdown is not None and lockdown.wraps, "lockdown wraps midnight")
    check(not get_period("lunch", TABLE).wraps, "lunch does not wrap")

    # A gap in a hand-edited table falls back to the last period
    gappy = [Period("a", "A", 8, 0, 9, 0), Period("b", "B", 10, 0, 11, 0)]
    check(period_for_time(9, 30, gappy) == "b", "time in a gap resolves to last period")


# ═══════════════════════════════════════════════════════════════════════
#  TEST 2: Advance
# ═══════════════════════════════════════════════════════════════════════

def test_advance():
    print("\n── Advance ──")
    t = GameTime(day=1, hour=23, minute=30, total_minutes=0.0)
    r = advance(t, 60_000, 1.0, TABLE)
    check((r.new_time.hour, r.new_time.minute) == (0, 30), "23:30 + 60 s → 00:30",
          format_time(r.new_time))
    check(r.new_time.day == 2, "day rolls over at midnight", f"day={r.new_time.day}")
    check(r.new_period == "lockdown", "still lockdown after midnight")
    check(not r.period_changed, "no period change across midnight inside lockdown")
    check(abs(r.new_time.total_minutes - 60.0) < 1e-9, "totalMinutes grew by 60")

    t = GameTime(day=1, hour=7, minute=59, total_minutes=10.0)
    r = advance(t, 1000, 1.0, TABLE)
    check(r.period_changed and r.new_period == "morning_work",
          "07:59 + 1 min crosses into morning work")

    # Sub-minute frames accumulate instead of being lost
    t = GameTime(day=1, hour=9, minute=0)
    for _ in range(60):
        t = advance(t, 1000 / 60, 1.0, TABLE).new_time
    check(t.minute == 1 or (t.minute == 0 and t.fraction > 0.999),
          "sixty 1/60 s frames add one minute", f"{t.minute}+{t.fraction:.4f}")

    r = advance(GameTime(hour=9, minute=0, total_minutes=5.0), -500, 1.0, TABLE)
    check(r.new_time.total_minutes == 5.0, "negative delta does not rewind")

    r = advance(GameTime(hour=9, minute=0), 1000, 60.0, TABLE)
    check((r.new_time.hour, r.new_time.minute) == (10, 0), "scale 60 → one hour per second")

    a = advance(GameTime(hour=9), 123_456, 1.0, TABLE).new_time
    b = advance(advance(GameTime(hour=9), 100_000, 1.0, TABLE).new_time,
                23_456, 1.0, TABLE).new_time
    check(abs(a.total_minutes - b.total_minutes) < 1e-9, "advance is additive")


# ═══════════════════════════════════════════════════════════════════════
#  TEST 3: Next period / minutes until
# ═══════════════════════════════════════════════════════════════════════

def test_next_period():
    print("\n── Next period ──")
    pid, mins = next_period(GameTime(hour=6, minute=30), TABLE)
    check(pid == "breakfast" and mins == 30, "wake-up → breakfast in 30", f"{pid} {mins}")

    pid, mins = next_period(GameTime(hour=23, minute=0), TABLE)
    check(pid == "early_morning" and mins == 7 * 60, "lockdown → wake-up in 7 h",
          f"{pid} {mins}")

    check(minutes_until_period(GameTime(hour=12, minute=0), "lunch", TABLE) == 24 * 60,
          "waiting for the current period's start is a full day")


# ═══════════════════════════════════════════════════════════════════════
#  TEST 4: UI gating
# ═══════════════════════════════════════════════════════════════════════

def test_gating():
    print("\n── UI gating ──")
    check(clock_may_advance(UIMode.NORMAL, False), "normal play advances")
    check(clock_may_advance(UIMode.TEXT, False), "text box keeps the clock running")
    check(not clock_may_advance(UIMode.DIALOGUE, False), "dialogue freezes")
    check(not clock_may_advance(UIMode.INVENTORY, False), "inventory freezes")
    check(not clock_may_advance(UIMode.MENU, False), "menu freezes")
    check(not clock_may_advance(UIMode.NORMAL, True), "room transition freezes")

    w = _clock_world(9, 0)
    w.res(UIState).mode = UIMode.DIALOGUE
    check(tick_clock(w, 5000) is None, "tick_clock frozen in dialogue")
    check(w.res(GameClock).time.minute == 0, "time unchanged while frozen")

    w.res(UIState).mode = UIMode.TEXT
    r = tick_clock(w, 5000)
    check(r is not None and w.res(GameClock).time.minute == 5, "text mode advances 5 min")


# ═══════════════════════════════════════════════════════════════════════
#  TEST 5: Waiting
# ═══════════════════════════════════════════════════════════════════════

def test_waiting():
    print("\n── Waiting ──")
    load_periods([])  # keeps the current table
    w = _clock_world(6, 30)
    clock = w.res(GameClock)

    good, msg = begin_wait(w)
    check(good and clock.wait_target == 30.0, "wait until breakfast targets +30 min",
          f"target={clock.wait_target}")
    check("breakfast" in msg, "wait message names the period", msg)

    # One long frame at the wait scale stops exactly on the boundary
    tick_clock(w, 60_000)
    check((clock.time.hour, clock.time.minute) == (7, 0),
          "waiting stops at 07:00", format_time(clock.time))
    check(clock.wait_target is None, "wait cleared on arrival")
    check(clock.period == "breakfast", "period updated to breakfast")

    begin_wait(w, "lunch")
    check(clock.wait_target is not None, "explicit target period accepted")
    cancel_wait(w)
    check(clock.wait_target is None, "cancel_wait clears the target")


if __name__ == "__main__":
    sections = [
        ("Period Lookup", test_period_lookup),
        ("Advance", test_advance),
        ("Next Period", test_next_period),
        ("UI Gating", test_gating),
        ("Waiting", test_waiting),
    ]

    for name, fn in sections:
        try:
            fn()
        except AssertionError:
            pass
        except Exception:
            _failed += 1
            print(f"\n  [CRASH] {name} — unhandled exception:")
            traceback.print_exc()

    total = _passed + _failed
    print(f"\n{'=' * 60}")
    print(f"  Clock Tests: {_passed} passed, {_failed} failed  (total {total})")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)
