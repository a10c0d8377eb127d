"""test_patrol.py — Waypoint patrol state machine and the patch batch.

Run:  python test_patrol.py

update_patrol never mutates; these tests apply its patches by hand
(or through a PatchBatch) the way the tick does.
"""
from __future__ import annotations
import sys, math, traceback

# ── Bootstrap ────────────────────────────────────────────────────────
from core.tuning import load as _load_tuning
_load_tuning()

from core.ecs import World
from components import Behavior, Facing, GridPos, Patrol, Position, Waypoint
from logic.ai.patrol import direction_to, grid_from_position, update_patrol
from logic.patches import PatchBatch


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

DT = 1.0 / 60.0  # 60 FPS


# ── Helpers ──────────────────────────────────────────────────────────

def _walker(route: list[Waypoint], speed: float = 2.0):
    start = route[0] if route else Waypoint()
    comps = {
        Patrol: Patrol(route=route, speed=speed),
        Position: Position(float(start.col), float(start.row), start.location),
        GridPos: GridPos(start.col, start.row),
        Facing: Facing("down"),
    }
    return comps


def _step(comps: dict, dt: float = DT) -> dict:
    patch = update_patrol(comps[Patrol], comps[Position], comps[Facing], dt)
    for comp_type, changes in patch.items():
        for name, value in changes.items():
            setattr(comps[comp_type], name, value)
    return patch


def _run_until_arrivals(comps: dict, arrivals: int, max_ticks: int = 20_000) -> int:
    seen = 0
    for tick in range(max_ticks):
        patch = _step(comps)
        if Patrol in patch and patch[Patrol].get("moving") is False:
            seen += 1
            if seen == arrivals:
                return tick
    return -1


ROUTE = [
    Waypoint("corridor", 2, 4, 2.0, "right"),
    Waypoint("corridor", 6, 4, 1.0, "left"),
]


# ═══════════════════════════════════════════════════════════════════════
#  TEST 1: Helpers
# ═══════════════════════════════════════════════════════════════════════

def test_helpers():
    print("\n── Helpers ──")
    check(direction_to((0, 0), (3, 1)) == "right", "mostly east → right")
    check(direction_to((0, 0), (-3, 1)) == "left", "mostly west → left")
    check(direction_to((0, 0), (1, 3)) == "down", "mostly south → down")
    check(direction_to((0, 0), (2, -2)) == "up", "diagonal tie goes vertical")
    check(direction_to((4, 4), (4, 4), "left") == "left", "zero vector keeps facing")

    check(grid_from_position(2.49, 3.5) == (2, 4), "footprint centre rounds half up")
    check(grid_from_position(-0.4, 0.0) == (0, 0), "small negative rounds to 0")


# ═══════════════════════════════════════════════════════════════════════
#  TEST 2: Waiting and departing
# ═══════════════════════════════════════════════════════════════════════

def test_wait_and_depart():
    print("\n── Waiting & departing ──")
    comps = _walker(list(ROUTE))
    patrol = comps[Patrol]

    patch = _step(comps, 0.5)
    check(set(patch) == {Patrol} and math.isclose(patrol.wait_timer, 0.5),
          "waiting only accumulates the timer")
    check(comps[Position].x == 2.0, "no movement while waiting")

    _step(comps, 1.5)
    patch = _step(comps, 0.01)
    check(patrol.moving and patrol.target == (6, 4), "departs once the wait is served")
    check(patrol.index == 1, "index advances on departure")
    check(patrol.wait_timer == 0.0, "wait timer reset on departure")
    check(comps[Facing].direction == "right", "faces the next waypoint")

    _step(comps, 0.5)
    check(math.isclose(comps[Position].x, 3.0), "moves speed×dt toward the target",
          f"x={comps[Position].x}")
    check(comps[GridPos].col == 3, "grid cell follows the footprint centre")

    _step(comps, 10.0)
    check(comps[Position].x == 6.0 and not patrol.moving, "snaps onto the target, no overshoot")
    check(patrol.target is None, "target cleared on arrival")
    check(comps[Facing].direction == "left", "arrival takes the waypoint's facing")


# ═══════════════════════════════════════════════════════════════════════
#  TEST 3: Cyclic closure
# ═══════════════════════════════════════════════════════════════════════

def test_cyclic_closure():
    print("\n── Cyclic closure ──")
    for n, route in (
        (2, list(ROUTE)),
        (3, [Waypoint("c", 1, 1, 0.5), Waypoint("c", 5, 1, 0.0), Waypoint("c", 5, 4, 1.0)]),
    ):
        comps = _walker(route, speed=3.0)
        start = (comps[Position].x, comps[Position].y)
        tick = _run_until_arrivals(comps, n)
        check(tick >= 0, f"route of {n}: completes {n} legs")
        check(comps[Patrol].index == 0, f"route of {n}: index back to 0")
        end = (comps[Position].x, comps[Position].y)
        check(math.dist(start, end) < 1e-6, f"route of {n}: back at the start", f"{end}")

    comps = _walker([Waypoint("c", 3, 3, 0.2)])
    _run_until_arrivals(comps, 3, max_ticks=200)
    check(comps[Patrol].index == 0 and comps[Position].x == 3.0,
          "single-waypoint route stays put")


# ═══════════════════════════════════════════════════════════════════════
#  TEST 4: Degenerate routes
# ═══════════════════════════════════════════════════════════════════════

def test_degenerate():
    print("\n── Degenerate routes ──")
    comps = _walker([], speed=2.0)
    check(update_patrol(comps[Patrol], comps[Position], comps[Facing], DT) == {},
          "empty route → empty patch")
    comps = _walker(list(ROUTE), speed=0.0)
    check(update_patrol(comps[Patrol], comps[Position], comps[Facing], DT) == {},
          "zero speed → empty patch")


# ═══════════════════════════════════════════════════════════════════════
#  TEST 5: Patch batch
# ═══════════════════════════════════════════════════════════════════════

def test_patch_batch():
    print("\n── Patch batch ──")
    w = World()
    a = w.spawn()
    w.add(a, Behavior(alertness=10.0))
    b = w.spawn()

    batch = PatchBatch()
    batch.stage(a, Behavior, alertness=20.0)
    batch.stage(a, Behavior)  # empty: ignored
    batch.stage(b, Behavior, alertness=99.0)
    batch.stage(a, Behavior, alertness=30.0)
    check(len(batch) == 3, "empty stages are dropped", f"{len(batch)}")
    check(len(batch.pending_for(a)) == 2, "pending_for filters by entity")
    check(w.get(a, Behavior).alertness == 10.0, "nothing written before apply")

    applied = batch.apply(w)
    check(w.get(a, Behavior).alertness == 30.0, "later stage wins")
    check(applied == 2, "patch for a missing component is skipped", f"{applied}")
    check(len(batch) == 0, "batch emptied after apply")


if __name__ == "__main__":
    sections = [
        ("Helpers", test_helpers),
        ("Waiting & Departing", test_wait_and_depart),
        ("Cyclic Closure", test_cyclic_closure),
        ("Degenerate Routes", test_degenerate),
        ("Patch Batch", test_patch_batch),
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
    print(f"  Patrol Tests: {_passed} passed, {_failed} failed  (total {total})")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)
