"""test_dialogue.py — Dialogue sessions against the shipped content.

Run:  python test_dialogue.py

Uses the real data/ trees (Old Timer, guard confrontation) so the
content and the engine are tested together.  Every test builds a
fresh world.
"""
from __future__ import annotations
import sys, random, traceback

# ── Bootstrap ────────────────────────────────────────────────────────
from core.bootstrap import build_world
from core.ecs import World
from core.events import EventBus
from components import (
    Behavior, BehaviorMode, Dialogue, PlayerKnowledge, PlayerState,
    Relationship, TextDisplay, UIMode, UIState, Vitals,
)
from logic.actors import actor_eid
from logic.dialogue import (
    DialogueManager, DialogueSessionState, cancel_dialogue, current_view,
    navigate, parse_tree, select_response, start_confrontation, start_dialogue,
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


# ── Helpers ──────────────────────────────────────────────────────────

def _world_beside_old_timer() -> World:
    """Fresh world with the player one cell north of the Old Timer."""
    w = build_world()
    player = w.res(PlayerState)
    player.location, player.col, player.row = "cell_c12", 2, 2
    return w


def _node(w: World) -> str | None:
    state = w.res(DialogueSessionState)
    return state.session.node_id if state.session else None


def _active(w: World) -> bool:
    return w.res(DialogueSessionState).active


# ═══════════════════════════════════════════════════════════════════════
#  TEST 1: Opening
# ═══════════════════════════════════════════════════════════════════════

def test_opening():
    print("\n── Opening ──")
    w = build_world()
    result = start_dialogue(w, "old_timer")
    check(not result.ok and result.message == "They're too far away.",
          "different room → too far away", result.message)
    check(not _active(w), "no session after a failed start")
    display = w.res(TextDisplay)
    check(display.visible and display.text == "They're too far away.",
          "failure shown in the text box")
    check(w.res(UIState).mode is UIMode.TEXT, "text box mode")

    w = _world_beside_old_timer()
    eid = actor_eid(w, "old_timer")
    w.res(PlayerState).row = 1
    check(not start_dialogue(w, "old_timer").ok, "two cells away is too far")

    w.res(PlayerState).row = 2
    w.get(eid, Vitals).conscious = False
    result = start_dialogue(w, "old_timer")
    check(result.message == "They're out cold.", "unconscious actor refuses", result.message)
    w.get(eid, Vitals).conscious = True

    result = start_dialogue(w, "old_timer")
    check(result.ok and _active(w), "adjacent conscious actor → session")
    check(_node(w) == "greeting_first", "first conversation opens on the start node")
    check(w.res(UIState).mode is UIMode.DIALOGUE, "UI in dialogue mode")
    check(w.get(eid, Behavior).mode is BehaviorMode.CONVERSATION, "actor in conversation")
    check(w.get(eid, Relationship).talked_to, "talked_to set on open")
    check(not start_dialogue(w, "old_timer").ok, "only one session at a time")

    view = current_view(w)
    check(view.speaker == "Old Timer" and len(view.responses) == 3,
          "view shows speaker and three responses")
    check(len(w.res(EventBus).pending("DialogueStarted")) == 1, "DialogueStarted emitted")


# ═══════════════════════════════════════════════════════════════════════
#  TEST 2: Walking a path
# ═══════════════════════════════════════════════════════════════════════

def test_walk_path():
    print("\n── Walking a path ──")
    w = _world_beside_old_timer()
    eid = actor_eid(w, "old_timer")
    know = w.res(PlayerKnowledge)
    start_dialogue(w, "old_timer")

    select_response(w, 1)             # "How long have you been here?"
    check(_node(w) == "backstory", "→ backstory")
    select_response(w, 0)             # "What do you see?"
    check(_node(w) == "escape_hints", "→ escape hints")
    check(know.tokens == [], "node effects wait until the node is resolved")
    select_response(w, 1)             # "Anything else?"
    check(_node(w) == "more_hints", "→ more hints")
    check(know.tokens == ["vent_system_hint"], "escape hints granted its knowledge")
    check(w.get(eid, Relationship).flag("told_about_vents"), "flag set on the actor")
    select_response(w, 1)             # "I'll figure it out. Thanks."
    check(_node(w) == "end_grateful", "→ terminal node")
    view = current_view(w)
    check(view.is_end and view.responses == (), "terminal node has nothing to pick")

    select_response(w)
    check(not _active(w), "acknowledging the terminal node closes the session")
    check(know.tokens == ["vent_system_hint", "guard_station_tools"],
          "each knowledge effect applied once", f"{know.tokens}")
    check(w.get(eid, Relationship).level == 10, "terminal relationship effect applied",
          f"{w.get(eid, Relationship).level}")
    check(w.res(UIState).mode is UIMode.NORMAL, "UI back to normal")
    check(w.get(eid, Behavior).mode is BehaviorMode.IDLE, "actor back to idle")
    ended = w.res(EventBus).pending("DialogueEnded")
    check(len(ended) == 1 and not ended[0].cancelled, "DialogueEnded (not cancelled)")

    # Second conversation: return greeting with the vents branch unlocked
    start_dialogue(w, "old_timer")
    check(_node(w) == "greeting_return", "return greeting after the first talk")
    view = current_view(w)
    check("About those vents..." in view.responses, "flag-gated response visible")
    check("Where would a guard leave a screwdriver?" not in view.responses,
          "knowledge-gated response hidden")
    check(len(view.responses) == 4, "four visible responses", f"{view.responses}")


# ═══════════════════════════════════════════════════════════════════════
#  TEST 3: Effects exactly once
# ═══════════════════════════════════════════════════════════════════════

def test_effects_once():
    print("\n── Effects exactly once ──")
    w = _world_beside_old_timer()
    eid = actor_eid(w, "old_timer")
    start_dialogue(w, "old_timer")
    select_response(w, 1)             # backstory
    select_response(w, 1)             # "That's rough, man." (+5) → end_friendly
    check(w.get(eid, Relationship).level == 5, "response effect applied on selection")
    select_response(w)                # acknowledge end_friendly (+5)
    check(w.get(eid, Relationship).level == 10, "node effect applied on acknowledgement")
    select_response(w)
    check(w.get(eid, Relationship).level == 10, "selecting with no session is a no-op")

    w = _world_beside_old_timer()
    eid = actor_eid(w, "old_timer")
    start_dialogue(w, "old_timer")
    select_response(w, 2)             # "Leave me alone." (-5) → end_cold
    select_response(w)
    check(w.get(eid, Relationship).level == -5, "cold path costs five",
          f"{w.get(eid, Relationship).level}")


# ═══════════════════════════════════════════════════════════════════════
#  TEST 4: Navigation & cancel
# ═══════════════════════════════════════════════════════════════════════

def test_navigation_cancel():
    print("\n── Navigation & cancel ──")
    w = _world_beside_old_timer()
    eid = actor_eid(w, "old_timer")
    start_dialogue(w, "old_timer")
    navigate(w, -1)
    check(current_view(w).selected == 2, "up from the top wraps to the bottom")
    navigate(w, 1)
    check(current_view(w).selected == 0, "down from the bottom wraps to the top")
    navigate(w, 1)
    check(not select_response(w, 7), "out-of-range index ignored")
    check(_node(w) == "greeting_first", "node unchanged after a bad index")

    select_response(w)                # highlighted: "How long have you been here?"
    check(_node(w) == "backstory", "default selection uses the highlight")
    check(current_view(w).selected == 0, "highlight resets on a new node")

    select_response(w, 0)             # → escape_hints (effects pending)
    cancel_dialogue(w)
    check(not _active(w), "cancel closes")
    check(w.res(PlayerKnowledge).tokens == [], "cancel applies nothing pending")
    check(w.get(eid, Behavior).mode is BehaviorMode.IDLE, "actor released on cancel")
    ended = w.res(EventBus).pending("DialogueEnded")
    check(ended and ended[-1].cancelled, "DialogueEnded marked cancelled")
    cancel_dialogue(w)
    check(not _active(w), "cancelling twice is harmless")


# ═══════════════════════════════════════════════════════════════════════
#  TEST 5: Guard confrontation
# ═══════════════════════════════════════════════════════════════════════

def test_confrontation():
    print("\n── Guard confrontation ──")
    w = build_world()
    guard = actor_eid(w, "guard_martinez")
    w.res(PlayerState).location = "guard_station_b"
    w.res(PlayerState).col, w.res(PlayerState).row = 2, 1

    result = start_confrontation(w, guard)
    check(result.ok and _node(w) == "confrontation_restricted",
          "confrontation ignores adjacency")
    select_response(w, 0)             # "I got lost, officer."
    select_response(w, 0)             # → warning
    check(_node(w) == "warning", "→ warning")
    select_response(w, 0)             # "Understood." (warning node resolved)
    events = w.res(EventBus).pending("StoryEvent")
    check(len(events) == 1 and events[0].event_id == "guard_warning_issued",
          "event effect emitted as StoryEvent")
    select_response(w)
    check(not _active(w), "confrontation closes at its end node")
    check(w.get(guard, Behavior).cooldown > 0, "guard cools down after the talk")
    check(not w.res(TextDisplay).visible, "confrontations never use the text box")


# ═══════════════════════════════════════════════════════════════════════
#  TEST 6: Conditions on nodes
# ═══════════════════════════════════════════════════════════════════════

def test_locked_node():
    print("\n── Locked node ──")
    w = _world_beside_old_timer()
    manager = w.res(DialogueManager)
    manager.register(parse_tree("locked_test", {
        "start": "a",
        "node": {
            "a": {"speaker": "X", "text": "?", "response": [
                {"text": "go", "next": "b"},
                {"text": "secret", "next": "b",
                 "conditions": {"knowledge": ["password"]}},
            ]},
            "b": {"speaker": "X", "text": "!", "conditions": {"flags": {"trusted": True}},
                  "effects": [{"kind": "relationship", "amount": 50}]},
        },
    }))
    eid = actor_eid(w, "old_timer")
    w.get(eid, Dialogue).tree_id = "locked_test"

    start_dialogue(w, "old_timer")
    check(current_view(w).responses == ("go",), "knowledge-gated response hidden")
    select_response(w, 0)
    check(not _active(w), "locked next node ends the conversation")
    check(w.get(eid, Relationship).level == 0, "locked node's effects never applied")

    w.res(PlayerKnowledge).learn("password")
    start_dialogue(w, "old_timer")
    check(len(current_view(w).responses) == 2, "response appears once known")


def test_two_responses():
    print("\n── Two responses ──")
    w = _world_beside_old_timer()
    w.res(DialogueManager).register(parse_tree("fork_test", {
        "start": "ask",
        "node": {
            "ask": {"speaker": "Old Timer", "text": "Want to hear it?", "response": [
                {"text": "No."},
                {"text": "Go on.", "next": "tale"},
                {"text": "Who else?", "next": "nobody_here"},
            ]},
            "tale": {"speaker": "Old Timer", "text": "There was a tunnel once.",
                     "effects": [{"kind": "relationship", "amount": 5},
                                 {"kind": "knowledge", "value": "old_tunnel"}]},
        },
    }))
    eid = actor_eid(w, "old_timer")
    w.get(eid, Dialogue).tree_id = "fork_test"
    rel = w.get(eid, Relationship)
    knowledge = w.res(PlayerKnowledge)
    base = rel.level

    start_dialogue(w, "old_timer")
    check(select_response(w, 0) and not _active(w), "response without a next node closes at once")
    check(rel.level == base and not knowledge.knows("old_tunnel"), "nothing applied on the way out")

    start_dialogue(w, "old_timer")
    check(_node(w) == "ask", "second visit opens on the start node")
    select_response(w, 1)
    check(_active(w) and _node(w) == "tale", "second response moves to the closing node")
    check(current_view(w).responses == (), "closing node offers no responses")
    check(rel.level == base, "closing node's effects wait for acknowledgement")
    check(select_response(w) and not _active(w), "acknowledging closes the session")
    check(rel.level == base + 5 and knowledge.tokens.count("old_tunnel") == 1,
          "closing node's effects applied once", f"{rel.level} {knowledge.tokens}")
    check(not select_response(w), "nothing left to select")
    check(rel.level == base + 5, "still applied only once")

    start_dialogue(w, "old_timer")
    check(select_response(w, 2) and not _active(w), "next node missing from the tree closes")


# ═══════════════════════════════════════════════════════════════════════
#  TEST 7: Random walks always close
# ═══════════════════════════════════════════════════════════════════════

def test_random_walks():
    print("\n── Random walks ──")
    dangling = 0
    for seed in range(40):
        rng = random.Random(seed)
        w = _world_beside_old_timer()
        for _ in range(2):                      # first and return greeting
            if not start_dialogue(w, "old_timer").ok:
                dangling += 1
                break
            for _step in range(50):
                if not _active(w):
                    break
                view = current_view(w)
                select_response(w, rng.randrange(max(1, len(view.responses))))
            if _active(w):
                dangling += 1
                break
            if w.res(UIState).mode is not UIMode.NORMAL:
                dangling += 1
                break
    check(dangling == 0, "every walk to a terminal node closes the session",
          f"{dangling} dangling")


if __name__ == "__main__":
    sections = [
        ("Opening", test_opening),
        ("Walking a Path", test_walk_path),
        ("Effects Exactly Once", test_effects_once),
        ("Navigation & Cancel", test_navigation_cancel),
        ("Guard Confrontation", test_confrontation),
        ("Locked Node", test_locked_node),
        ("Two Responses", test_two_responses),
        ("Random Walks", test_random_walks),
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
    print(f"  Dialogue Tests: {_passed} passed, {_failed} failed  (total {total})")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)
