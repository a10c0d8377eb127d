"""logic/ai/behavior.py — Behaviour modes, alertness, and guard reactions.

Alertness is a 0–100 suspicion scalar.  While the player is detected
it rises with the detection level; otherwise it decays at a fixed rate.
Guards that are idle or patrolling react to a strong enough detection
by calling the player over.  ``alert`` and ``chase`` are held in the
mode set but nothing escalates into them yet.
"""

from __future__ import annotations

from components import ActorKind, Behavior, BehaviorMode
from core.constants import (
    ALERTNESS_DECAY_PER_SEC, ALERTNESS_GAIN_PER_SEC, ALERTNESS_MAX,
    REACTION_COOLDOWN,
)
from core.tuning import get as _tun


# ── Alertness ────────────────────────────────────────────────────────

def clamp_alertness(value: float) -> float:
    return max(0.0, min(ALERTNESS_MAX, value))


def increase_alertness(behavior: Behavior, amount: float) -> float:
    """Return the alertness after adding *amount* (capped at 100)."""
    return clamp_alertness(behavior.alertness + max(0.0, amount))


def decrease_alertness(behavior: Behavior, dt: float) -> float:
    """Return the alertness after *dt* seconds of decay (floored at 0)."""
    rate = _tun("behavior", "alertness_decay_per_sec", ALERTNESS_DECAY_PER_SEC)
    return clamp_alertness(behavior.alertness - rate * max(0.0, dt))


def update_alertness(behavior: Behavior, level: float, dt: float) -> dict:
    """Patch for one tick of alertness and reaction-cooldown bookkeeping."""
    if level > 0:
        gain = _tun("behavior", "alertness_gain_per_sec", ALERTNESS_GAIN_PER_SEC)
        alertness = increase_alertness(behavior, gain * level * dt)
    else:
        alertness = decrease_alertness(behavior, dt)
    changes = {}
    if alertness != behavior.alertness:
        changes["alertness"] = alertness
    if behavior.cooldown > 0:
        changes["cooldown"] = max(0.0, behavior.cooldown - dt)
    return changes


# ── Mode decisions ───────────────────────────────────────────────────

def mode_patrols(mode: BehaviorMode) -> bool:
    """Whether the patrol controller drives an actor in *mode*."""
    if mode is BehaviorMode.PATROL:
        return True
    if mode in (BehaviorMode.IDLE, BehaviorMode.ALERT, BehaviorMode.CHASE,
                BehaviorMode.CONVERSATION):
        return False
    raise ValueError(f"unhandled behavior mode {mode!r}")


def mode_may_react(mode: BehaviorMode) -> bool:
    """Whether an actor in *mode* can be interrupted by a reaction."""
    if mode in (BehaviorMode.IDLE, BehaviorMode.PATROL):
        return True
    if mode in (BehaviorMode.ALERT, BehaviorMode.CHASE, BehaviorMode.CONVERSATION):
        return False
    raise ValueError(f"unhandled behavior mode {mode!r}")


def mode_may_talk(mode: BehaviorMode) -> bool:
    """Whether the player can open a conversation with an actor in *mode*."""
    if mode in (BehaviorMode.IDLE, BehaviorMode.PATROL, BehaviorMode.ALERT):
        return True
    if mode in (BehaviorMode.CHASE, BehaviorMode.CONVERSATION):
        return False
    raise ValueError(f"unhandled behavior mode {mode!r}")


def ready_to_react(kind: ActorKind, behavior: Behavior) -> bool:
    """A guard idling or patrolling with no cooldown pending."""
    return (kind is ActorKind.GUARD
            and mode_may_react(behavior.mode)
            and behavior.cooldown <= 0)


# ── Conversation hand-off ────────────────────────────────────────────
# Both return field changes for ``update_actor``; neither writes.

def enter_conversation(behavior: Behavior) -> dict:
    changes = {"mode": BehaviorMode.CONVERSATION}
    if behavior.mode is not BehaviorMode.CONVERSATION:
        changes["resume_mode"] = behavior.mode
    return changes


def leave_conversation(behavior: Behavior, kind: ActorKind) -> dict:
    """Fall back to the remembered mode; guards start their cooldown."""
    changes = {}
    if behavior.mode is BehaviorMode.CONVERSATION:
        changes["mode"] = behavior.resume_mode
    if kind is ActorKind.GUARD:
        changes["cooldown"] = _tun("behavior", "reaction_cooldown", REACTION_COOLDOWN)
    return changes


def directive_changes(behavior: Behavior, mode: BehaviorMode) -> dict:
    """Field changes for a schedule directive switching to *mode*.

    Mid-conversation the mode is queued in ``resume_mode`` instead.
    """
    current = behavior.mode
    if current is BehaviorMode.CONVERSATION:
        return {"resume_mode": mode}
    if current in (BehaviorMode.IDLE, BehaviorMode.PATROL,
                   BehaviorMode.ALERT, BehaviorMode.CHASE):
        return {} if current is mode else {"mode": mode}
    raise ValueError(f"unhandled behavior mode {current!r}")
