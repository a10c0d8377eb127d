"""logic/dialogue.py — Dialogue trees and the conversation session.

Trees are immutable graphs of nodes addressed by id, loaded from
``data/dialogue.toml`` into the DialogueManager resource.  At most one
DialogueSession is open at a time; it lives in the DialogueSessionState
resource and is the only thing the UI reads (through ``current_view``).

Tree format::

    [tree.old_timer_main]
    start = "greeting_first"

    [tree.old_timer_main.node.escape_hints]
    speaker = "Old Timer"
    text = "The vents connect everything."
    effects = [
        { kind = "knowledge", value = "vent_system_hint" },
        { kind = "flag", value = "told_about_vents" },
    ]

    [[tree.old_timer_main.node.escape_hints.response]]
    text = "Anything else?"
    next = "more_hints"
    conditions = { flags = { told_about_vents = true }, knowledge = ["..."] }

Effect kinds:
    knowledge     append ``value`` to PlayerKnowledge
    relationship  add ``amount`` to the actor's relationship (clamped)
    flag          set the actor's flag ``value`` to true
    item / event  emitted as ItemGranted / StoryEvent for outside systems

A node's own effects are applied once, when the node is resolved: the
player picks one of its responses, or acknowledges a node that has no
responses.  Cancelling never applies pending effects and never rolls
back applied ones.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

from components import (
    ActorKind, Behavior, Dialogue, GridPos, Identity, PlayerKnowledge,
    PlayerState, Position, Relationship, UIMode, UIState, Vitals,
)
from components.dev_log import log_actor
from core.constants import RELATIONSHIP_MAX, RELATIONSHIP_MIN, RETURN_GREETING_NODE
from core.events import (
    DialogueEnded, DialogueStarted, EventBus, ItemGranted, KnowledgeLearned,
    StoryEvent,
)
from core.tuning import get as _tun
from logic.actors import actor_eid, update_actor
from logic.ai.behavior import enter_conversation, leave_conversation, mode_may_talk


# ── Tree data ────────────────────────────────────────────────────────

class EffectKind(Enum):
    KNOWLEDGE = "knowledge"
    RELATIONSHIP = "relationship"
    FLAG = "flag"
    ITEM = "item"
    EVENT = "event"


@dataclass(frozen=True)
class DialogueEffect:
    kind: EffectKind
    value: str = ""
    amount: int = 0


@dataclass(frozen=True)
class DialogueCondition:
    """Flag equality tests against the actor plus tokens the player must know."""
    flags: tuple[tuple[str, bool], ...] = ()
    knowledge: tuple[str, ...] = ()

    def met(self, relationship: Relationship | None,
            knowledge: PlayerKnowledge | None) -> bool:
        for name, expected in self.flags:
            have = relationship.flag(name) if relationship else False
            if have != expected:
                return False
        for token in self.knowledge:
            if knowledge is None or not knowledge.knows(token):
                return False
        return True


NO_CONDITION = DialogueCondition()


@dataclass(frozen=True)
class DialogueResponse:
    text: str
    next_node: str | None = None
    conditions: DialogueCondition = NO_CONDITION
    effects: tuple[DialogueEffect, ...] = ()


@dataclass(frozen=True)
class DialogueNode:
    id: str
    speaker: str
    text: str
    responses: tuple[DialogueResponse, ...] = ()
    conditions: DialogueCondition = NO_CONDITION
    effects: tuple[DialogueEffect, ...] = ()
    is_end: bool = False


@dataclass(frozen=True)
class DialogueTree:
    id: str
    start_node: str
    nodes: dict[str, DialogueNode] = field(default_factory=dict)


def _parse_effects(raw: list[dict], where: str) -> tuple[DialogueEffect, ...]:
    effects = []
    for e in raw:
        try:
            kind = EffectKind(e.get("kind", ""))
        except ValueError:
            print(f"[CONTENT] {where}: unknown effect kind {e.get('kind')!r}")
            continue
        effects.append(DialogueEffect(kind, str(e.get("value", "")),
                                      int(e.get("amount", 0))))
    return tuple(effects)


def _parse_condition(raw: dict | None) -> DialogueCondition:
    if not raw:
        return NO_CONDITION
    flags = tuple((str(k), bool(v)) for k, v in raw.get("flags", {}).items())
    return DialogueCondition(flags, tuple(raw.get("knowledge", ())))


def parse_tree(tree_id: str, raw: dict) -> DialogueTree:
    """Build a DialogueTree from one ``[tree.<id>]`` table."""
    nodes: dict[str, DialogueNode] = {}
    for node_id, n in raw.get("node", {}).items():
        where = f"{tree_id}.{node_id}"
        responses = tuple(
            DialogueResponse(
                text=r.get("text", "..."),
                next_node=r.get("next") or None,
                conditions=_parse_condition(r.get("conditions")),
                effects=_parse_effects(r.get("effects", []), where),
            )
            for r in n.get("response", [])
        )
        nodes[node_id] = DialogueNode(
            id=node_id,
            speaker=n.get("speaker", ""),
            text=n.get("text", ""),
            responses=responses,
            conditions=_parse_condition(n.get("conditions")),
            effects=_parse_effects(n.get("effects", []), where),
            is_end=bool(n.get("end", False)),
        )
    return DialogueTree(tree_id, raw.get("start", ""), nodes)


@dataclass
class DialogueManager:
    """World resource holding all dialogue trees."""
    _trees: dict[str, DialogueTree] = field(default_factory=dict)

    def register(self, tree: DialogueTree):
        self._trees[tree.id] = tree

    def load(self, raw: dict) -> int:
        """Register every ``[tree.*]`` table of a parsed dialogue.toml."""
        for tree_id, t in raw.get("tree", {}).items():
            self.register(parse_tree(tree_id, t))
        return len(raw.get("tree", {}))

    def get_tree(self, tree_id: str) -> DialogueTree | None:
        return self._trees.get(tree_id)

    def get_node(self, tree_id: str, node_id: str) -> DialogueNode | None:
        tree = self._trees.get(tree_id)
        if tree:
            return tree.nodes.get(node_id)
        return None

    def tree_ids(self) -> list[str]:
        return sorted(self._trees)


# ── Session ──────────────────────────────────────────────────────────

@dataclass
class DialogueSession:
    tree_id: str
    node_id: str
    actor_id: str
    eid: int
    selected: int = 0


@dataclass
class DialogueSessionState:
    """Singleton slot for the one open conversation (``None`` when closed)."""
    session: DialogueSession | None = None

    @property
    def active(self) -> bool:
        return self.session is not None


@dataclass(frozen=True)
class DialogueView:
    """What the dialogue box shows for the current node."""
    speaker: str
    text: str
    responses: tuple[str, ...]
    selected: int
    actor_id: str
    is_end: bool = False


@dataclass(frozen=True)
class DialogueResult:
    ok: bool
    message: str = ""


def _session(world) -> DialogueSession | None:
    state = world.res(DialogueSessionState)
    return state.session if state else None


def _knowledge(world) -> PlayerKnowledge | None:
    return world.res(PlayerKnowledge)


def visible_responses(world, session: DialogueSession,
                      node: DialogueNode) -> list[DialogueResponse]:
    """Responses whose conditions hold right now, in authored order."""
    rel = world.get(session.eid, Relationship)
    know = _knowledge(world)
    return [r for r in node.responses if r.conditions.met(rel, know)]


def _current_node(world, session: DialogueSession) -> DialogueNode | None:
    manager = world.res(DialogueManager)
    if manager is None:
        return None
    return manager.get_node(session.tree_id, session.node_id)


# ── Effects ──────────────────────────────────────────────────────────

def apply_effect(world, eid: int, actor_id: str, effect: DialogueEffect) -> None:
    bus = world.res(EventBus)
    kind = effect.kind
    if kind is EffectKind.KNOWLEDGE:
        know = _knowledge(world)
        if know is not None and know.learn(effect.value):
            print(f"[DIALOGUE] Learned: {effect.value}")
            if bus is not None:
                bus.emit(KnowledgeLearned(effect.value, actor_id))
    elif kind is EffectKind.RELATIONSHIP:
        rel = world.get(eid, Relationship)
        if rel is not None:
            level = max(RELATIONSHIP_MIN, min(RELATIONSHIP_MAX, rel.level + effect.amount))
            update_actor(world, actor_id, Relationship, level=level)
    elif kind is EffectKind.FLAG:
        rel = world.get(eid, Relationship)
        if rel is not None:
            update_actor(world, actor_id, Relationship,
                         flags={**rel.flags, effect.value: True})
    elif kind is EffectKind.ITEM:
        if bus is not None:
            bus.emit(ItemGranted(effect.value, actor_id))
    elif kind is EffectKind.EVENT:
        if bus is not None:
            bus.emit(StoryEvent(effect.value, actor_id))
    else:
        raise ValueError(f"unhandled effect kind {kind!r}")
    log_actor(world, eid, "effect", f"{kind.value} {effect.value or effect.amount}")


def _apply_all(world, session: DialogueSession, effects) -> None:
    for effect in effects:
        apply_effect(world, session.eid, session.actor_id, effect)


# ── Opening & closing ────────────────────────────────────────────────

def _notify(world, message: str) -> None:
    from logic.player import show_text
    show_text(world, message)


def _precondition_failure(world, eid: int, require_adjacent: bool) -> str | None:
    """User-facing reason the player can't talk to *eid*, or None."""
    player = world.res(PlayerState)
    pos = world.get(eid, Position)
    grid = world.get(eid, GridPos)
    if player is None or pos is None or grid is None:
        return "There's no one to talk to."
    if pos.location != player.location:
        return "They're too far away."
    if require_adjacent and abs(grid.col - player.col) + abs(grid.row - player.row) != 1:
        return "They're too far away."
    vitals = world.get(eid, Vitals)
    if vitals is not None and not vitals.alive:
        return "They're beyond talking."
    if vitals is not None and not vitals.conscious:
        return "They're out cold."
    behavior = world.get(eid, Behavior)
    if behavior is not None and not mode_may_talk(behavior.mode):
        return "They're in no mood to talk."
    return None


def _open(world, actor_id: str, *, require_adjacent: bool,
          notify: bool) -> DialogueResult:
    state = world.res(DialogueSessionState)
    manager = world.res(DialogueManager)
    if state is None or manager is None or state.active:
        return DialogueResult(False)
    eid = actor_eid(world, actor_id)
    if eid is None:
        return DialogueResult(False)

    reason = _precondition_failure(world, eid, require_adjacent)
    if reason is None:
        dlg = world.get(eid, Dialogue)
        tree = manager.get_tree(dlg.tree_id) if dlg and dlg.tree_id else None
        if tree is None:
            reason = "They have nothing to say."
    if reason is not None:
        if notify:
            _notify(world, reason)
        return DialogueResult(False, reason)

    rel = world.get(eid, Relationship)
    node_id = tree.start_node
    return_node = _tun("dialogue", "return_greeting_node", RETURN_GREETING_NODE)
    if rel is not None and rel.talked_to and return_node in tree.nodes:
        node_id = return_node
    node = tree.nodes.get(node_id)
    if node is None or not node.conditions.met(rel, _knowledge(world)):
        print(f"[DIALOGUE] {tree.id}: start node {node_id!r} unavailable")
        return DialogueResult(False)

    if rel is not None:
        update_actor(world, actor_id, Relationship, talked_to=True)
    behavior = world.get(eid, Behavior)
    if behavior is not None:
        update_actor(world, actor_id, Behavior, **enter_conversation(behavior))

    state.session = DialogueSession(tree.id, node_id, actor_id, eid)
    ui = world.res(UIState)
    if ui is not None:
        ui.mode = UIMode.DIALOGUE
    from logic.clock import cancel_wait
    cancel_wait(world)

    log_actor(world, eid, "dialogue", f"started {tree.id}:{node_id}")
    bus = world.res(EventBus)
    if bus is not None:
        bus.emit(DialogueStarted(eid, actor_id, tree.id, node_id))
    return DialogueResult(True)


def start_dialogue(world, actor_id: str) -> DialogueResult:
    """Player-initiated conversation with an adjacent actor.

    On a failed precondition nothing changes and the reason is shown
    in the text box.
    """
    return _open(world, actor_id, require_adjacent=True, notify=True)


def start_confrontation(world, eid: int) -> DialogueResult:
    """A guard calls the player over.  Adjacency is not required."""
    ident = world.get(eid, Identity)
    if ident is None:
        return DialogueResult(False)
    return _open(world, ident.actor_id, require_adjacent=False, notify=False)


def _close(world, cancelled: bool) -> None:
    state = world.res(DialogueSessionState)
    if state is None or state.session is None:
        return
    session = state.session
    state.session = None

    behavior = world.get(session.eid, Behavior)
    ident = world.get(session.eid, Identity)
    if behavior is not None:
        kind = ident.kind if ident else ActorKind.INMATE
        update_actor(world, session.actor_id, Behavior, **leave_conversation(behavior, kind))
    ui = world.res(UIState)
    if ui is not None and ui.mode is UIMode.DIALOGUE:
        ui.mode = UIMode.NORMAL

    log_actor(world, session.eid, "dialogue",
              f"{'cancelled' if cancelled else 'ended'} {session.tree_id}:{session.node_id}")
    bus = world.res(EventBus)
    if bus is not None:
        bus.emit(DialogueEnded(session.eid, session.actor_id, session.tree_id, cancelled))


def cancel_dialogue(world) -> None:
    _close(world, cancelled=True)


# ── Player input ─────────────────────────────────────────────────────

def select_response(world, index: int | None = None) -> bool:
    """Choose a visible response (default: the highlighted one).

    Out-of-range indices are ignored.  On a node with nothing to
    choose, selecting acknowledges it and ends the conversation.
    Returns True if the session advanced or closed.
    """
    session = _session(world)
    if session is None:
        return False
    node = _current_node(world, session)
    if node is None:
        _close(world, cancelled=False)
        return True

    options = visible_responses(world, session, node)
    if not options:
        _apply_all(world, session, node.effects)
        _close(world, cancelled=False)
        return True

    if index is None:
        index = session.selected
    if not 0 <= index < len(options):
        return False

    chosen = options[index]
    _apply_all(world, session, node.effects)
    _apply_all(world, session, chosen.effects)

    manager = world.res(DialogueManager)
    nxt = manager.get_node(session.tree_id, chosen.next_node) if chosen.next_node else None
    if nxt is None:
        _close(world, cancelled=False)
        return True
    if not nxt.conditions.met(world.get(session.eid, Relationship), _knowledge(world)):
        print(f"[DIALOGUE] {session.tree_id}: node {nxt.id!r} locked, closing")
        _close(world, cancelled=False)
        return True

    session.node_id = nxt.id
    session.selected = 0
    return True


def navigate(world, delta: int) -> None:
    """Move the highlight up (-1) or down (+1), wrapping around."""
    session = _session(world)
    if session is None:
        return
    node = _current_node(world, session)
    if node is None:
        return
    count = len(visible_responses(world, session, node))
    if count == 0:
        return
    session.selected = (session.selected + delta) % count


def current_view(world) -> DialogueView | None:
    session = _session(world)
    if session is None:
        return None
    node = _current_node(world, session)
    if node is None:
        return None
    options = visible_responses(world, session, node)
    return DialogueView(
        speaker=node.speaker,
        text=node.text,
        responses=tuple(r.text for r in options),
        selected=session.selected,
        actor_id=session.actor_id,
        is_end=node.is_end or not options,
    )
