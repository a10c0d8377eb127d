"""logic/player.py — Player movement, room transitions, and the text box.

The player is not an entity; it is the PlayerState resource.  Moving
is a one-cell grid step.  Stepping onto an exit starts a fade-out, the
room swap happens at the midpoint, then the view fades back in.  The
clock is frozen for the whole transition.
"""

from __future__ import annotations

from components import (
    GameClock, GridPos, PlayerState, TextDisplay, Transition, UIMode, UIState,
    Vitals,
)
from components.spatial import DIRECTION_STEPS
from core.constants import TRANSITION_MS
from core.room import get_room
from core.tuning import get as _tun
from logic.actors import actors_in_location


# ── Text box ─────────────────────────────────────────────────────────

def show_text(world, text: str, title: str = "") -> None:
    display = world.res(TextDisplay)
    if display is None:
        return
    display.text = text
    display.title = title
    display.visible = True
    ui = world.res(UIState)
    if ui is not None and ui.mode is UIMode.NORMAL:
        ui.mode = UIMode.TEXT


def dismiss_text(world) -> None:
    display = world.res(TextDisplay)
    if display is not None:
        display.visible = False
    ui = world.res(UIState)
    if ui is not None and ui.mode is UIMode.TEXT:
        ui.mode = UIMode.NORMAL


# ── Movement ─────────────────────────────────────────────────────────

def toggle_sneak(world) -> bool:
    player = world.res(PlayerState)
    if player is None:
        return False
    player.sneaking = not player.sneaking
    return player.sneaking


def _occupied(world, location: str, col: int, row: int) -> bool:
    for _actor_id, eid in actors_in_location(world, location):
        grid = world.get(eid, GridPos)
        if grid is not None and (grid.col, grid.row) == (col, row):
            return True
    return False


def move_player(world, direction: str) -> bool:
    """Step one cell in *direction*.  Returns True if the player moved.

    Turning always happens; the step is refused by walls, room edges,
    actors, locked doors, or any modal UI state.
    """
    from logic.clock import cancel_wait
    from logic.restrictions import is_door_open

    player = world.res(PlayerState)
    step = DIRECTION_STEPS.get(direction)
    if player is None or step is None:
        return False
    ui = world.res(UIState)
    if ui is not None and ui.mode is not UIMode.NORMAL:
        return False
    trans = world.res(Transition)
    if trans is not None and trans.active:
        return False

    player.facing = direction
    room = get_room(player.location)
    if room is None:
        return False
    col, row = player.col + step[0], player.row + step[1]
    if not room.is_walkable(col, row) or _occupied(world, room.id, col, row):
        return False

    exit_ = room.exit_at(col, row)
    if exit_ is not None:
        clock = world.res(GameClock)
        if clock is not None and not is_door_open(exit_.exit_id, clock.period):
            show_text(world, "The door is locked.")
            return False

    player.col, player.row = col, row
    cancel_wait(world)

    if exit_ is not None and trans is not None:
        trans.phase = "fade_out"
        trans.elapsed_ms = 0.0
        trans.target_room = exit_.target_room
        trans.target_spawn = exit_.target_spawn
    return True


def update_transition(world, dt_ms: float) -> None:
    """Advance the fade; swap rooms at the midpoint."""
    trans = world.res(Transition)
    player = world.res(PlayerState)
    if trans is None or not trans.active or player is None:
        return
    half = _tun("player", "transition_ms", TRANSITION_MS)
    trans.elapsed_ms += dt_ms
    if trans.elapsed_ms < half:
        return

    if trans.phase == "fade_out":
        room = get_room(trans.target_room)
        if room is None:
            print(f"[MAIN] Exit leads to unknown room {trans.target_room!r}")
        else:
            col, row = room.spawn(trans.target_spawn) or room.start
            player.location = room.id
            player.col, player.row = col, row
            print(f"[MAIN] Entered {room.name}")
        trans.phase = "fade_in"
        trans.elapsed_ms = 0.0
    else:
        trans.phase = ""
        trans.elapsed_ms = 0.0
        trans.target_room = ""
        trans.target_spawn = ""


# ── Interaction prompt ───────────────────────────────────────────────

def find_adjacent_actor(world) -> str | None:
    """Id of the first conscious, living actor one step from the player."""
    player = world.res(PlayerState)
    if player is None:
        return None
    for actor_id, eid in actors_in_location(world, player.location):
        grid = world.get(eid, GridPos)
        if grid is None:
            continue
        if abs(grid.col - player.col) + abs(grid.row - player.row) != 1:
            continue
        vitals = world.get(eid, Vitals)
        if vitals is not None and not (vitals.conscious and vitals.alive):
            continue
        return actor_id
    return None


def talk_to_adjacent(world):
    """Open a conversation with whoever is next to the player."""
    from logic.dialogue import DialogueResult, start_dialogue

    actor_id = find_adjacent_actor(world)
    if actor_id is None:
        show_text(world, "There's no one close enough to talk to.")
        return DialogueResult(False, "There's no one close enough to talk to.")
    return start_dialogue(world, actor_id)
