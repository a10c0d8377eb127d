"""core/room.py — Static room geometry and the room registry.

Rooms are authored as character grids in ``data/rooms.toml`` (see
``TILE_CHARS``).  The simulation core only needs the boundary /
occupancy predicate and the spawn points; everything else about a tile
is the renderer's business.

    room = ROOMS["corridor_b"]
    room.is_wall(3, 4)           # column, row
    room.is_walkable(3, 4)
    room.spawn("npc")            # → (col, row) or None
"""

from __future__ import annotations
from dataclasses import dataclass, field

from core.constants import TILE_CHARS, TILE_FLOOR, TILE_WALL, WALKABLE_TILES


@dataclass
class Exit:
    """A door tile that moves the player to another room's spawn point."""
    exit_id: str
    col: int
    row: int
    target_room: str
    target_spawn: str


@dataclass
class Room:
    """One room: a ``height`` × ``width`` grid of tile ids (row-major)."""
    id: str
    width: int
    height: int
    tiles: list[list[int]]
    start: tuple[int, int] = (0, 0)                       # (col, row)
    spawns: dict[str, tuple[int, int]] = field(default_factory=dict)
    exits: list[Exit] = field(default_factory=list)
    name: str = ""

    def in_bounds(self, col: int, row: int) -> bool:
        return 0 <= col < self.width and 0 <= row < self.height

    def tile(self, col: int, row: int) -> int:
        return self.tiles[row][col]

    def is_wall(self, col: int, row: int) -> bool:
        """Out-of-bounds counts as wall: nothing sees or walks past the edge."""
        if not self.in_bounds(col, row):
            return True
        return self.tiles[row][col] == TILE_WALL

    def is_walkable(self, col: int, row: int) -> bool:
        if not self.in_bounds(col, row):
            return False
        return self.tiles[row][col] in WALKABLE_TILES

    def spawn(self, spawn_id: str) -> tuple[int, int] | None:
        return self.spawns.get(spawn_id)

    def exit_at(self, col: int, row: int) -> Exit | None:
        for ex in self.exits:
            if ex.col == col and ex.row == row:
                return ex
        return None


def parse_layout(rows: list[str]) -> list[list[int]]:
    """Convert a list of character rows into a tile-id grid.

    Rows shorter than the widest row are padded with floor; unknown
    characters read as floor.
    """
    width = max((len(r) for r in rows), default=0)
    grid: list[list[int]] = []
    for line in rows:
        grid.append([TILE_CHARS.get(ch, TILE_FLOOR) for ch in line.ljust(width, ".")])
    return grid


def room_from_dict(room_id: str, raw: dict) -> Room:
    """Build a Room from one ``[room.<id>]`` table of rooms.toml."""
    tiles = parse_layout(list(raw.get("layout", [])))
    height = len(tiles)
    width = len(tiles[0]) if height else 0
    start = tuple(raw.get("start", (width // 2, height // 2)))
    spawns = {k: (int(v[0]), int(v[1])) for k, v in raw.get("spawns", {}).items()}
    exits = [
        Exit(
            exit_id=e.get("id", f"{room_id}_exit_{i}"),
            col=int(e["col"]),
            row=int(e["row"]),
            target_room=e["target"],
            target_spawn=e.get("spawn", "default"),
        )
        for i, e in enumerate(raw.get("exits", []))
    ]
    return Room(
        id=room_id,
        width=width,
        height=height,
        tiles=tiles,
        start=(int(start[0]), int(start[1])),
        spawns=spawns,
        exits=exits,
        name=raw.get("name", room_id),
    )


# In-memory registry populated by ``core.data.ContentLoader``.
ROOMS: dict[str, Room] = {}


def get_room(room_id: str) -> Room | None:
    return ROOMS.get(room_id)


def register_room(room: Room) -> None:
    ROOMS[room.id] = room
