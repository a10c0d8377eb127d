"""core/constants.py — Shared constants used across the codebase.

Centralises magic numbers so there's exactly one place to change them.
Values that affect testable behaviour are the *defaults* for the
matching ``data/tuning.toml`` keys; systems always read them through
``core.tuning.get`` so a designer can retune without touching code.

Unit System
-----------
All gameplay distances are measured in **tiles**:

    Distance / position     tiles
    Speed                   tiles/s
    Time (real)             s  (ms at the host-loop boundary)
    Time (game)             min (game-minutes)
    Angles                  °
    Alertness               0–100 (unitless)
    Detection level         0–1   (unitless)
    Relationship            -100–100

Rendering converts to pixels via ``TILE_SIZE`` (px per tile).
Only the scene deals in pixels.

Game Time Scale
~~~~~~~~~~~~~~~
At ``TIME_SCALE`` 1.0, one real second is one game-minute, so a full
day lasts 24 real minutes.  Waiting fast-forwards at ``WAIT_SCALE``.
"""

# ── Perception ──────────────────────────────────────────────────────
REACT_THRESHOLD: float = 0.5        # guards react above this detection
SNEAK_MULTIPLIER: float = 0.6       # detection × this while sneaking

# ── Behaviour ───────────────────────────────────────────────────────
ALERTNESS_MAX: float = 100.0
ALERTNESS_DECAY_PER_SEC: float = 5.0
ALERTNESS_GAIN_PER_SEC: float = 40.0   # × detection level
REACTION_COOLDOWN: float = 10.0        # s after a confrontation ends

# ── Social ──────────────────────────────────────────────────────────
RELATIONSHIP_MIN: int = -100
RELATIONSHIP_MAX: int = 100
RETURN_GREETING_NODE = "greeting_return"

# ── Clock ───────────────────────────────────────────────────────────
TIME_SCALE: float = 1.0             # game-minutes per real second
WAIT_SCALE: float = 60.0            # game-minutes per real second while waiting
MAX_FRAME_MS: float = 250.0         # longest real frame the clock will accept
MINUTES_PER_DAY = 24 * 60

# ── Player / transitions ────────────────────────────────────────────
TRANSITION_MS: float = 250.0        # fade-out and fade-in, each

# Tile IDs  (rooms.toml uses the characters in TILE_CHARS)
TILE_VOID   = 0
TILE_FLOOR  = 1
TILE_WALL   = 2
TILE_DOOR   = 3
TILE_BED    = 4
TILE_DESK   = 5
TILE_TOILET = 6
TILE_SINK   = 7
TILE_CHAIR  = 8
TILE_LOCKER = 9

TILE_CHARS = {
    " ": TILE_VOID,
    ".": TILE_FLOOR,
    "#": TILE_WALL,
    "D": TILE_DOOR,
    "B": TILE_BED,
    "T": TILE_DESK,
    "W": TILE_TOILET,
    "S": TILE_SINK,
    "C": TILE_CHAIR,
    "L": TILE_LOCKER,
}

# Tiles the player can step onto.  Furniture blocks movement but not sight.
WALKABLE_TILES = frozenset({TILE_FLOOR, TILE_DOOR})

# Render
TILE_SIZE = 32

# Tile palette, index → color
TILE_COLORS = {
    0: (0, 0, 0),          # void
    1: (61, 61, 61),       # floor
    2: (26, 26, 26),       # wall
    3: (139, 69, 19),      # door
    4: (45, 45, 45),       # bed
    5: (45, 45, 45),       # desk
    6: (45, 45, 45),       # toilet
    7: (45, 45, 45),       # sink
    8: (45, 45, 45),       # chair
    9: (45, 45, 45),       # locker
}
