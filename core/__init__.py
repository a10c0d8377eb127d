"""core package initialization.

Engine-level pieces shared by every system: the ECS world, the event
bus, rooms, tuning, content loading, and the pygame app shell.
"""

__all__ = ["app", "bootstrap", "constants", "data", "ecs", "events", "room",
           "scene", "tuning"]
