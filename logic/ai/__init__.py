"""logic/ai — AI subpackage.

Modules
-------
perception  vision cones, line of sight, detection level
patrol      waypoint patrol state machine (returns patches)
behavior    alertness, behaviour-mode decisions, conversation hand-off
"""
