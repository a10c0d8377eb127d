"""logic Simulation systems package.

Subpackages
-----------
ai/         perception, patrol controller, behaviour modes & alertness

Top-level modules
-----------------
tick          per-frame orchestrator (clock → schedule → actors → events)
clock         game time, periods, UI gating, waiting
schedule      per-period directives and deferred relocation
dialogue      dialogue trees, conversation session, effects
player        player movement, room transitions, text box
restrictions  time-locked doors, restricted areas, safe waiting
actors        actor lookup and the single write path
patches       per-tick batch of staged component updates
"""
