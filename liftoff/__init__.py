"""
Liftoff Package
===============

Arcade rocket launch: charge fuel by alternating two keys before the
countdown ends, then watch the rocket climb and fall back.

- rocket_core: headless simulation, renderer, audio and agent environment
- game_config.yaml: every gameplay tunable
"""
