"""Configuration package for the ecosystem game.

Named constants live in the ``game`` and ``server`` modules; ``GameConfig``
bundles the game constants into an object the domain components accept.
"""

from ecosim.config.game_config import GameConfig

__all__ = ["GameConfig"]
