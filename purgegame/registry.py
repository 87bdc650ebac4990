"""Registration of player classes by name."""

from __future__ import annotations

from typing import Callable, TypeVar

from .structs import GameError

_T = TypeVar("_T")

_factories: dict[str, Callable] = {}


def register(name: str) -> Callable[[_T], _T]:
    """Class decorator registering a player factory under name."""

    def decorator(factory: _T) -> _T:
        _factories[name] = factory
        return factory

    return decorator


def _load_builtin_players() -> None:
    from . import ai_demo, ai_gyro, ai_null  # noqa: F401


def new_player(name: str) -> Callable:
    """Return the factory (player class) registered under name."""
    _load_builtin_players()
    try:
        return _factories[name]
    except KeyError:
        raise GameError(f"Player {name} not registered.") from None


def player_names() -> list[str]:
    """Return the registered player names in sorted order."""
    _load_builtin_players()
    return sorted(_factories)