# stonecrafter/engine/collaborators.py
"""Interfaces the fight engine calls out to.

The engine never owns decks, currency or inventory. It talks to whatever
object the host passes in, as long as it satisfies these protocols.
`stonecrafter.engine.game.GameState` implements all of them.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Protocol, Sequence, Tuple

from .models import ActiveEffect, Card, StoneQualities


class CardZones(Protocol):
    def draw_cards(self, count: int) -> List[Card]: ...

    def add_to_hand(self, cards: Iterable[Card]) -> None: ...

    def remove_from_hand(self, card_id: str) -> Optional[Card]: ...

    def add_to_discard(self, cards: Iterable[Card]) -> None: ...


class PlayerEffects(Protocol):
    def get_player_active_effects(self) -> Sequence[ActiveEffect]: ...

    def set_player_active_effects(self, effects: Sequence[ActiveEffect]) -> None: ...


class Inventory(Protocol):
    game_seed: int

    def get_equipped_stone(self) -> Optional[StoneQualities]: ...

    def add_currency(self, amount: int) -> None: ...

    def remove_stone(self, seed: int) -> bool: ...

    def add_stone(self, stone: StoneQualities) -> bool: ...


class FightHost(CardZones, PlayerEffects, Inventory, Protocol):
    """Everything a fight session needs from the host game."""


class EffectStore(Protocol):
    def get(self) -> Tuple[ActiveEffect, ...]: ...

    def set(self, effects: Sequence[ActiveEffect]) -> None: ...


class PlayerEffectStore:
    """Player effects live game-wide, on the host."""

    def __init__(self, host: PlayerEffects):
        self.host = host

    def get(self) -> Tuple[ActiveEffect, ...]:
        return tuple(self.host.get_player_active_effects())

    def set(self, effects: Sequence[ActiveEffect]) -> None:
        self.host.set_player_active_effects(list(effects))


class SessionEffectStore:
    """Opponent effects live only as long as the fight does."""

    def __init__(self, effects: Sequence[ActiveEffect] = ()):
        self.effects: Tuple[ActiveEffect, ...] = tuple(effects)

    def get(self) -> Tuple[ActiveEffect, ...]:
        return self.effects

    def set(self, effects: Sequence[ActiveEffect]) -> None:
        self.effects = tuple(effects)
