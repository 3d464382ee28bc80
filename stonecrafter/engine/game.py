# stonecrafter/engine/game.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .models import ActiveEffect, Card, MissingPrerequisite, StoneQualities
from .prng import Mulberry32, normalize_seed, rng_for
from .stones import crack_rolls, derive_stone, generate_new_seed, generate_opponent_queue
from ..content.balance import DEFAULTS
from ..content.cards import build_deck, get_card

logger = logging.getLogger(__name__)


@dataclass
class GameState:
    """
    One player's whole game: inventory, currency, deck zones, player effects
    and the opponent ladder. Satisfies every protocol in `collaborators`.
    """
    game_seed: int
    opponents_seed: int
    player_name: str = "Player"
    currency: int = 0
    stones: List[StoneQualities] = field(default_factory=list)
    equipped_stone_id: Optional[int] = None
    opponents_index: int = 0
    opponent_queue: List[StoneQualities] = field(default_factory=list)
    deck: List[Card] = field(default_factory=list)
    hand: List[Card] = field(default_factory=list)
    discard_pile: List[Card] = field(default_factory=list)
    player_active_effects: List[ActiveEffect] = field(default_factory=list)
    shuffle_count: int = 0

    # -------- cards --------

    def draw_cards(self, count: int) -> List[Card]:
        drawn: List[Card] = []
        for _ in range(max(0, int(count))):
            if not self.deck:
                if not self.discard_pile:
                    break
                self._reshuffle_discard()
            drawn.append(self.deck.pop())
        return drawn

    def _reshuffle_discard(self) -> None:
        r = rng_for(self.game_seed, "shuffle", self.shuffle_count)
        self.shuffle_count += 1
        pile = list(self.discard_pile)
        self.discard_pile = []
        r.shuffle(pile)
        self.deck = pile + self.deck

    def add_to_hand(self, cards: Iterable[Card]) -> None:
        self.hand.extend(cards)

    def remove_from_hand(self, card_id: str) -> Optional[Card]:
        for i, card in enumerate(self.hand):
            if card.id == card_id:
                return self.hand.pop(i)
        return None

    def add_to_discard(self, cards: Iterable[Card]) -> None:
        self.discard_pile.extend(cards)

    # -------- effects --------

    def get_player_active_effects(self) -> List[ActiveEffect]:
        return list(self.player_active_effects)

    def set_player_active_effects(self, effects: Sequence[ActiveEffect]) -> None:
        self.player_active_effects = list(effects)

    # -------- inventory --------

    def get_stone(self, seed: int) -> Optional[StoneQualities]:
        return next((s for s in self.stones if s.seed == seed), None)

    def get_equipped_stone(self) -> Optional[StoneQualities]:
        if self.equipped_stone_id is None:
            return None
        return self.get_stone(self.equipped_stone_id)

    def add_stone(self, stone: StoneQualities) -> bool:
        if self.get_stone(stone.seed) is not None:
            return False
        self.stones.append(stone)
        self.stones.sort(key=lambda s: s.created_at)
        if self.equipped_stone_id is None:
            self.equipped_stone_id = stone.seed
        return True

    def remove_stone(self, seed: int) -> bool:
        stone = self.get_stone(seed)
        if stone is None:
            return False
        self.stones.remove(stone)
        if self.equipped_stone_id == seed:
            self.equipped_stone_id = self.stones[0].seed if self.stones else None
        return True

    def equip_stone(self, seed: Optional[int]) -> bool:
        if seed is None:
            self.equipped_stone_id = None
            return True
        if self.get_stone(seed) is None:
            return False
        self.equipped_stone_id = seed
        return True

    def add_currency(self, amount: int) -> None:
        self.currency = max(0, self.currency + int(amount))

    # -------- opponents --------

    def current_opponent(self) -> Optional[StoneQualities]:
        size = DEFAULTS["opponent_queue_size"]
        if not self.opponent_queue:
            self.opponent_queue = generate_opponent_queue(self.opponents_seed, size)
        if self.opponents_index >= len(self.opponent_queue):
            # ladder wraps: same seed, same opponents, from the top
            self.opponent_queue = generate_opponent_queue(self.opponents_seed, size)
            self.opponents_index = 0
        if not self.opponent_queue:
            return None
        return self.opponent_queue[self.opponents_index]

    def advance_opponent(self) -> None:
        self.opponents_index += 1

    # -------- stone actions --------

    def crack_open_stone(self) -> List[StoneQualities]:
        stone = self.get_equipped_stone()
        if stone is None:
            raise MissingPrerequisite("No stone equipped to crack.")

        prng = Mulberry32(self.game_seed + stone.seed + len(self.stones))
        self.remove_stone(stone.seed)
        found: List[StoneQualities] = []
        for seed in crack_rolls(prng):
            new_stone = derive_stone(seed)
            if self.add_stone(new_stone):
                found.append(new_stone)
        if found:
            self.equipped_stone_id = found[0].seed
        logger.debug("cracked %d into %s", stone.seed, [s.seed for s in found])
        return found

    def salvage_stone(self) -> int:
        stone = self.get_equipped_stone()
        if stone is None:
            raise MissingPrerequisite("No stone equipped to salvage.")
        amount = int(stone.rarity * DEFAULTS["salvage_per_rarity"])
        self.remove_stone(stone.seed)
        self.add_currency(amount)
        return amount

    # -------- export --------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "game_seed": self.game_seed,
            "opponents_seed": self.opponents_seed,
            "player_name": self.player_name,
            "currency": self.currency,
            "stones": [s.to_dict() for s in self.stones],
            "equipped_stone_id": self.equipped_stone_id,
            "opponents_index": self.opponents_index,
            "deck": [c.id for c in self.deck],
            "hand": [c.id for c in self.hand],
            "discard_pile": [c.id for c in self.discard_pile],
            "player_active_effects": [e.to_dict() for e in self.player_active_effects],
            "shuffle_count": self.shuffle_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameState":
        return cls(
            game_seed=int(data["game_seed"]),
            opponents_seed=int(data["opponents_seed"]),
            player_name=str(data.get("player_name", "Player")),
            currency=int(data.get("currency", 0)),
            stones=[StoneQualities.from_dict(s) for s in data.get("stones", [])],
            equipped_stone_id=data.get("equipped_stone_id"),
            opponents_index=int(data.get("opponents_index", 0)),
            deck=[get_card(cid) for cid in data.get("deck", [])],
            hand=[get_card(cid) for cid in data.get("hand", [])],
            discard_pile=[get_card(cid) for cid in data.get("discard_pile", [])],
            player_active_effects=[
                ActiveEffect.from_dict(e) for e in data.get("player_active_effects", [])
            ],
            shuffle_count=int(data.get("shuffle_count", 0)),
        )


def new_game(seed: int, player_name: str = "Player") -> GameState:
    seed = normalize_seed(seed)
    setup = Mulberry32(seed)
    game = GameState(
        game_seed=seed,
        opponents_seed=generate_new_seed(setup),
        player_name=player_name,
    )
    game.add_stone(derive_stone(generate_new_seed(setup)))

    deck = build_deck(DEFAULTS["deck_copies"])
    rng_for(seed, "deck").shuffle(deck)
    game.deck = deck
    logger.info("new game seed=%d player=%s", seed, player_name)
    return game


def dumps_save(game: GameState) -> str:
    return json.dumps(game.to_dict(), indent=2)
