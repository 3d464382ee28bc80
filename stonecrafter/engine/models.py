# stonecrafter/engine/models.py
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .collaborators import EffectStore


class FightError(ValueError):
    """Base for rejected engine actions. State is left untouched."""


class InvalidFightState(FightError):
    pass


class MissingPrerequisite(FightError):
    pass


@dataclass(frozen=True)
class StoneQualities:
    seed: int
    color: str
    shape: str
    weight: int              # 1..100
    rarity: int              # 0..100
    hardness: float          # 0.00..1.00
    magic: int               # 0..100
    created_at: int = field(default=0, compare=False)   # ms, incidental
    name: Optional[str] = field(default=None, compare=False)

    @property
    def display_name(self) -> str:
        return self.name or f"Stone {self.seed}"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoneQualities":
        return cls(
            seed=int(data["seed"]),
            color=str(data["color"]),
            shape=str(data["shape"]),
            weight=int(data["weight"]),
            rarity=int(data["rarity"]),
            hardness=float(data["hardness"]),
            magic=int(data["magic"]),
            created_at=int(data.get("created_at", 0) or 0),
            name=data.get("name"),
        )


@dataclass(frozen=True)
class ActiveEffect:
    id: str
    name: str
    description: str
    remaining_duration: int
    power_boost: float = 0
    defense_boost: float = 0
    heal_amount: float = 0
    source_card_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActiveEffect":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            remaining_duration=int(data["remaining_duration"]),
            power_boost=data.get("power_boost", 0) or 0,
            defense_boost=data.get("defense_boost", 0) or 0,
            heal_amount=data.get("heal_amount", 0) or 0,
            source_card_id=data.get("source_card_id"),
        )


class CardType(str, Enum):
    BUFF_ATTACK = "BUFF_ATTACK"
    BUFF_DEFENSE = "BUFF_DEFENSE"
    HEAL = "HEAL"
    ATTACK = "ATTACK"
    SPECIAL = "SPECIAL"


@dataclass(frozen=True)
class CardEffect:
    id: str
    name: str
    description: str
    duration: int
    power_boost: float = 0
    defense_boost: float = 0
    heal_amount: float = 0

    def instance_id(self, existing: Tuple[ActiveEffect, ...]) -> str:
        taken = {e.id for e in existing}
        n = 1
        while f"AE_{self.id}_{n}" in taken:
            n += 1
        return f"AE_{self.id}_{n}"

    def apply(
        self,
        target: "CombatParticipantState",
        existing,
        source_card_id: Optional[str] = None,
    ) -> Tuple[ActiveEffect, ...]:
        """Return `existing` plus one fresh instance of this effect.

        Never mutates `existing`. The target is accepted for effects that
        scale off the recipient; none of the catalog effects do yet.
        """
        current = tuple(existing)
        effect = ActiveEffect(
            id=self.instance_id(current),
            name=self.name,
            description=self.description,
            remaining_duration=int(self.duration),
            power_boost=self.power_boost,
            defense_boost=self.defense_boost,
            heal_amount=self.heal_amount,
            source_card_id=source_card_id,
        )
        return current + (effect,)


@dataclass(frozen=True)
class Card:
    id: str
    name: str
    type: CardType
    description: str
    effect: CardEffect

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "description": self.description,
        }


@dataclass(frozen=True)
class CombatParticipantState:
    base_stone: StoneQualities
    max_health: float
    current_health: float
    base_power: float
    base_defense: float
    current_power: float
    current_defense: float
    active_effects: Tuple[ActiveEffect, ...] = ()
    healed_effect_ids: FrozenSet[str] = frozenset()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stone_seed": self.base_stone.seed,
            "max_health": self.max_health,
            "current_health": self.current_health,
            "base_power": self.base_power,
            "base_defense": self.base_defense,
            "current_power": self.current_power,
            "current_defense": self.current_defense,
            "active_effects": [e.to_dict() for e in self.active_effects],
        }


@dataclass
class FightParticipant:
    stone_id: int
    combat_state: CombatParticipantState
    effects: "EffectStore"


@dataclass
class FightSession:
    session_id: str
    player: FightParticipant
    opponent: FightParticipant
    phase: str = "ready"                # "ready" | "choosing" | "playing" | "over"
    current_round: int = 0
    is_fight_over: bool = False
    winner: Optional[str] = None        # "player" | "opponent" | "tie"
    log: List[str] = field(default_factory=list)
    current_round_choices: List[Card] = field(default_factory=list)
    card_played_this_round: bool = False
    ended: bool = False

    def participant(self, side: str) -> FightParticipant:
        if side == "player":
            return self.player
        if side == "opponent":
            return self.opponent
        raise InvalidFightState(f"Unknown target '{side}'.")


@dataclass(frozen=True)
class NewRoundInfo:
    round_number: int
    cards_for_choice: List[Card]
    player_health: float
    opponent_health: float


@dataclass(frozen=True)
class CardPlayOutcome:
    card: Card
    target: str
    message: str
    player_state: CombatParticipantState
    opponent_state: CombatParticipantState
    player_effects: Tuple[ActiveEffect, ...]


@dataclass(frozen=True)
class RoundResolution:
    round_number: int
    player_damage_dealt: float
    opponent_damage_dealt: float
    player_health: float
    opponent_health: float
    round_winner: Optional[str]
    log_entry: str
    player_effects: Tuple[ActiveEffect, ...]


@dataclass(frozen=True)
class FightOutcome:
    player_stone_id: int
    opponent_stone_id: int
    winner: str
    log: List[str]
    currency_change: int = 0
    stone_lost_by_player: bool = False
    new_stone_gained: Optional[StoneQualities] = None
