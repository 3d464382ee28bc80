# stonecrafter/content/cards.py
from typing import Dict, List

from ..engine.models import Card, CardEffect, CardType

EFFECTS: Dict[str, Dict] = {
    "E_POWER_BOOST_SMALL": {
        "name": "Minor Power Boost",
        "description": "+5 Power for 2 rounds.",
        "duration": 2,
        "power_boost": 5,
    },
    "E_DEFENSE_BOOST_SMALL": {
        "name": "Minor Defense Boost",
        "description": "+5 Defense for 2 rounds.",
        "duration": 2,
        "defense_boost": 5,
    },
    "E_INSTANT_HEAL": {
        "name": "Instant Healing",
        "description": "Instantly recover 10 health.",
        "duration": 1,  # consumed after landing once
        "heal_amount": 10,
    },
    "E_POWER_BOOST_MEDIUM": {
        "name": "Empowered Power Boost",
        "description": "+8 Power for 1 round.",
        "duration": 1,
        "power_boost": 8,
    },
    "E_QUICK_STRIKE": {
        "name": "Quick Strike Ready",
        "description": "Next attack +10 Power.",
        "duration": 1,
        "power_boost": 10,
    },
    "E_GRANITE_WARD": {
        "name": "Granite Ward",
        "description": "+10 Defense for 1 round.",
        "duration": 1,
        "defense_boost": 10,
    },
    "E_SAP_STRENGTH": {
        "name": "Sapped",
        "description": "-6 Power for 2 rounds.",
        "duration": 2,
        "power_boost": -6,
    },
}

CARDS: Dict[str, Dict] = {
    "C_POWER_BOOST_1": {
        "name": "Stone Shard",
        "type": "BUFF_ATTACK",
        "flavor": "A small shard that hums with energy.",
        "effect": "E_POWER_BOOST_SMALL",
    },
    "C_DEFENSE_BOOST_1": {
        "name": "Rock Skin",
        "type": "BUFF_DEFENSE",
        "flavor": "Temporarily hardens the stone.",
        "effect": "E_DEFENSE_BOOST_SMALL",
    },
    "C_INSTANT_HEAL_1": {
        "name": "Healing Dust",
        "type": "HEAL",
        "flavor": "A pinch of sparkling dust.",
        "effect": "E_INSTANT_HEAL",
    },
    "C_POWER_BOOST_2": {
        "name": "Empowered Fragment",
        "type": "BUFF_ATTACK",
        "flavor": "",
        "effect": "E_POWER_BOOST_MEDIUM",
    },
    "C_QUICK_STRIKE": {
        "name": "Quick Strike",
        "type": "SPECIAL",
        "flavor": "Your next attack lands harder.",
        "effect": "E_QUICK_STRIKE",
    },
    "C_GRANITE_WARD": {
        "name": "Granite Ward",
        "type": "BUFF_DEFENSE",
        "flavor": "A slab of granite between you and harm.",
        "effect": "E_GRANITE_WARD",
    },
    "C_SAP_STRENGTH": {
        "name": "Sap Strength",
        "type": "ATTACK",
        "flavor": "Cracks the enemy's resolve.",
        "effect": "E_SAP_STRENGTH",
    },
}


def _build_effect(effect_id: str) -> CardEffect:
    data = EFFECTS[effect_id]
    return CardEffect(
        id=effect_id,
        name=data["name"],
        description=data["description"],
        duration=int(data["duration"]),
        power_boost=data.get("power_boost", 0),
        defense_boost=data.get("defense_boost", 0),
        heal_amount=data.get("heal_amount", 0),
    )


def _build_card(card_id: str) -> Card:
    data = CARDS[card_id]
    effect = _build_effect(data["effect"])
    description = " ".join(part for part in (data.get("flavor", ""), effect.description) if part)
    return Card(
        id=card_id,
        name=data["name"],
        type=CardType(data["type"]),
        description=description,
        effect=effect,
    )


CATALOG: Dict[str, Card] = {card_id: _build_card(card_id) for card_id in CARDS}


def get_card(card_id: str) -> Card:
    if card_id not in CATALOG:
        raise KeyError(f"Unknown card '{card_id}'")
    return CATALOG[card_id]


def all_cards() -> List[Card]:
    return list(CATALOG.values())


def build_deck(copies: int = 1) -> List[Card]:
    deck: List[Card] = []
    for _ in range(max(0, int(copies))):
        deck.extend(all_cards())
    return deck
