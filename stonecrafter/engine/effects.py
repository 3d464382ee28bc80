# stonecrafter/engine/effects.py
from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional, Tuple

from .models import ActiveEffect, CombatParticipantState, StoneQualities
from .rules import clamp
from .stones import calculate_power
from ..content.balance import DEFAULTS


def create_initial_state(
    stone: StoneQualities,
    max_health: Optional[float] = None,
) -> CombatParticipantState:
    """Fresh combat stats for one side. Stones carry no intrinsic defense."""
    health = DEFAULTS["max_health"] if max_health is None else max_health
    power = calculate_power(stone)
    return CombatParticipantState(
        base_stone=stone,
        max_health=health,
        current_health=health,
        base_power=power,
        base_defense=0,
        current_power=power,
        current_defense=0,
    )


def apply_effects(
    state: CombatParticipantState,
    effects: Iterable[ActiveEffect],
) -> CombatParticipantState:
    """Recompute current stats from base + effects (pure).

    Boosts are summed from scratch every call. Heals land once per effect
    instance: ids already in `healed_effect_ids` are skipped, so calling this
    twice with the same list changes nothing the second time.
    """
    effects = tuple(effects)
    power = state.base_power
    defense = state.base_defense
    health = state.current_health
    healed = set()
    for effect in effects:
        power += effect.power_boost or 0
        defense += effect.defense_boost or 0
        if effect.heal_amount:
            if effect.id not in state.healed_effect_ids:
                health += effect.heal_amount
            healed.add(effect.id)

    return replace(
        state,
        current_power=power,
        current_defense=defense,
        current_health=clamp(health, 0, state.max_health),
        active_effects=effects,
        healed_effect_ids=frozenset(healed),
    )


def decay_effects(effects: Iterable[ActiveEffect]) -> Tuple[ActiveEffect, ...]:
    """Decrement durations; drop expired ones."""
    new_list = []
    for e in effects:
        d = int(e.remaining_duration) - 1
        if d > 0:
            new_list.append(replace(e, remaining_duration=d))
    return tuple(new_list)


def damage(state: CombatParticipantState, amount: float) -> CombatParticipantState:
    return replace(state, current_health=clamp(state.current_health - amount, 0, state.max_health))


def describe_effects(effects: Iterable[ActiveEffect]) -> str:
    parts = [f"{e.name} ({e.remaining_duration}r)" for e in effects]
    return ", ".join(parts) if parts else "No active effects"
