"""Card catalog and participant effect pipeline tests."""

import pytest

from stonecrafter.content.balance import DEFAULTS
from stonecrafter.content.cards import all_cards, build_deck, get_card
from stonecrafter.engine.effects import (
    apply_effects,
    create_initial_state,
    damage,
    decay_effects,
    describe_effects,
)
from stonecrafter.engine.models import ActiveEffect, CardType
from stonecrafter.engine.rules import round_damage


def _fx(eid, duration=2, power=0, defense=0, heal=0):
    return ActiveEffect(
        id=eid, name=eid, description="", remaining_duration=duration,
        power_boost=power, defense_boost=defense, heal_amount=heal,
    )


class TestCatalog:
    def test_catalog_contents(self):
        ids = [c.id for c in all_cards()]
        assert ids[:4] == ["C_POWER_BOOST_1", "C_DEFENSE_BOOST_1", "C_INSTANT_HEAL_1", "C_POWER_BOOST_2"]
        assert len(ids) == len(set(ids)) == 7

    def test_get_card(self):
        card = get_card("C_DEFENSE_BOOST_1")
        assert card.name == "Rock Skin"
        assert card.type is CardType.BUFF_DEFENSE
        assert card.effect.defense_boost == 5
        assert card.effect.duration == 2

    def test_unknown_card(self):
        with pytest.raises(KeyError):
            get_card("C_NOPE")

    def test_build_deck(self):
        assert len(build_deck(2)) == 14
        assert build_deck(0) == []

    def test_card_to_dict(self):
        data = get_card("C_INSTANT_HEAL_1").to_dict()
        assert data["type"] == "HEAL"
        assert "effect" not in data


class TestCardEffectApply:
    def test_apply_is_pure(self, make_stone):
        state = create_initial_state(make_stone(1))
        effect = get_card("C_POWER_BOOST_1").effect
        existing = (_fx("AE_OTHER_1"),)
        result = effect.apply(state, existing)
        assert existing == (_fx("AE_OTHER_1"),)
        assert len(result) == 2
        assert result[0] == existing[0]
        assert result[1].remaining_duration == 2
        assert result[1].power_boost == 5

    def test_same_inputs_same_outputs(self, make_stone):
        state = create_initial_state(make_stone(1))
        effect = get_card("C_QUICK_STRIKE").effect
        assert effect.apply(state, ()) == effect.apply(state, ())

    def test_instance_ids_unique(self, make_stone):
        state = create_initial_state(make_stone(1))
        effect = get_card("C_POWER_BOOST_1").effect
        effects = effect.apply(state, ())
        effects = effect.apply(state, effects)
        effects = effect.apply(state, effects)
        assert [e.id for e in effects] == [
            "AE_E_POWER_BOOST_SMALL_1",
            "AE_E_POWER_BOOST_SMALL_2",
            "AE_E_POWER_BOOST_SMALL_3",
        ]

    def test_source_card_recorded(self, make_stone):
        state = create_initial_state(make_stone(1))
        effects = get_card("C_GRANITE_WARD").effect.apply(state, (), source_card_id="C_GRANITE_WARD")
        assert effects[0].source_card_id == "C_GRANITE_WARD"


class TestInitialState:
    def test_defaults(self, make_stone):
        state = create_initial_state(make_stone(1, weight=40))
        assert state.max_health == DEFAULTS["max_health"] == state.current_health
        assert state.base_power == state.current_power == 20
        assert state.base_defense == state.current_defense == 0
        assert state.active_effects == ()

    def test_custom_max_health(self, make_stone):
        assert create_initial_state(make_stone(1), 250).current_health == 250


class TestApplyEffects:
    def test_boosts_recomputed_from_base(self, make_stone):
        state = create_initial_state(make_stone(1, weight=40))
        boosted = apply_effects(state, [_fx("a", power=5), _fx("b", power=3, defense=4)])
        assert boosted.current_power == 28
        assert boosted.current_defense == 4
        cleared = apply_effects(boosted, [])
        assert cleared.current_power == 20
        assert cleared.current_defense == 0

    def test_input_not_mutated(self, make_stone):
        state = create_initial_state(make_stone(1))
        apply_effects(state, [_fx("a", power=5)])
        assert state.current_power == state.base_power
        assert state.active_effects == ()

    def test_heal_once_per_instance(self, make_stone):
        state = damage(create_initial_state(make_stone(1)), 50)
        effects = [_fx("h", duration=2, heal=10)]
        once = apply_effects(state, effects)
        twice = apply_effects(once, effects)
        assert once.current_health == 60
        assert twice.current_health == 60

    def test_heal_clamped_to_max(self, make_stone):
        state = damage(create_initial_state(make_stone(1)), 5)
        assert apply_effects(state, [_fx("h", heal=10)]).current_health == 100

    def test_second_heal_instance_lands(self, make_stone):
        state = damage(create_initial_state(make_stone(1)), 50)
        one = apply_effects(state, [_fx("h1", heal=10)])
        two = apply_effects(one, [_fx("h1", heal=10), _fx("h2", heal=10)])
        assert two.current_health == 70

    def test_negative_boost_goes_below_zero(self, make_stone):
        state = create_initial_state(make_stone(1, weight=1))
        sapped = apply_effects(state, [_fx("s", power=-6), _fx("d", defense=-2)])
        assert sapped.current_power == state.base_power - 6 == -5.5
        assert sapped.current_defense == -2
        # a negative stat still never deals negative damage
        assert round_damage(sapped.current_power, 0) == 0

    def test_active_effects_mirror_list(self, make_stone):
        state = create_initial_state(make_stone(1))
        effects = [_fx("a", power=1)]
        assert apply_effects(state, effects).active_effects == tuple(effects)


class TestDecay:
    def test_decrements_and_drops(self):
        result = decay_effects([_fx("a", duration=1), _fx("b", duration=3)])
        assert [(e.id, e.remaining_duration) for e in result] == [("b", 2)]

    def test_input_untouched(self):
        effects = (_fx("a", duration=2),)
        decay_effects(effects)
        assert effects[0].remaining_duration == 2

    def test_describe(self):
        assert describe_effects([]) == "No active effects"
        assert describe_effects([_fx("Boost", duration=2)]) == "Boost (2r)"


def test_damage_clamps_at_zero(make_stone):
    state = create_initial_state(make_stone(1))
    assert damage(state, 500).current_health == 0
