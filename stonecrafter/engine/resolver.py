# stonecrafter/engine/resolver.py
from __future__ import annotations

import logging
from typing import Optional

from .collaborators import FightHost, PlayerEffectStore, SessionEffectStore
from .effects import apply_effects, create_initial_state, damage, decay_effects
from .models import (
    Card,
    CardPlayOutcome,
    FightOutcome,
    FightParticipant,
    FightSession,
    InvalidFightState,
    MissingPrerequisite,
    NewRoundInfo,
    RoundResolution,
    StoneQualities,
)
from .prng import rng_for
from .rules import decide_winner, round_damage
from .stones import derive_stone, generate_new_seed
from ..content.balance import DEFAULTS

logger = logging.getLogger(__name__)

TARGETS = ("player", "opponent")


def _fmt(value: float) -> str:
    return f"{value:g}"


def _require_live(session: Optional[FightSession]) -> FightSession:
    if session is None:
        raise InvalidFightState("No fight in progress.")
    if session.ended:
        raise InvalidFightState("Fight has already been settled.")
    if session.is_fight_over:
        raise InvalidFightState("Fight is already over.")
    return session


def _sync(participant: FightParticipant) -> None:
    participant.combat_state = apply_effects(participant.combat_state, participant.effects.get())


def start_fight(
    player_stone: Optional[StoneQualities],
    opponent_stone: Optional[StoneQualities],
    game: FightHost,
    *,
    max_health: Optional[float] = None,
) -> FightSession:
    """
    Builds both sides from their stones and opens a session at round 0.
    Player effects are wiped on the host; a fight always starts clean.
    """
    if player_stone is None:
        raise MissingPrerequisite("No stone equipped to fight with.")
    if opponent_stone is None:
        raise MissingPrerequisite("No opponent available to fight.")

    health = DEFAULTS["max_health"] if max_health is None else max_health
    game.set_player_active_effects([])

    session = FightSession(
        session_id=f"fight-{player_stone.seed:08x}-{opponent_stone.seed:08x}",
        player=FightParticipant(
            stone_id=player_stone.seed,
            combat_state=create_initial_state(player_stone, health),
            effects=PlayerEffectStore(game),
        ),
        opponent=FightParticipant(
            stone_id=opponent_stone.seed,
            combat_state=create_initial_state(opponent_stone, health),
            effects=SessionEffectStore(),
        ),
    )
    session.log.append(
        f"Fight started: Player (Stone {player_stone.seed}) vs Opponent (Stone {opponent_stone.seed})"
    )
    logger.debug("started %s", session.session_id)
    return session


def start_new_round(
    session: FightSession,
    game: FightHost,
    *,
    count: Optional[int] = None,
) -> NewRoundInfo:
    _require_live(session)
    draw_count = DEFAULTS["cards_per_round"] if count is None else count

    # unpicked candidates from a skipped choice go to the discard pile, not the void
    if session.current_round_choices:
        game.add_to_discard(session.current_round_choices)
        session.current_round_choices = []

    session.current_round += 1
    session.card_played_this_round = False
    session.log.append(f"Round {session.current_round} begins.")

    _sync(session.player)
    _sync(session.opponent)

    cards = game.draw_cards(draw_count)
    if not cards:
        session.log.append("No cards left to draw for player choice.")
    session.current_round_choices = list(cards)
    session.phase = "choosing"

    return NewRoundInfo(
        round_number=session.current_round,
        cards_for_choice=list(cards),
        player_health=session.player.combat_state.current_health,
        opponent_health=session.opponent.combat_state.current_health,
    )


def player_selects_card(session: FightSession, game: FightHost, card_id: str) -> Card:
    """One irreversible pick per round: chosen card to hand, the rest to discard."""
    _require_live(session)
    if not session.current_round_choices:
        raise InvalidFightState("No cards to choose from this round.")
    chosen = next((c for c in session.current_round_choices if c.id == card_id), None)
    if chosen is None:
        raise InvalidFightState(f"Card '{card_id}' is not among this round's choices.")

    rest = list(session.current_round_choices)
    rest.remove(chosen)
    game.add_to_hand([chosen])
    if rest:
        game.add_to_discard(rest)
    session.current_round_choices = []
    session.phase = "playing"
    session.log.append(f"Player picks {chosen.name}.")
    return chosen


def player_plays_card(
    session: FightSession,
    game: FightHost,
    card_id: str,
    target: str,
) -> CardPlayOutcome:
    _require_live(session)
    if target not in TARGETS:
        raise InvalidFightState(f"Unknown target '{target}'.")
    if session.card_played_this_round:
        raise InvalidFightState("A card has already been played this round.")

    card = game.remove_from_hand(card_id)
    if card is None:
        raise InvalidFightState(f"Card '{card_id}' is not in hand.")
    game.add_to_discard([card])

    receiver = session.participant(target)
    new_effects = card.effect.apply(
        receiver.combat_state,
        receiver.effects.get(),
        source_card_id=card.id,
    )
    receiver.effects.set(new_effects)
    _sync(session.player)
    _sync(session.opponent)

    session.card_played_this_round = True
    session.log.append(
        f"Player plays {card.name} targeting {target}. Effect: {card.effect.description}"
    )
    logger.debug("%s: %s -> %s", session.session_id, card.id, target)

    return CardPlayOutcome(
        card=card,
        target=target,
        message=f"{card.name} played successfully.",
        player_state=session.player.combat_state,
        opponent_state=session.opponent.combat_state,
        player_effects=session.player.effects.get(),
    )


def resolve_current_round(session: FightSession, game: FightHost) -> RoundResolution:
    """
    Both sides hit at once, then effects tick down.
    Damage uses the stats that were live during the round; the win check
    runs after decay.
    """
    _require_live(session)
    player, opponent = session.player, session.opponent

    _sync(player)
    _sync(opponent)

    player_damage = round_damage(player.combat_state.current_power, opponent.combat_state.current_defense)
    opponent_damage = round_damage(opponent.combat_state.current_power, player.combat_state.current_defense)

    opponent.combat_state = damage(opponent.combat_state, player_damage)
    player.combat_state = damage(player.combat_state, opponent_damage)

    for side in (player, opponent):
        side.effects.set(decay_effects(side.effects.get()))
        _sync(side)

    p_hp = player.combat_state.current_health
    o_hp = opponent.combat_state.current_health
    log_entry = (
        f"Round {session.current_round} resolved: Player (H:{_fmt(p_hp)}) dealt {_fmt(player_damage)}. "
        f"Opponent (H:{_fmt(o_hp)}) dealt {_fmt(opponent_damage)}."
    )
    session.log.append(log_entry)

    winner = decide_winner(p_hp, o_hp)
    if winner is not None:
        session.is_fight_over = True
        session.winner = winner
        session.phase = "over"
        session.log.append(f"Fight Over! Winner: {winner}")
    else:
        session.phase = "ready"

    return RoundResolution(
        round_number=session.current_round,
        player_damage_dealt=player_damage,
        opponent_damage_dealt=opponent_damage,
        player_health=p_hp,
        opponent_health=o_hp,
        round_winner=winner,
        log_entry=log_entry,
        player_effects=player.effects.get(),
    )


def end_fight(session: FightSession, game: FightHost, *, concede: bool = False) -> FightOutcome:
    """
    Settles a finished fight against the host: currency, bonus stone, lost stone.
    A running fight can only be ended by conceding.
    """
    if session is None:
        raise InvalidFightState("No fight in progress.")
    if session.ended:
        raise InvalidFightState("Fight has already been settled.")
    if not session.is_fight_over and not concede:
        raise InvalidFightState("Fight is still in progress.")

    if not session.is_fight_over:
        session.log.append("Fight ended early by concession.")
    winner = session.winner
    if winner is None:
        winner = decide_winner(
            session.player.combat_state.current_health,
            session.opponent.combat_state.current_health,
        ) or "tie"
    session.winner = winner
    session.is_fight_over = True
    session.phase = "over"

    # settlement is reproducible from game seed + round + stone
    r = rng_for(game.game_seed, "settle", session.current_round, session.player.stone_id)
    currency = 0
    stone_lost = False
    new_stone = None

    if winner == "player":
        currency = int(DEFAULTS["win_currency"])
        game.add_currency(currency)
        if r.random() < DEFAULTS["new_stone_chance"]:
            new_stone = derive_stone(generate_new_seed(r))
            game.add_stone(new_stone)
    elif winner == "opponent":
        if r.random() < DEFAULTS["stone_loss_chance"]:
            stone_lost = game.remove_stone(session.player.stone_id)

    if session.current_round_choices:
        game.add_to_discard(session.current_round_choices)
        session.current_round_choices = []

    log = list(session.log)
    log.append(
        f"Final outcome: Winner {winner}. Currency: {currency}. Stone Lost: {stone_lost}. "
        f"New Stone: {new_stone.seed if new_stone else 'N/A'}"
    )
    session.ended = True
    logger.info("%s settled: winner=%s currency=%d", session.session_id, winner, currency)

    return FightOutcome(
        player_stone_id=session.player.stone_id,
        opponent_stone_id=session.opponent.stone_id,
        winner=winner,
        log=log,
        currency_change=currency,
        stone_lost_by_player=stone_lost,
        new_stone_gained=new_stone,
    )
