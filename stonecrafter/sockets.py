# stonecrafter/sockets.py
import logging
import time

from flask import request
from flask_socketio import emit

from . import state
from .engine import resolver
from .engine.game import new_game
from .engine.models import FightError
from .engine.prng import MASK32, seed_from_string
from .routes import stone_payload

logger = logging.getLogger(__name__)


def snapshot_for(session, game):
    """
    UI-friendly view of a running fight: both sides' stats, the hand,
    the pending choice and the tail of the combat log.
    """
    def pack(participant):
        cs = participant.combat_state
        return {
            "stone": participant.stone_id,
            "hp": cs.current_health, "hp_max": cs.max_health,
            "power": cs.current_power, "defense": cs.current_defense,
            "effects": [e.to_dict() for e in participant.effects.get()],
        }

    return {
        "session_id": session.session_id,
        "phase": session.phase,
        "round": session.current_round,
        "you": pack(session.player),
        "enemy": pack(session.opponent),
        "choices": [c.to_dict() for c in session.current_round_choices],
        "hand": [c.to_dict() for c in game.hand],
        "log": session.log[-30:],
        "winner": session.winner,
        "log_length": len(session.log),
    }


def game_payload(game):
    equipped = game.get_equipped_stone()
    opponent = game.current_opponent()
    return {
        "player_name": game.player_name,
        "game_seed": game.game_seed,
        "currency": game.currency,
        "stones": [stone_payload(s) for s in game.stones],
        "equipped": equipped.seed if equipped else None,
        "opponent": stone_payload(opponent) if opponent else None,
        "opponent_index": game.opponents_index,
        "deck_size": len(game.deck),
        "discard_size": len(game.discard_pile),
    }


def _seed_from_payload(value):
    if value is None or value == "":
        return int(time.time() * 1000) & MASK32
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return seed_from_string(str(value))


def _outcome_payload(outcome):
    return {
        "winner": outcome.winner,
        "currency_change": outcome.currency_change,
        "stone_lost": outcome.stone_lost_by_player,
        "new_stone": stone_payload(outcome.new_stone_gained) if outcome.new_stone_gained else None,
        "player_stone": outcome.player_stone_id,
        "opponent_stone": outcome.opponent_stone_id,
        "log": outcome.log[-30:],
    }


def register_stones_socket_handlers(socketio):
    def require_game(sid):
        game = state.get_game(sid)
        if not game:
            emit("stones_system", "No game loaded. Start a new game first.")
        return game

    def require_fight(sid):
        game = require_game(sid)
        if not game:
            return None, None
        session = state.get_fight(sid)
        if not session:
            emit("stones_system", "Not in a fight.")
            return game, None
        return game, session

    def settle(sid, game, session, concede=False):
        outcome = resolver.end_fight(session, game, concede=concede)
        game.advance_opponent()
        state.clear_fight(sid)
        emit("fight_outcome", _outcome_payload(outcome))
        emit("stones_state", game_payload(game))

    def next_round(game, session):
        info = resolver.start_new_round(session, game)
        emit("fight_round", {
            "round": info.round_number,
            "choices": [c.to_dict() for c in info.cards_for_choice],
            "player_health": info.player_health,
            "opponent_health": info.opponent_health,
        })
        emit("fight_snapshot", snapshot_for(session, game))

    @socketio.on("stones_new_game")
    def stones_new_game(payload=None):
        sid = request.sid
        if not isinstance(payload, dict):
            payload = {}
        seed = _seed_from_payload(payload.get("seed"))
        name = str(payload.get("name") or "Player").strip() or "Player"
        game = new_game(seed, name)
        state.set_game(sid, game)
        emit("stones_system", f"New game started with seed {game.game_seed}.")
        emit("stones_state", game_payload(game))

    @socketio.on("stones_equip")
    def stones_equip(payload=None):
        sid = request.sid
        game = require_game(sid)
        if not game:
            return
        if state.get_fight(sid):
            emit("stones_system", "Cannot change stones mid-fight.")
            return
        seed = payload.get("seed") if isinstance(payload, dict) else payload
        try:
            seed = int(seed)
        except (TypeError, ValueError):
            emit("stones_system", f"Invalid stone id '{seed}'.")
            return
        if not game.equip_stone(seed):
            emit("stones_system", f"No stone {seed} in inventory.")
            return
        emit("stones_state", game_payload(game))

    @socketio.on("stones_crack")
    def stones_crack(payload=None):
        sid = request.sid
        game = require_game(sid)
        if not game:
            return
        if state.get_fight(sid):
            emit("stones_system", "Cannot crack stones mid-fight.")
            return
        try:
            found = game.crack_open_stone()
        except FightError as exc:
            emit("stones_system", str(exc))
            return
        names = ", ".join(s.display_name for s in found) or "nothing"
        emit("stones_system", f"Cracked open: {names}.")
        emit("stones_state", game_payload(game))

    @socketio.on("stones_salvage")
    def stones_salvage(payload=None):
        sid = request.sid
        game = require_game(sid)
        if not game:
            return
        if state.get_fight(sid):
            emit("stones_system", "Cannot salvage stones mid-fight.")
            return
        try:
            amount = game.salvage_stone()
        except FightError as exc:
            emit("stones_system", str(exc))
            return
        emit("stones_system", f"Salvaged for {amount} currency.")
        emit("stones_state", game_payload(game))

    @socketio.on("fight_start")
    def fight_start(payload=None):
        sid = request.sid
        game = require_game(sid)
        if not game:
            return
        previous = state.get_fight(sid)
        if previous:
            # the running fight is settled, not dropped; the ladder moves on
            emit("stones_system", "Previous fight conceded.")
            settle(sid, game, previous, concede=True)
        try:
            session = resolver.start_fight(game.get_equipped_stone(), game.current_opponent(), game)
        except FightError as exc:
            emit("stones_system", str(exc))
            return
        state.set_fight(sid, session)
        emit("stones_system", "Fight begins.")
        next_round(game, session)

    @socketio.on("fight_select")
    def fight_select(payload=None):
        sid = request.sid
        game, session = require_fight(sid)
        if not session:
            return
        card_id = payload.get("card_id", "") if isinstance(payload, dict) else str(payload or "").strip()
        try:
            card = resolver.player_selects_card(session, game, card_id)
        except FightError as exc:
            logger.warning("rejected select from %s: %s", sid, exc)
            emit("stones_system", str(exc))
            return
        emit("stones_system", f"{card.name} added to hand.")
        emit("fight_snapshot", snapshot_for(session, game))

    @socketio.on("fight_play")
    def fight_play(payload=None):
        sid = request.sid
        game, session = require_fight(sid)
        if not session:
            return
        if not isinstance(payload, dict):
            payload = {}
        card_id = payload.get("card_id", "")
        target = payload.get("target", "player")
        try:
            result = resolver.player_plays_card(session, game, card_id, target)
        except FightError as exc:
            logger.warning("rejected play from %s: %s", sid, exc)
            emit("stones_system", str(exc))
            return
        emit("stones_system", result.message)
        emit("fight_snapshot", snapshot_for(session, game))

    @socketio.on("fight_resolve")
    def fight_resolve(payload=None):
        sid = request.sid
        game, session = require_fight(sid)
        if not session:
            return
        try:
            resolver.resolve_current_round(session, game)
        except FightError as exc:
            emit("stones_system", str(exc))
            return
        emit("fight_snapshot", snapshot_for(session, game))
        if session.is_fight_over:
            settle(sid, game, session)
        else:
            next_round(game, session)

    @socketio.on("fight_concede")
    def fight_concede(payload=None):
        sid = request.sid
        game, session = require_fight(sid)
        if not session:
            return
        try:
            settle(sid, game, session, concede=True)
        except FightError as exc:
            emit("stones_system", str(exc))

    @socketio.on("disconnect")
    def stones_disconnect(*args):
        state.cleanup(request.sid)
