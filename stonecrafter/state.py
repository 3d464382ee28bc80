# stonecrafter/state.py
from typing import Dict, Optional

from .engine.game import GameState
from .engine.models import FightSession

games: Dict[str, GameState] = {}
fights: Dict[str, FightSession] = {}


def get_game(sid: str) -> Optional[GameState]:
    return games.get(sid)


def set_game(sid: str, game: GameState) -> None:
    games[sid] = game
    # a fresh game invalidates any fight the old one had open
    fights.pop(sid, None)


def get_fight(sid: str) -> Optional[FightSession]:
    return fights.get(sid)


def set_fight(sid: str, session: FightSession) -> None:
    fights[sid] = session


def clear_fight(sid: str) -> None:
    fights.pop(sid, None)


def cleanup(sid: str) -> None:
    fights.pop(sid, None)
    games.pop(sid, None)
