# stonecrafter/engine/rules.py
from typing import Optional


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def round_damage(power: float, defense: float) -> float:
    # defense soaks flat; never negative
    return max(0, power - defense)


def decide_winner(player_health: float, opponent_health: float) -> Optional[str]:
    """None while both sides are standing."""
    player_down = player_health <= 0
    opponent_down = opponent_health <= 0
    if player_down and opponent_down:
        return "tie"
    if opponent_down:
        return "player"
    if player_down:
        return "opponent"
    return None
