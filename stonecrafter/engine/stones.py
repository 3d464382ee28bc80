# stonecrafter/engine/stones.py
from __future__ import annotations

import time
from typing import List, Optional

from .models import StoneQualities
from .prng import MASK32, Mulberry32, normalize_seed
from ..content.balance import CAPS, DEFAULTS
from ..content.stones import COLORS, SHAPES


def _pick(prng: Mulberry32, options: list) -> str:
    return options[int(prng.next() * len(options))]


def _draw_int(prng: Mulberry32, lo: int, hi: int) -> int:
    # inclusive lo..hi
    return lo + int(prng.next() * (hi - lo + 1))


def derive_stone(
    seed: int,
    created_at: Optional[int] = None,
    name: Optional[str] = None,
) -> StoneQualities:
    """Derive every attribute of a stone from its seed.

    Draw order is fixed: color, shape, weight, rarity, hardness, magic.
    Reordering changes every stone ever saved.
    """
    seed = normalize_seed(seed)
    prng = Mulberry32(seed)

    color = _pick(prng, COLORS)
    shape = _pick(prng, SHAPES)
    weight = _draw_int(prng, CAPS["weight_min"], CAPS["weight_max"])
    rarity = _draw_int(prng, 0, CAPS["rarity_max"])
    hardness = _draw_int(prng, 0, CAPS["hardness_max"]) / 100
    magic = _draw_int(prng, 0, CAPS["magic_max"])

    if created_at is None:
        created_at = int(time.time() * 1000)

    return StoneQualities(
        seed=seed,
        color=color,
        shape=shape,
        weight=weight,
        rarity=rarity,
        hardness=hardness,
        magic=magic,
        created_at=created_at,
        name=name,
    )


def calculate_power(stone: StoneQualities) -> float:
    return stone.rarity * 0.4 + stone.magic * 0.3 + stone.weight * 0.5


def generate_new_seed(prng) -> int:
    """Mint a 32-bit seed from any generator exposing random()."""
    return int(prng.random() * MASK32)


def generate_opponent_queue(opponents_seed: int, count: Optional[int] = None) -> List[StoneQualities]:
    if count is None:
        count = DEFAULTS["opponent_queue_size"]
    if count < 0:
        raise ValueError("count must be >= 0")
    prng = Mulberry32(opponents_seed)
    queue: List[StoneQualities] = []
    for _ in range(count):
        queue.append(derive_stone(generate_new_seed(prng)))
    return queue


def crack_rolls(prng) -> List[int]:
    """Seeds produced by cracking one stone: one always, two more on luck."""
    seeds = [generate_new_seed(prng)]
    if prng.random() < DEFAULTS["crack_second_stone_chance"]:
        seeds.append(generate_new_seed(prng))
    if prng.random() < DEFAULTS["crack_third_stone_chance"]:
        seeds.append(generate_new_seed(prng))
    return seeds
