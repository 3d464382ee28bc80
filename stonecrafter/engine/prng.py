# stonecrafter/engine/prng.py
import random
from typing import Any

MASK32 = 0xFFFFFFFF


def normalize_seed(seed: int) -> int:
    """Wrap any integer (signed or not) into the unsigned 32-bit range."""
    if isinstance(seed, bool) or not isinstance(seed, int):
        raise TypeError(f"seed must be an int, got {type(seed).__name__}")
    return seed & MASK32


def _imul(a: int, b: int) -> int:
    return (a * b) & MASK32


class Mulberry32:
    """Mulberry32 generator. Same seed, same sequence of floats in [0, 1)."""

    def __init__(self, seed: int):
        self.state = normalize_seed(seed)

    def next(self) -> float:
        self.state = (self.state + 0x6D2B79F5) & MASK32
        t = self.state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & MASK32
        return ((t ^ (t >> 14)) & MASK32) / 4294967296

    # lets stone helpers take either this or random.Random
    random = next


def seed_from_string(text: str) -> int:
    if not isinstance(text, str):
        raise TypeError(f"text seed must be a str, got {type(text).__name__}")
    stripped = text.strip()
    digits = stripped[1:] if stripped.startswith("-") else stripped
    if digits.isdigit() and digits.isascii():
        return normalize_seed(int(stripped))
    h = 0
    for ch in text:
        h = (h * 31 + ord(ch)) & MASK32
    return h


def rng_for(seed: int, *parts: Any) -> random.Random:
    # deterministic per seed + stream label(s)
    key = ":".join(str(p) for p in (seed, *parts))
    return random.Random(key)
