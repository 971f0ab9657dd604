"""Deterministic seeding and pseudo-random streams.

These helpers make spawn placement reproducible per device. They are not
suitable for anything that needs unpredictability: identities, tokens, or
access control must never be derived from them.
"""

from __future__ import annotations

import hashlib
from typing import Callable

_MASK32 = 0xFFFFFFFF
_GOLDEN_GAMMA = 0x6D2B79F5


def hash_to_seed(value: str) -> int:
    """Hash a string to an unsigned 32-bit seed, stable across platforms and runs."""
    digest = hashlib.blake2s(value.encode("utf-8"), digest_size=4).digest()
    return int.from_bytes(digest, "big")


def make_generator(seed: int) -> Callable[[], float]:
    """Return a mulberry32 stream yielding floats in [0, 1).

    The Nth call depends only on ``seed`` and N.
    """
    state = seed & _MASK32

    def _next() -> float:
        nonlocal state
        state = (state + _GOLDEN_GAMMA) & _MASK32
        t = state
        t = ((t ^ (t >> 15)) * (t | 1)) & _MASK32
        t ^= (t + (((t ^ (t >> 7)) * (t | 61)) & _MASK32)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / 4294967296

    return _next


def rand_between(rng: Callable[[], float], low: float, high: float) -> float:
    return rng() * (high - low) + low
