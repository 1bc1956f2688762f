"""
Single pluggable source of randomness.

Every stochastic choice in the engines (chaser moves, particle resampling,
tie-breaking, sensor noise) draws from a random.Random instance handed in by
the caller, so a fixed seed reproduces a whole run.
"""

import random
from typing import Optional

RandomSource = random.Random


def make_rng(seed: Optional[int] = None) -> RandomSource:
    """Create a random source, seeded when a seed is given"""
    return random.Random(seed)


def ensure_rng(rng: Optional[RandomSource]) -> RandomSource:
    return rng if rng is not None else random.Random()
