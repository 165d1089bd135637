"""Random roll utilities for Emberhymn Server."""

import math
import random

from pydantic import BaseModel

from config import RNG_SEED


class DamageRoll(BaseModel):
    """Result of a scaled damage roll."""
    total: int
    strength: int
    multiplier: float


def make_rng(seed: int | str | None = None) -> random.Random:
    """Create the Random instance a session draws from.

    Args:
        seed: Explicit seed. Falls back to EMBERHYMN_SEED, then to OS entropy.

    Returns:
        A new Random instance.
    """
    if seed is None:
        seed = RNG_SEED
    return random.Random(seed)


def roll_scaled(
    strength: int,
    base: float,
    spread: float,
    rng: random.Random | None = None,
) -> DamageRoll:
    """Roll floor(strength * (base + U[0, spread))).

    Args:
        strength: The attacker's damage scalar.
        base: Lowest multiplier.
        spread: Width of the uniform range added to base.
        rng: Optional Random instance for seeded/testing rolls.

    Returns:
        DamageRoll with the floored total and the multiplier used.
    """
    rng = rng or random.Random()
    multiplier = base + rng.random() * spread
    return DamageRoll(
        total=math.floor(strength * multiplier),
        strength=strength,
        multiplier=multiplier,
    )


def chance(probability: float, rng: random.Random | None = None) -> bool:
    """Return True with the given probability.

    Args:
        probability: Value in [0, 1].
        rng: Optional Random instance for seeded/testing rolls.
    """
    rng = rng or random.Random()
    return rng.random() < probability
