"""Status effects held in a racer's buff and debuff slots.

A racer has exactly one buff slot and one debuff slot. Applying a new effect
replaces whatever the slot held, so only the most recent effect of each
polarity is ever active.
"""

from dataclasses import dataclass, replace
from typing import TypeVar


@dataclass(frozen=True)
class Boost:
    """Speed multiplier buff."""

    remaining: float
    multiplier: float


@dataclass(frozen=True)
class Immune:
    """Blocks incoming debuffs."""

    remaining: float


@dataclass(frozen=True)
class Magnet:
    """Catch-up buff; ``boost_percent`` of 0.5 means +50% speed."""

    remaining: float
    boost_percent: float


@dataclass(frozen=True)
class Stun:
    """No movement and no skill use."""

    remaining: float


@dataclass(frozen=True)
class Splash:
    """Speed reduction debuff; ``reduction`` of 0.2 means -20% speed."""

    remaining: float
    reduction: float


Buff = Boost | Immune | Magnet
Debuff = Stun | Splash

E = TypeVar("E", Boost, Immune, Magnet, Stun, Splash)


def tick(effect: E | None, seconds: float) -> E | None:
    """Advance an effect by ``seconds``; expired effects are dropped.

    Args:
        effect: Slot content
        seconds: Elapsed time

    Returns:
        The effect with less time remaining, or None once it ran out
    """
    if effect is None:
        return None
    remaining = max(0.0, effect.remaining - seconds)
    if remaining <= 0:
        return None
    return replace(effect, remaining=remaining)
