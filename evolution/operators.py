"""
DNA operators for Evolver candidates.
Per-symbol mutation and single-point splicing over plain strings.
"""

import logging
import random
from typing import Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# Shared generator for callers that do not supply their own
default_rng = random.Random()


def mutate_dna(
    dna: str,
    alphabet: Sequence[str],
    rate: float,
    rng: Optional[random.Random] = None,
) -> str:
    """
    Roll once per symbol and replace the symbol when the roll is below `rate`.

    The replacement is drawn uniformly from `alphabet` minus the original
    symbol, so a mutated position never keeps its value. Positions holding
    the only symbol of the alphabet cannot change and are left alone.

    Args:
        dna: DNA to mutate
        alphabet: Symbols a position may take
        rate: Per-symbol mutation probability in [0, 1]
        rng: Randomness provider, default_rng when omitted

    Returns:
        Mutated DNA of the same length
    """
    rng = rng or default_rng
    bases = list(dna)

    for index, symbol in enumerate(bases):
        if rng.random() < rate:
            choices = [s for s in alphabet if s != symbol]
            if not choices:
                logger.debug(f"No alternative to '{symbol}' at position {index}")
                continue
            bases[index] = rng.choice(choices)

    return "".join(bases)


def choose_splice_point(length: int, rng: Optional[random.Random] = None) -> int:
    """Uniform splice point in [0, length]."""
    rng = rng or default_rng
    return rng.randint(0, length)


def splice_dna(first: str, second: str, point: int) -> Tuple[str, str]:
    """
    Exchange the tails of two equal-length strands at `point`.

    Example: splice_dna("ACCG", "CTAA", 1) == ("ATAA", "CCCG")
    """
    if len(first) != len(second):
        raise ValueError(
            f"Cannot splice strands of length {len(first)} and {len(second)}"
        )
    if not 0 <= point <= len(first):
        raise ValueError(f"Splice point {point} outside [0, {len(first)}]")

    return first[:point] + second[point:], second[:point] + first[point:]
