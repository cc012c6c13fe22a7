from __future__ import annotations

import math


def quality_from_entropy_bits(entropy_bits: float) -> str:
    """Mirror KeePassXC quality bands used by PasswordHealth::quality()."""
    if entropy_bits <= 0:
        return "bad"
    if entropy_bits < 40:
        return "poor"
    if entropy_bits < 75:
        return "weak"
    if entropy_bits < 100:
        return "good"
    return "excellent"


def theoretical_bits(symbols: int, space_size: int) -> float:
    """Bits for `symbols` independent uniform draws from `space_size` choices."""
    if symbols <= 0 or space_size < 2:
        return 0.0
    return float(symbols) * math.log2(space_size)
