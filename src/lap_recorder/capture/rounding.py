"""Rounding with exact halves rounded away from zero.

Python's built-in :func:`round` rounds halves to even and works on the binary
value, so ``round(2.675, 2)`` gives ``2.67``.  Exports must be reproducible,
so values go through :class:`~decimal.Decimal` using their shortest repr.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Context, Decimal

# Wide enough to quantize the largest finite float to 3 decimals.
_CONTEXT = Context(prec=400, rounding=ROUND_HALF_UP)


def as_decimal(value: float) -> Decimal:
    """Decimal of the shortest repr of *value*: ``0.47`` gives ``Decimal('0.47')``."""
    return Decimal(repr(float(value)))


def round_half_away(value: float, ndigits: int = 0) -> float:
    """Round *value* to *ndigits* decimals, halves away from zero."""
    quantum = Decimal(1).scaleb(-ndigits)
    return float(as_decimal(value).quantize(quantum, context=_CONTEXT))


def round_to_int(value: float) -> int:
    """Round *value* to the nearest integer, halves away from zero."""
    return int(as_decimal(value).quantize(Decimal(1), context=_CONTEXT))
