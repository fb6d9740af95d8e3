"""Resource quantities such as ``1Gi`` or ``500m``."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from fractions import Fraction

_BINARY_SUFFIXES = {
    "Ki": 2**10,
    "Mi": 2**20,
    "Gi": 2**30,
    "Ti": 2**40,
    "Pi": 2**50,
    "Ei": 2**60,
}

_DECIMAL_SUFFIXES = {
    "n": Fraction(1, 10**9),
    "u": Fraction(1, 10**6),
    "m": Fraction(1, 10**3),
    "": Fraction(1),
    "k": Fraction(10**3),
    "M": Fraction(10**6),
    "G": Fraction(10**9),
    "T": Fraction(10**12),
    "P": Fraction(10**15),
    "E": Fraction(10**18),
}

_NUMBER_RE = re.compile(r"([+-]?(?:\d+(?:\.\d*)?|\.\d+))(.*)", re.DOTALL)
_EXPONENT_RE = re.compile(r"[eE]([+-]?\d+)")


@dataclass(frozen=True)
class Quantity:
    """An exact amount of a resource together with the text it was written as."""

    amount: Fraction = Fraction(0)
    text: str = "0"

    def value(self):
        """Return the amount as an integer, rounded away from zero."""
        if self.amount >= 0:
            return math.ceil(self.amount)
        return -math.ceil(-self.amount)

    def __str__(self):
        return self.text


def parse_quantity(text):
    """Parse a quantity string; raise ``ValueError`` when it is malformed."""
    match = _NUMBER_RE.fullmatch(text)
    if match is None:
        raise ValueError(f"quantity {text!r} is not a valid number")
    number, suffix = match.groups()
    try:
        amount = Fraction(Decimal(number))
    except InvalidOperation as exc:
        raise ValueError(f"quantity {text!r} is not a valid number") from exc

    if suffix in _BINARY_SUFFIXES:
        amount *= _BINARY_SUFFIXES[suffix]
    elif suffix in _DECIMAL_SUFFIXES:
        amount *= _DECIMAL_SUFFIXES[suffix]
    else:
        exponent = _EXPONENT_RE.fullmatch(suffix)
        if exponent is None:
            raise ValueError(f"quantity {text!r} has an unknown suffix {suffix!r}")
        amount *= Fraction(10) ** int(exponent.group(1))
    return Quantity(amount, text)