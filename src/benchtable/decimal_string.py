"""
Exact comparison of numbers written as decimal strings.

Objective values reported by the solvers may carry more significant digits
than a double preserves, and ties between algorithms have to be detected
exactly. Values are therefore never converted to floats for comparison:
each string is normalized to a sign, the position of the decimal point and
the significant digits, and two normalized values are compared digit-wise.

Accepted syntax: optional sign, digits with at most one decimal point and an
optional exponent suffix (``e`` or ``E``), e.g. ``"-1.50"``, ``"150e-2"``,
``".15E1"``.
"""

from functools import total_ordering
from typing import Tuple, Union

from .exceptions import DecimalFormatError

_DIGITS = "0123456789"


def _split_exponent(text: str) -> Tuple[str, int]:
    for marker in ("e", "E"):
        pos = text.find(marker)
        if pos != -1:
            try:
                exponent = int(text[pos + 1:])
            except ValueError:
                raise DecimalFormatError(f"Invalid exponent in decimal string {text!r}")
            return text[:pos], exponent
    return text, 0


def normalize_decimal(text: str) -> Tuple[int, int, str]:
    """
    Normalize a decimal string to ``(sign, point, digits)``.

    ``digits`` holds the digits without trailing zeros and ``point`` the
    number of digits before the decimal point, so the magnitude is
    ``0.digits * 10**point``. Numbers of at least 1 have no leading zero;
    smaller ones have ``point == 0`` and keep the zeros that follow the
    decimal point (``"0.05"`` is ``(1, 0, "05")``). Zero is ``(1, 0, "")``
    whatever its spelling (``"0"``, ``"-0.00"``, ``"0e7"`` or ``""``).

    Args:
        text: Decimal string to normalize.

    Returns:
        Tuple of sign (+1 or -1), decimal point position and digit string.

    Raises:
        DecimalFormatError: If the string is not a decimal number.
    """
    stripped = text.strip()
    raw = stripped
    sign = 1
    if raw[:1] in ("+", "-"):
        sign = -1 if raw[0] == "-" else 1
        raw = raw[1:]

    mantissa, exponent = _split_exponent(raw)

    point = mantissa.find(".")
    if point == -1:
        digits = mantissa
        point = len(digits)
    else:
        digits = mantissa[:point] + mantissa[point + 1:]

    if digits.strip(_DIGITS) or (digits == "" and stripped != ""):
        raise DecimalFormatError(f"Invalid decimal string {text!r}")

    point += exponent
    if point < 0:
        digits = "0" * (-point) + digits
        point = 0
    if point > len(digits):
        digits += "0" * (point - len(digits))

    leading = len(digits[:point]) - len(digits[:point].lstrip("0"))
    digits = digits[leading:]
    point -= leading

    # Trailing zeros never change the value; dropping them makes equal
    # numbers share one representation.
    digits = digits.rstrip("0")
    if not digits:
        return 1, 0, ""
    return sign, point, digits


def _compare_magnitude(a: Tuple[int, str], b: Tuple[int, str]) -> int:
    if a[0] != b[0]:
        return 1 if a[0] > b[0] else -1
    if a[1] == b[1]:
        return 0
    # A digit string that is a prefix of the other is the smaller one, which
    # is the same as right-padding the shorter string with zeros.
    return 1 if a[1] > b[1] else -1


def _compare_normalized(u: Tuple[int, int, str], v: Tuple[int, int, str]) -> int:
    if u[0] != v[0]:
        return 1 if u[0] > v[0] else -1
    return u[0] * _compare_magnitude(u[1:], v[1:])


def compare_decimal_strings(u: str, v: str) -> int:
    """
    Compare two decimal strings without floating point conversion.

    Returns:
        1 if ``u > v``, 0 if they denote the same number, -1 if ``u < v``.
    """
    return _compare_normalized(normalize_decimal(u), normalize_decimal(v))


@total_ordering
class DecimalString:
    """
    A number kept as its original decimal text.

    Instances compare and hash by numeric value, so ``DecimalString("1.5")``
    equals ``DecimalString("150e-2")``, while ``str()`` returns the text as it
    was read. Plain strings are accepted on the right-hand side of
    comparisons.
    """

    __slots__ = ("text", "_key")

    def __init__(self, text: Union[str, "DecimalString"]):
        if isinstance(text, DecimalString):
            self.text = text.text
            self._key = text._key
        else:
            self.text = text
            self._key = normalize_decimal(text)

    @classmethod
    def _coerce(cls, other):
        if isinstance(other, DecimalString):
            return other
        if isinstance(other, str):
            return cls(other)
        return None

    def compare(self, other: Union[str, "DecimalString"]) -> int:
        """Three-way comparison returning -1, 0 or 1."""
        coerced = self._coerce(other)
        if coerced is None:
            raise TypeError(f"Cannot compare DecimalString with {type(other).__name__}")
        return _compare_normalized(self._key, coerced._key)

    def __eq__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self._key == other._key

    def __lt__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return _compare_normalized(self._key, other._key) < 0

    def __hash__(self):
        return hash(self._key)

    def __float__(self):
        return float(self.text) if self._key[2] else 0.0

    def __str__(self):
        return self.text

    def __repr__(self):
        return f"DecimalString({self.text!r})"

    @property
    def is_zero(self) -> bool:
        return self._key[2] == ""


ZERO = DecimalString("0")
