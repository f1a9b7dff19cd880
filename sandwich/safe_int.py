"""Checked integer arithmetic for token amounts and pool reserves.

On-chain swap programs hold amounts in u64 and intermediate products in
u128, and abort on overflow, underflow or division by zero. Python ints
never wrap, so SafeInt makes those failure points explicit:

    numerator = (S(amount_in) * S(reserve_out)).checked_u128()
    amount_out = (numerator // (S(reserve_in) + amount_in)).to_u64()

Every failure raises a SafeIntError subclass; curve code converts those
into CalculationFailure at its public boundary.
"""

from __future__ import annotations

from sandwich.constants import U64_MAX, U128_MAX


class SafeIntError(ArithmeticError):
    """Checked arithmetic failed."""


class DivisionByZero(SafeIntError):
    pass


class Underflow(SafeIntError):
    """A subtraction went below zero."""


class Overflow(SafeIntError):
    """A value left the u64 / u128 range it is stored in."""


class SafeInt:
    """Integer whose subtraction and division are checked.

    Addition and multiplication are unchecked until the caller asks for a
    width with checked_u128() or to_u64().
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, SafeInt):
            value = value._value
        elif not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        self._value = value

    @property
    def value(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    # --- Arithmetic ---

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _raw(other))

    __radd__ = __add__

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _raw(other))

    __rmul__ = __mul__

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        return _checked_sub(self._value, _raw(other))

    def __rsub__(self, other: int) -> SafeInt:
        return _checked_sub(other, self._value)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        return _checked_div(self._value, _raw(other))

    def __rfloordiv__(self, other: int) -> SafeInt:
        return _checked_div(other, self._value)

    def ceiling_div(self, other: SafeInt | int) -> SafeInt:
        """Divide rounding up, for amounts charged to the trader."""
        divisor = _raw(other)
        if divisor == 0:
            raise DivisionByZero(f"Ceiling division by zero: {self._value}")
        return SafeInt(-(-self._value // divisor))

    def saturating_sub(self, other: SafeInt | int) -> SafeInt:
        """Subtract, flooring at zero instead of raising Underflow."""
        return SafeInt(max(0, self._value - _raw(other)))

    # --- Comparison ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (SafeInt, int)):
            return self._value == _raw(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _raw(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _raw(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _raw(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _raw(other)

    # --- Width checks and conversion ---

    def checked_u128(self) -> SafeInt:
        """Return self, raising Overflow unless 0 <= value <= 2^128 - 1."""
        if not 0 <= self._value <= U128_MAX:
            raise Overflow(f"Value outside u128: {self._value}")
        return self

    def is_u64(self) -> bool:
        return 0 <= self._value <= U64_MAX

    def to_u64(self) -> int:
        """Unwrap as a u64 amount.

        Raises:
            Overflow: If the value is negative or above 2^64 - 1
        """
        if not self.is_u64():
            raise Overflow(f"Value outside u64: {self._value}")
        return self._value

    def __int__(self) -> int:
        return self._value

    __index__ = __int__

    def __bool__(self) -> bool:
        return self._value != 0


def _raw(x: SafeInt | int) -> int:
    return x._value if isinstance(x, SafeInt) else x


def _checked_sub(a: int, b: int) -> SafeInt:
    if a < b:
        raise Underflow(f"Underflow: {a} - {b}")
    return SafeInt(a - b)


def _checked_div(a: int, b: int) -> SafeInt:
    if b == 0:
        raise DivisionByZero(f"Division by zero: {a} // 0")
    return SafeInt(a // b)


# Short alias used throughout the curve math
S = SafeInt
