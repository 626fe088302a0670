"""Checked integer arithmetic for reserves, shares and token amounts.

The ledger mirrors a uint256 contract, so every intermediate must behave the
way the contract's arithmetic does: subtraction below zero and division by
zero abort the operation, and a result only becomes a ledger value once it
passes the uint256 range check.

    from pool_ledger.safe_int import S

    minted = (S(amount_a) * S(total_shares)) // S(reserve_a)
    return minted.to_uint256()

Products are allowed to exceed 2^256-1 while they are intermediates
(a * T can, the quotient cannot); the range check happens in to_uint256().
"""

from __future__ import annotations

import math

from pool_ledger.constants import UINT256_MAX


class SafeIntError(ArithmeticError):
    """Base class for checked-arithmetic failures."""


class DivisionByZero(SafeIntError):
    pass


class Underflow(SafeIntError):
    """A result would be negative."""


class Uint256Overflow(SafeIntError):
    """A value does not fit in a uint256."""


class SafeInt:
    """Integer used inside ledger math.

    Construction accepts any int; non-negativity is enforced by checked
    subtraction and by the range check in to_uint256().

    Only operations the ledger needs are defined: +, -, *, //, comparisons,
    min() and isqrt(). Division always floors.
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, SafeInt):
            self._value = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            self._value = value
        else:
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")

    @property
    def value(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __hash__(self) -> int:
        return hash(self._value)

    # --- Arithmetic ---

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _raw(other))

    __radd__ = __add__

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Checked subtraction.

        Raises:
            Underflow: If other is larger than self
        """
        subtrahend = _raw(other)
        if subtrahend > self._value:
            raise Underflow(f"Underflow: {self._value} - {subtrahend}")
        return SafeInt(self._value - subtrahend)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _raw(other))

    __rmul__ = __mul__

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        divisor = _raw(other)
        if divisor == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // divisor)

    # --- Comparison ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (SafeInt, int)):
            return self._value == _raw(other)
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _raw(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _raw(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _raw(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _raw(other)

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    # --- Named operations ---

    def min(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(min(self._value, _raw(other)))

    def isqrt(self) -> SafeInt:
        """floor(sqrt(self)), exact for any size of integer.

        Raises:
            Underflow: If the value is negative
        """
        if self._value < 0:
            raise Underflow(f"Square root of negative value: {self._value}")
        return SafeInt(math.isqrt(self._value))

    def to_uint256(self) -> int:
        """Unwrap into a plain int that a uint256 slot can hold.

        Raises:
            Uint256Overflow: If the value is negative or above 2^256-1
        """
        if not 0 <= self._value <= UINT256_MAX:
            raise Uint256Overflow(f"Value out of uint256 range: {self._value}")
        return self._value


def _raw(x: SafeInt | int) -> int:
    return x._value if isinstance(x, SafeInt) else x


S = SafeInt
