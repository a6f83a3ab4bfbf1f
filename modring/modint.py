"""Fixed-modulus modular integers Z/MZ.

A modulus is bound to a class, not to each value::

    F13 = ModInt[13]
    F13(5).inverse()          # 8 mod 13

    class Fp(ModInt):
        MODULUS = 998244353

Every operation returns a new value whose residue lies in [0, MODULUS).
Values of different moduli never combine: mixing them raises TypeError.
"""

from __future__ import annotations

import logging
import operator
import threading
import weakref
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, PositiveInt
from pydantic_core import core_schema

from modring.config import DECIMAL_PATTERN
from modring.errors import InverseError, ParseError

logger = logging.getLogger(__name__)


class ModulusSpec(BaseModel):
    """Validated modulus: a strictly positive int (bools rejected)."""

    model_config = ConfigDict(strict=True, frozen=True)

    modulus: PositiveInt


# modulus -> class created by ModInt[modulus]; a class is dropped once unused
_classes: "weakref.WeakValueDictionary[int, type]" = weakref.WeakValueDictionary()
_classes_lock = threading.Lock()


class ModInt:
    """Residue modulo ``MODULUS``.  Immutable and hashable."""

    __slots__ = ("value",)

    MODULUS: ClassVar[Optional[int]] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "MODULUS" not in cls.__dict__:
            return
        cls.MODULUS = ModulusSpec(modulus=cls.MODULUS).modulus
        logger.debug("defined %s with modulus %d", cls.__name__, cls.MODULUS)

    def __class_getitem__(cls, modulus: int) -> type:
        if cls is not ModInt:
            raise TypeError(f"{cls.__name__} already has modulus {cls.MODULUS}")
        modulus = ModulusSpec(modulus=modulus).modulus
        with _classes_lock:
            sub = _classes.get(modulus)
            if sub is None:
                name = f"ModInt[{modulus}]"
                sub = type(name, (ModInt,), {
                    "__slots__": (),
                    "__module__": __name__,
                    "__qualname__": name,
                    "MODULUS": modulus,
                })
                _classes[modulus] = sub
        return sub

    def __init__(self, x: Any = 0) -> None:
        m = type(self).MODULUS
        if m is None:
            raise TypeError("ModInt has no modulus; use ModInt[M] or subclass it")
        if isinstance(x, ModInt):
            if x.MODULUS != m:
                raise TypeError(f"cannot convert mod {x.MODULUS} value to mod {m}")
            residue = x.value
        else:
            residue = operator.index(x) % m
        object.__setattr__(self, "value", residue)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    # ---- construction ----

    @classmethod
    def new(cls, x: Any) -> "ModInt":
        """Canonical residue of integer *x*; negatives wrap into [0, M)."""
        return cls(x)

    @classmethod
    def parse(cls, text: str) -> "ModInt":
        """Build from signed decimal *text*.  Out-of-range values are reduced."""
        if not isinstance(text, str) or DECIMAL_PATTERN.fullmatch(text) is None:
            raise ParseError(text)
        return cls(int(text))

    @classmethod
    def zero(cls) -> "ModInt":
        """Additive identity."""
        return cls(0)

    @classmethod
    def one(cls) -> "ModInt":
        """Multiplicative identity."""
        return cls(1)

    @classmethod
    def modulus(cls) -> int:
        """The fixed modulus M of this class."""
        if cls.MODULUS is None:
            raise TypeError("ModInt has no modulus; use ModInt[M] or subclass it")
        return cls.MODULUS

    def _coerce(self, other: Any) -> Optional["ModInt"]:
        """Normalize a right-hand operand, or None if it is not int-like."""
        if isinstance(other, ModInt):
            if other.MODULUS != self.MODULUS:
                raise TypeError(
                    f"cannot combine mod {self.MODULUS} with mod {other.MODULUS}"
                )
            return other
        try:
            return type(self)(operator.index(other))
        except TypeError:
            return None

    def _operand(self, other: Any) -> "ModInt":
        rhs = self._coerce(other)
        if rhs is None:
            raise TypeError(f"unsupported operand type: {type(other).__name__}")
        return rhs

    # ---- named operations ----

    def add(self, other: Any) -> "ModInt":
        """Sum reduced mod M."""
        return self + self._operand(other)

    def sub(self, other: Any) -> "ModInt":
        """Difference reduced mod M."""
        return self - self._operand(other)

    def mul(self, other: Any) -> "ModInt":
        """Product reduced mod M."""
        return self * self._operand(other)

    def div(self, other: Any) -> "ModInt":
        """Multiply by the modular inverse of *other*.

        Raises InverseError when *other* is not coprime to the modulus.
        """
        return self / self._operand(other)

    def pow(self, exponent: int) -> "ModInt":
        """Raise to an integer power with O(log |exponent|) multiplications.

        A zero exponent gives one, even for a zero base.  A negative
        exponent inverts the base first.
        """
        exponent = operator.index(exponent)
        if exponent == 0:
            return type(self).one()
        base = self.inverse() if exponent < 0 else self
        result = type(self).one()
        # Left-to-right square-and-multiply: square per bit, multiply on set bits.
        for bit in bin(abs(exponent))[2:]:
            result = result * result
            if bit == "1":
                result = result * base
        return result

    def inverse(self) -> "ModInt":
        """Multiplicative inverse via the extended Euclidean algorithm.

        Raises InverseError if gcd(value, MODULUS) != 1.
        """
        m = self.MODULUS
        a, b = self.value, m
        u, v = 1, 0
        while b:
            t = a // b
            a, b = b, a - t * b
            u, v = v, u - t * v
        # a is now gcd(value, m); u its Bezout coefficient for value
        if a != 1:
            raise InverseError(self.value, m, a)
        return type(self)(u)

    # ---- operators ----

    def __add__(self, other: Any) -> "ModInt":
        """a + b, with an int or same-modulus operand."""
        rhs = self._coerce(other)
        if rhs is None:
            return NotImplemented
        return type(self)(self.value + rhs.value)

    __radd__ = __add__

    def __sub__(self, other: Any) -> "ModInt":
        """a - b."""
        rhs = self._coerce(other)
        if rhs is None:
            return NotImplemented
        return type(self)(self.value - rhs.value)

    def __rsub__(self, other: Any) -> "ModInt":
        """k - a for a plain int k."""
        lhs = self._coerce(other)
        if lhs is None:
            return NotImplemented
        return type(self)(lhs.value - self.value)

    def __mul__(self, other: Any) -> "ModInt":
        """a * b."""
        rhs = self._coerce(other)
        if rhs is None:
            return NotImplemented
        return type(self)(self.value * rhs.value)

    __rmul__ = __mul__

    def __truediv__(self, other: Any) -> "ModInt":
        """a * inverse(b); never integer division."""
        rhs = self._coerce(other)
        if rhs is None:
            return NotImplemented
        return self * rhs.inverse()

    def __rtruediv__(self, other: Any) -> "ModInt":
        """k * inverse(a) for a plain int k."""
        lhs = self._coerce(other)
        if lhs is None:
            return NotImplemented
        return lhs * self.inverse()

    def __pow__(self, exponent: Any, modulo: Any = None) -> "ModInt":
        """a ** e; see pow().  Three-argument pow() is rejected."""
        if modulo is not None:
            raise TypeError("three-argument pow() is not supported; the modulus is fixed")
        try:
            exponent = operator.index(exponent)
        except TypeError:
            return NotImplemented
        return self.pow(exponent)

    def __neg__(self) -> "ModInt":
        """Additive inverse."""
        return type(self)(-self.value)

    def __pos__(self) -> "ModInt":
        return self

    # ---- comparison & conversion ----

    def __eq__(self, other: Any) -> bool:
        """Equal to a same-modulus value or to an int equal to the residue."""
        if isinstance(other, ModInt):
            return self.MODULUS == other.MODULUS and self.value == other.value
        if isinstance(other, int):
            # Canonical residue only, so equal objects hash alike.
            return self.value == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    def __bool__(self) -> bool:
        """False only for zero."""
        return self.value != 0

    def __int__(self) -> int:
        """The residue in [0, M)."""
        return self.value

    def __index__(self) -> int:
        # Lets a residue address a sequence position: coeffs[ModInt[7](3)].
        return self.value

    def __str__(self) -> str:
        """Residue only."""
        return str(self.value)

    def __format__(self, format_spec: str) -> str:
        return format(self.value, format_spec)

    def __repr__(self) -> str:
        """Diagnostic form with the modulus, e.g. ``10 mod 21``."""
        return f"{self.value} mod {self.MODULUS}"

    # ---- copy & pickle ----

    def __copy__(self) -> "ModInt":
        return self

    def __deepcopy__(self, memo: dict) -> "ModInt":
        return self

    def __reduce__(self) -> tuple:
        """Rebuild through the constructor; ModInt[M] classes by modulus."""
        cls = type(self)
        if _classes.get(cls.MODULUS) is cls:
            return (_rebuild, (cls.MODULUS, self.value))
        return (cls, (self.value,))

    # ---- pydantic ----

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        if cls.MODULUS is None:
            raise TypeError("ModInt has no modulus; annotate fields with ModInt[M]")
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                int, return_schema=core_schema.int_schema()
            ),
        )

    @classmethod
    def _validate(cls, data: Any) -> "ModInt":
        """Accept a same-modulus value, an int-like value or decimal text."""
        if isinstance(data, ModInt):
            if data.MODULUS != cls.MODULUS:
                raise ValueError(f"expected mod {cls.MODULUS}, got mod {data.MODULUS}")
            return cls(data.value)
        if isinstance(data, bool):
            raise ValueError("expected int or decimal string, got bool")
        if isinstance(data, str):
            return cls.parse(data)
        try:
            return cls(operator.index(data))
        except TypeError:
            raise ValueError(
                f"expected int or decimal string, got {type(data).__name__}"
            ) from None


def _rebuild(modulus: int, value: int) -> ModInt:
    """Unpickle a value of a ModInt[modulus] class."""
    return ModInt[modulus](value)
