"""Internal double-double arithmetic.

This is an internal module used by the circumcenter and orientation
computations. A value is held as an unevaluated sum hi + lo of two
floats, giving roughly 106 bits of mantissa. Not intended for public use.
"""

_SPLIT = 134217729.0  # 2**27 + 1


def _two_sum(a: float, b: float) -> tuple[float, float]:
    s = a + b
    bb = s - a
    return s, (a - (s - bb)) + (b - bb)


def _quick_two_sum(a: float, b: float) -> tuple[float, float]:
    # requires |a| >= |b|
    s = a + b
    return s, b - (s - a)


def _split(a: float) -> tuple[float, float]:
    t = _SPLIT * a
    hi = t - (t - a)
    return hi, a - hi


def _two_prod(a: float, b: float) -> tuple[float, float]:
    p = a * b
    a_hi, a_lo = _split(a)
    b_hi, b_lo = _split(b)
    err = ((a_hi * b_hi - p) + a_hi * b_lo + a_lo * b_hi) + a_lo * b_lo
    return p, err


class DD:
    """An extended precision number built from two floats."""

    __slots__ = ("hi", "lo")

    def __init__(self, hi: float, lo: float = 0.0) -> None:
        self.hi = hi
        self.lo = lo

    @staticmethod
    def _coerce(value: "DD | float") -> "DD":
        if isinstance(value, DD):
            return value
        return DD(float(value))

    def __add__(self, other: "DD | float") -> "DD":
        o = DD._coerce(other)
        s, e = _two_sum(self.hi, o.hi)
        t, f = _two_sum(self.lo, o.lo)
        e += t
        s, e = _quick_two_sum(s, e)
        e += f
        s, e = _quick_two_sum(s, e)
        return DD(s, e)

    __radd__ = __add__

    def __neg__(self) -> "DD":
        return DD(-self.hi, -self.lo)

    def __sub__(self, other: "DD | float") -> "DD":
        return self + (-DD._coerce(other))

    def __rsub__(self, other: "DD | float") -> "DD":
        return DD._coerce(other) - self

    def __mul__(self, other: "DD | float") -> "DD":
        o = DD._coerce(other)
        p, e = _two_prod(self.hi, o.hi)
        e += self.hi * o.lo + self.lo * o.hi
        p, e = _quick_two_sum(p, e)
        return DD(p, e)

    __rmul__ = __mul__

    def __truediv__(self, other: "DD | float") -> "DD":
        o = DD._coerce(other)
        q1 = self.hi / o.hi
        r = self - o * q1
        q2 = r.hi / o.hi
        r = r - o * q2
        q3 = r.hi / o.hi
        q1, q2 = _quick_two_sum(q1, q2)
        return DD(q1, q2) + q3

    def __rtruediv__(self, other: "DD | float") -> "DD":
        return DD._coerce(other) / self

    def signum(self) -> int:
        if self.hi > 0.0:
            return 1
        if self.hi < 0.0:
            return -1
        if self.lo > 0.0:
            return 1
        if self.lo < 0.0:
            return -1
        return 0

    def is_zero(self) -> bool:
        return self.hi == 0.0 and self.lo == 0.0

    def to_float(self) -> float:
        return self.hi + self.lo

    def __float__(self) -> float:
        return self.to_float()

    def __repr__(self) -> str:
        return f"DD({self.hi!r}, {self.lo!r})"
