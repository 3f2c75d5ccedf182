"""Arbitrary-precision signed integers on 64-bit limbs.

A ``BigInt`` is a sign plus a canonical little-endian ``array('Q')`` of limbs.
Every operation builds a fresh limb buffer for its result; values are never
mutated after construction.
"""
import logging
import math
from array import array
from enum import IntEnum
from typing import Final, NamedTuple, Union

logger = logging.getLogger(__name__)

LIMB_BYTES: Final[int] = 8        # 64-bit limbs
LIMB_BITS: Final[int] = LIMB_BYTES * 8
LIMB_BASE: Final[int] = 1 << LIMB_BITS
LIMB_MASK: Final[int] = LIMB_BASE - 1

MIN_BASE: Final[int] = 2
MAX_BASE: Final[int] = 62

# GMP digit order: bases above 36 use upper case for 10..35, lower case for 36..61
DIGITS: Final[str] = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"

_LOWER_DIGITS = DIGITS[:10] + DIGITS[36:]
_UPPER_DIGITS = DIGITS[:36]

_CASELESS_VALUES = {ch: i for i, ch in enumerate(_UPPER_DIGITS)}
_CASELESS_VALUES.update({ch: i for i, ch in enumerate(_LOWER_DIGITS)})
_CASED_VALUES = {ch: i for i, ch in enumerate(DIGITS)}


def _chunk_for_base(base:int):
    # largest run of digits whose value always fits in one limb
    length, mul = 1, base
    while mul * base < LIMB_BASE:
        length += 1
        mul *= base
    return length, mul


_CHUNKS = {base: _chunk_for_base(base) for base in range(MIN_BASE, MAX_BASE + 1)}


class Sign(IntEnum):
    NEGATIVE = -1
    ZERO = 0
    POSITIVE = 1


class BigIntError(Exception):
    """Base class for every error raised by the engine."""


class ParseError(BigIntError, ValueError):
    """Malformed digit text: empty digit run or a digit invalid for the base."""


class InvalidBaseError(ParseError):
    """Radix outside the supported range."""


class DivisionByZero(BigIntError, ZeroDivisionError):
    pass


class DivResult(NamedTuple):
    quotient: "BigInt"
    remainder: "BigInt"


# ---- LOW-LEVEL LIMB HELPERS ----
def _zeros(n:int) -> array:
    return array("Q", [0]) * n


def _normalize(limbs:array) -> array:
    while limbs and limbs[-1] == 0:
        limbs.pop()
    return limbs


def _bit_length(limbs:array) -> int:
    if not limbs:
        return 0
    return (len(limbs) - 1) * LIMB_BITS + limbs[-1].bit_length()


def _cmp_mag(a:array, b:array) -> int:
    if len(a) != len(b):
        return -1 if len(a) < len(b) else 1
    for i in range(len(a) - 1, -1, -1):
        if a[i] != b[i]:
            return -1 if a[i] < b[i] else 1
    return 0


# ---- MAGNITUDE ARITHMETIC ----
def _add_mag(a:array, b:array) -> array:
    if len(a) < len(b):
        a, b = b, a
    out = _zeros(len(a))
    carry = 0
    for i in range(len(b)):
        s = a[i] + b[i] + carry
        out[i] = s & LIMB_MASK
        carry = s >> LIMB_BITS
    for i in range(len(b), len(a)):
        s = a[i] + carry
        out[i] = s & LIMB_MASK
        carry = s >> LIMB_BITS
    if carry:
        out.append(carry)
    return out


def _sub_mag(a:array, b:array) -> array:
    """|a| - |b|, requires |a| >= |b|."""
    out = _zeros(len(a))
    borrow = 0
    for i in range(len(a)):
        s = a[i] - (b[i] if i < len(b) else 0) - borrow
        if s < 0:
            s += LIMB_BASE
            borrow = 1
        else:
            borrow = 0
        out[i] = s
    return _normalize(out)


def _mul_mag(a:array, b:array) -> array:
    if not a or not b:
        return array("Q")
    if len(a) < len(b):
        a, b = b, a
    out = _zeros(len(a) + len(b))
    for i in range(len(b)):
        limb_b = b[i]
        if not limb_b:
            continue
        carry = 0
        for j in range(len(a)):
            t = out[i + j] + a[j] * limb_b + carry
            out[i + j] = t & LIMB_MASK
            carry = t >> LIMB_BITS
        out[i + len(a)] = carry
    return _normalize(out)


def _mul_small_inplace(limbs:array, small:int, addend:int = 0):
    # limbs = limbs * small + addend, with small and addend below LIMB_BASE
    carry = addend
    for i in range(len(limbs)):
        prod = limbs[i] * small + carry
        limbs[i] = prod & LIMB_MASK
        carry = prod >> LIMB_BITS
    if carry:
        limbs.append(carry)


def _div_small(limbs:array, small:int):
    """Short division by a single limb. Returns (quotient limbs, remainder)."""
    q = _zeros(len(limbs))
    remainder = 0
    for i in range(len(limbs) - 1, -1, -1):
        cur = (remainder << LIMB_BITS) | limbs[i]
        q[i] = cur // small
        remainder = cur % small
    return _normalize(q), remainder


def _shl_mag(limbs:array, bits:int) -> array:
    if not limbs:
        return array("Q")
    words, shift = bits // LIMB_BITS, bits % LIMB_BITS
    out = _zeros(words)
    if not shift:
        out.extend(limbs)
        return out
    carry = 0
    for limb in limbs:
        out.append(((limb << shift) | carry) & LIMB_MASK)
        carry = limb >> (LIMB_BITS - shift)
    if carry:
        out.append(carry)
    return out


def _shr_mag(limbs:array, bits:int):
    """Shift the magnitude right. Returns (result, True if any 1 bit was dropped)."""
    words, shift = bits // LIMB_BITS, bits % LIMB_BITS
    if words >= len(limbs):
        return array("Q"), bool(limbs)
    dropped = any(limbs[:words]) or bool(limbs[words] & ((1 << shift) - 1))
    if not shift:
        return limbs[words:], dropped
    out = _zeros(len(limbs) - words)
    for i in range(words, len(limbs)):
        hi = limbs[i + 1] if i + 1 < len(limbs) else 0
        out[i - words] = ((limbs[i] >> shift) | (hi << (LIMB_BITS - shift))) & LIMB_MASK
    return _normalize(out), dropped


def _divrem_knuth(a:array, b:array):
    """Knuth's algorithm D for a divisor of two or more limbs, |a| >= |b|.

    Both operands are first normalized so the divisor's top limb has its high
    bit set; that bounds the trial quotient to at most two corrections.
    Returns (quotient, remainder) magnitudes.
    """
    shift = LIMB_BITS - b[-1].bit_length()
    v = _shl_mag(b, shift)
    u = _shl_mag(a, shift)
    u.extend(_zeros(len(a) + 1 - len(u)))
    n = len(v)
    m = len(a) - n
    v_top, v_next = v[-1], v[-2]
    q = _zeros(m + 1)

    for j in range(m, -1, -1):
        num = (u[j + n] << LIMB_BITS) | u[j + n - 1]
        qhat = num // v_top
        rhat = num % v_top
        while qhat >= LIMB_BASE or qhat * v_next > ((rhat << LIMB_BITS) | u[j + n - 2]):
            qhat -= 1
            rhat += v_top
            if rhat >= LIMB_BASE:
                break

        # multiply and subtract qhat * v from u[j:j+n+1]
        carry = 0
        borrow = 0
        for i in range(n):
            prod = qhat * v[i] + carry
            carry = prod >> LIMB_BITS
            t = u[i + j] - (prod & LIMB_MASK) - borrow
            borrow = 1 if t < 0 else 0
            u[i + j] = t & LIMB_MASK
        t = u[j + n] - carry - borrow
        u[j + n] = t & LIMB_MASK

        if t < 0:
            # qhat was one too large: add v back
            qhat -= 1
            carry = 0
            for i in range(n):
                s = u[i + j] + v[i] + carry
                u[i + j] = s & LIMB_MASK
                carry = s >> LIMB_BITS
            u[j + n] = (u[j + n] + carry) & LIMB_MASK
        q[j] = qhat

    remainder, _ = _shr_mag(_normalize(u[:n]), shift)
    return _normalize(q), remainder


def _divrem_mag(a:array, b:array):
    if _cmp_mag(a, b) < 0:
        return array("Q"), array("Q", a)
    if len(b) == 1:
        q, r = _div_small(a, b[0])
        return q, (array("Q", [r]) if r else array("Q"))
    return _divrem_knuth(a, b)


# ---- RADIX CONVERSION ----
def _check_base(base, allow_auto:bool = False, allow_upper:bool = False):
    if not isinstance(base, int) or isinstance(base, bool):
        raise TypeError(f"base must be an int, got {type(base).__name__}")
    if allow_auto and base == 0:
        return
    if allow_upper and -36 <= base <= -MIN_BASE:
        return
    if not MIN_BASE <= base <= MAX_BASE:
        logger.debug("rejecting base %d", base)
        raise InvalidBaseError(f"base must be in [{MIN_BASE}, {MAX_BASE}], got {base}")


def _detect_base(digits:str):
    if digits[:2] in ("0x", "0X"):
        return 16, digits[2:]
    if digits[:2] in ("0b", "0B"):
        return 2, digits[2:]
    if len(digits) > 1 and digits[0] == "0":
        return 8, digits[1:]
    return 10, digits


def _parse_text(text, base:int):
    if not isinstance(text, str):
        raise TypeError(f"text must be a str, got {type(text).__name__}")
    _check_base(base, allow_auto=True)

    # sign comes right after leading whitespace; whitespace between digits is skipped
    digits = text.lstrip()
    negative = False
    if digits[:1] in ("-", "+"):
        negative = digits[0] == "-"
        digits = digits[1:]
        if digits[:1].isspace():
            logger.debug("whitespace after sign in %r", text)
            raise ParseError(f"whitespace after sign in {text!r}")
    digits = "".join(digits.split())
    if base == 0:
        base, digits = _detect_base(digits)
    if not digits:
        logger.debug("empty digit run in %r", text)
        raise ParseError(f"no digits in {text!r}")

    values = _CASELESS_VALUES if base <= 36 else _CASED_VALUES
    chunk_len, chunk_mul = _CHUNKS[base]
    limbs = array("Q")
    # the leading chunk absorbs the remainder so every later chunk is full
    width = len(digits) % chunk_len or chunk_len
    pos = 0
    while pos < len(digits):
        acc = 0
        for ch in digits[pos:pos + width]:
            d = values.get(ch, base)
            if d >= base:
                logger.debug("invalid digit %r for base %d in %r", ch, base, text)
                raise ParseError(f"invalid digit {ch!r} for base {base} in {text!r}")
            acc = acc * base + d
        _mul_small_inplace(limbs, chunk_mul if width == chunk_len else base ** width, acc)
        pos += width
        width = chunk_len

    return (Sign.NEGATIVE if negative else Sign.POSITIVE), _normalize(limbs)


def _extract_bits(limbs:array, pos:int, width:int) -> int:
    word, off = pos // LIMB_BITS, pos % LIMB_BITS
    val = limbs[word] >> off
    if off + width > LIMB_BITS and word + 1 < len(limbs):
        val |= limbs[word + 1] << (LIMB_BITS - off)
    return val & ((1 << width) - 1)


def _format_small(value:int, base:int, alphabet:str, width:int = 0) -> str:
    out = []
    while value:
        out.append(alphabet[value % base])
        value //= base
    out.extend("0" * (width - len(out)))
    return "".join(reversed(out))


def _format_mag(limbs:array, base:int, alphabet:str) -> str:
    if not limbs:
        return "0"
    if base & (base - 1) == 0:
        # power-of-two bases read bits straight out of the limbs
        width = base.bit_length() - 1
        count = -(-_bit_length(limbs) // width)
        return "".join(alphabet[_extract_bits(limbs, i * width, width)]
                       for i in range(count - 1, -1, -1))

    chunk_len, chunk_mul = _CHUNKS[base]
    pieces = []
    rest = limbs
    while rest:
        rest, r = _div_small(rest, chunk_mul)
        pieces.append(r)
    head = _format_small(pieces[-1], base, alphabet)
    return head + "".join(_format_small(p, base, alphabet, chunk_len)
                          for p in reversed(pieces[:-1]))


# ---- THE VALUE TYPE ----
class BigInt:
    """Immutable arbitrary-precision signed integer.

    ``BigInt(123)``, ``BigInt("-ff", 16)`` and ``BigInt(other)`` all build a
    value owning its own limb buffer. Operators accept another ``BigInt`` or a
    host ``int`` on either side. ``/``, ``%`` and ``divmod()`` truncate toward
    zero; ``//`` and ``>>`` floor.
    """

    __slots__ = ("_sign", "_limbs")

    def __init__(self, value=0, base=None):
        if isinstance(value, str):
            sign, limbs = _parse_text(value, 10 if base is None else base)
        elif base is not None:
            raise TypeError("BigInt() can't convert non-string with explicit base")
        elif isinstance(value, BigInt):
            sign, limbs = value._sign, array("Q", value._limbs)
        elif isinstance(value, int) and not isinstance(value, bool):
            sign, limbs = _parse_text(str(value), 10)
        else:
            raise TypeError(f"cannot build a BigInt from {type(value).__name__}")
        self._sign = Sign.ZERO if not limbs else sign
        self._limbs = limbs

    @classmethod
    def _from_parts(cls, sign:int, limbs:array) -> "BigInt":
        obj = object.__new__(cls)
        limbs = _normalize(limbs)
        obj._sign = Sign(sign) if limbs else Sign.ZERO
        obj._limbs = limbs
        return obj

    # ---- ACCESSORS ----
    @property
    def sign(self) -> Sign:
        return self._sign

    @property
    def limbs(self) -> tuple:
        """Snapshot of the magnitude, least significant limb first."""
        return tuple(self._limbs)

    def is_zero(self) -> bool:
        return self._sign == Sign.ZERO

    def bit_length(self) -> int:
        return _bit_length(self._limbs)

    def copy(self) -> "BigInt":
        return BigInt._from_parts(self._sign, array("Q", self._limbs))

    __copy__ = copy

    def __deepcopy__(self, memo):
        return self.copy()

    def __reduce__(self):
        return (BigInt, (self.to_string(16), 16))

    # ---- CONVERSION ----
    def to_int(self) -> int:
        val = 0
        for i, limb in enumerate(self._limbs):
            val |= limb << (i * LIMB_BITS)
        return -val if self._sign == Sign.NEGATIVE else val

    __int__ = to_int

    def to_string(self, base:int = 10) -> str:
        _check_base(base, allow_upper=True)
        if base < 0:
            base, alphabet = -base, _UPPER_DIGITS
        else:
            alphabet = _LOWER_DIGITS if base <= 36 else DIGITS
        text = _format_mag(self._limbs, base, alphabet)
        return "-" + text if self._sign == Sign.NEGATIVE else text

    def size_in_base(self, base:int = 10) -> int:
        """Digit count of the magnitude in ``base``; may be one too big for
        bases that are not a power of two. Zero counts as one digit."""
        _check_base(base)
        bits = _bit_length(self._limbs)
        if not bits:
            return 1
        if base & (base - 1) == 0:
            width = base.bit_length() - 1
            return -(-bits // width)
        return int(bits * math.log(2) / math.log(base)) + 1

    def __str__(self):
        return self.to_string()

    def __repr__(self):
        return f"<BigInt {self.to_string()} limbs={len(self._limbs)}>"

    def __hash__(self):
        return hash(self.to_int())

    def __bool__(self):
        return self._sign != Sign.ZERO

    # ---- COMPARISON ----
    def __eq__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self._sign == other._sign and self._limbs == other._limbs

    def __ne__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return not (self._sign == other._sign and self._limbs == other._limbs)

    def __lt__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return compare(self, other) < 0

    def __le__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return compare(self, other) <= 0

    def __gt__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return compare(self, other) > 0

    def __ge__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return compare(self, other) >= 0

    # ---- UNARY ----
    def __pos__(self):
        return self.copy()

    def __neg__(self):
        return negate(self)

    def __abs__(self):
        return absolute(self)

    # ---- SHIFTS ----
    def __lshift__(self, bits):
        if not isinstance(bits, int):
            return NotImplemented
        return shift_left(self, bits)

    def __rshift__(self, bits):
        if not isinstance(bits, int):
            return NotImplemented
        return shift_right(self, bits)

    # ---- BINARY ARITHMETIC ----
    def __add__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else add(self, other)

    def __radd__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else add(other, self)

    def __sub__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else subtract(self, other)

    def __rsub__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else subtract(other, self)

    def __mul__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else multiply(self, other)

    def __rmul__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else multiply(other, self)

    def __truediv__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else divmod(self, other).quotient

    def __rtruediv__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else divmod(other, self).quotient

    def __mod__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else divmod(self, other).remainder

    def __rmod__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else divmod(other, self).remainder

    def __floordiv__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else floor_divmod(self, other).quotient

    def __rfloordiv__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else floor_divmod(other, self).quotient

    def __divmod__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else divmod(self, other)

    def __rdivmod__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else divmod(other, self)


def _coerce(value):
    if isinstance(value, BigInt):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return from_machine_int(value)
    return None


def _operand(value, name:str) -> BigInt:
    coerced = _coerce(value)
    if coerced is None:
        raise TypeError(f"{name} must be a BigInt or int, got {type(value).__name__}")
    return coerced


def _shift_count(bits) -> int:
    if not isinstance(bits, int) or isinstance(bits, bool):
        raise TypeError(f"shift count must be an int, got {type(bits).__name__}")
    if bits < 0:
        raise ValueError("negative shift count")
    return bits


# ---- CONVENIENCE OPS ----
def zero() -> BigInt:
    return BigInt._from_parts(Sign.ZERO, array("Q"))


def parse(text:str, base:int = 10) -> BigInt:
    sign, limbs = _parse_text(text, base)
    return BigInt._from_parts(sign, limbs)


def from_machine_int(i:int) -> BigInt:
    # go through decimal text so the host int width never leaks into the limbs
    if not isinstance(i, int) or isinstance(i, bool):
        raise TypeError(f"expected an int, got {type(i).__name__}")
    return parse(str(i), 10)


def to_string(x:BigInt, base:int = 10) -> str:
    return _operand(x, "x").to_string(base)


def size_in_base(x:BigInt, base:int = 10) -> int:
    return _operand(x, "x").size_in_base(base)


def compare(a:BigInt, b:BigInt) -> int:
    a, b = _operand(a, "a"), _operand(b, "b")
    if a._sign != b._sign:
        return -1 if a._sign < b._sign else 1
    c = _cmp_mag(a._limbs, b._limbs)
    return -c if a._sign == Sign.NEGATIVE else c


def negate(x:BigInt) -> BigInt:
    x = _operand(x, "x")
    return BigInt._from_parts(-x._sign, array("Q", x._limbs))


def absolute(x:BigInt) -> BigInt:
    x = _operand(x, "x")
    return BigInt._from_parts(Sign.POSITIVE, array("Q", x._limbs))


def _signed_add(a_sign:int, a:array, b_sign:int, b:array) -> BigInt:
    if not a_sign:
        return BigInt._from_parts(b_sign, array("Q", b))
    if not b_sign:
        return BigInt._from_parts(a_sign, array("Q", a))
    if a_sign == b_sign:
        return BigInt._from_parts(a_sign, _add_mag(a, b))
    c = _cmp_mag(a, b)
    if c == 0:
        return zero()
    if c > 0:
        return BigInt._from_parts(a_sign, _sub_mag(a, b))
    return BigInt._from_parts(b_sign, _sub_mag(b, a))


def add(a:Union[BigInt, int], b:Union[BigInt, int]) -> BigInt:
    a, b = _operand(a, "a"), _operand(b, "b")
    return _signed_add(a._sign, a._limbs, b._sign, b._limbs)


def subtract(a:Union[BigInt, int], b:Union[BigInt, int]) -> BigInt:
    a, b = _operand(a, "a"), _operand(b, "b")
    return _signed_add(a._sign, a._limbs, -b._sign, b._limbs)


def multiply(a:Union[BigInt, int], b:Union[BigInt, int]) -> BigInt:
    a, b = _operand(a, "a"), _operand(b, "b")
    return BigInt._from_parts(a._sign * b._sign, _mul_mag(a._limbs, b._limbs))


def shift_left(x:BigInt, bits:int) -> BigInt:
    x = _operand(x, "x")
    return BigInt._from_parts(x._sign, _shl_mag(x._limbs, _shift_count(bits)))


def shift_right(x:BigInt, bits:int) -> BigInt:
    """floor(x / 2**bits): negative values round toward negative infinity."""
    x = _operand(x, "x")
    limbs, dropped = _shr_mag(x._limbs, _shift_count(bits))
    if x._sign == Sign.NEGATIVE and dropped:
        limbs = _add_mag(limbs, array("Q", [1]))
    return BigInt._from_parts(x._sign, array("Q", limbs))


def divmod(numerator:Union[BigInt, int], denominator:Union[BigInt, int]) -> DivResult:
    """Truncating division: the quotient rounds toward zero and a non-zero
    remainder carries the numerator's sign, so
    ``numerator == quotient * denominator + remainder``."""
    n, d = _operand(numerator, "numerator"), _operand(denominator, "denominator")
    if d._sign == Sign.ZERO:
        logger.debug("division of %s by zero", n)
        raise DivisionByZero("division by zero")
    q, r = _divrem_mag(n._limbs, d._limbs)
    return DivResult(BigInt._from_parts(n._sign * d._sign, q),
                     BigInt._from_parts(n._sign, r))


def floor_divmod(numerator:Union[BigInt, int], denominator:Union[BigInt, int]) -> DivResult:
    """Floor division: the quotient rounds toward negative infinity and a
    non-zero remainder carries the denominator's sign."""
    d = _operand(denominator, "denominator")
    q, r = divmod(numerator, d)
    if r._sign != Sign.ZERO and r._sign != d._sign:
        q = subtract(q, 1)
        r = add(r, d)
    return DivResult(q, r)


def divide(a:Union[BigInt, int], b:Union[BigInt, int]) -> BigInt:
    return divmod(a, b).quotient


def remainder(a:Union[BigInt, int], b:Union[BigInt, int]) -> BigInt:
    return divmod(a, b).remainder
