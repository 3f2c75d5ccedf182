import builtins

import pytest
from hypothesis import given

from bigint import (LIMB_BASE, BigInt, DivisionByZero, DivResult, Sign, divide,
                    divmod, floor_divmod, multiply, parse, remainder, zero)
from strategies import bigints, nonzero_bigints, truncating_divmod


def test_truncating_scenario():
    q, r = divmod(parse("-7", 10), parse("2", 10))
    assert q == -3
    assert r == -1


@pytest.mark.parametrize("a,b,q,r", [
    (7, 2, 3, 1),
    (-7, 2, -3, -1),
    (7, -2, -3, 1),
    (-7, -2, 3, -1),
    (6, -3, -2, 0),
    (1, 5, 0, 1),
    (-1, 5, 0, -1),
    (0, -5, 0, 0),
])
def test_remainder_takes_numerator_sign(a, b, q, r):
    result = divmod(BigInt(a), BigInt(b))
    assert isinstance(result, DivResult)
    assert result.quotient == q
    assert result.remainder == r


@given(bigints())
def test_division_by_zero(a):
    with pytest.raises(DivisionByZero):
        divmod(BigInt(a), zero())
    with pytest.raises(DivisionByZero):
        divide(BigInt(a), 0)
    with pytest.raises(DivisionByZero):
        remainder(BigInt(a), zero())
    with pytest.raises(ZeroDivisionError):
        BigInt(a) / 0
    with pytest.raises(ZeroDivisionError):
        BigInt(a) % 0


@given(bigints(), nonzero_bigints())
def test_division_identity(a, b):
    x, y = BigInt(a), BigInt(b)
    q, r = divmod(x, y)
    assert multiply(q, y) + r == x
    assert abs(r) < abs(y)
    assert r.sign in (Sign.ZERO, x.sign)
    assert (q.to_int(), r.to_int()) == truncating_divmod(a, b)


@given(bigints(1200), nonzero_bigints(400))
def test_multi_limb_divisors_match_host(a, b):
    assert tuple(x.to_int() for x in divmod(BigInt(a), BigInt(b))) == truncating_divmod(a, b)


@pytest.mark.parametrize("a,b", [
    # trial quotient overestimates and needs the add-back step
    ((1 << 192) - 1, (1 << 128) - (1 << 64) + 1),
    (0x7fffffff800000010000000000000000, 0x800000008000000200000000),
    ((LIMB_BASE - 1) << 256, (LIMB_BASE - 1) << 64 | (LIMB_BASE - 1)),
    ((1 << 256) + 12345, (1 << 128) + 1),
    (((1 << 64) - 1) ** 4, ((1 << 64) - 1) ** 2),
    (1 << 200, 3 << 130),
    ((1 << 128) * 0x8000000000000001, (1 << 64) + 0x8000000000000001),
])
def test_knuth_correction_paths(a, b):
    for sa in (1, -1):
        for sb in (1, -1):
            q, r = divmod(BigInt(sa * a), BigInt(sb * b))
            assert (q.to_int(), r.to_int()) == truncating_divmod(sa * a, sb * b)


def test_small_divisors_need_no_padding():
    x = BigInt((1 << 300) + 7)
    for d in (1, 2, 3, 10, LIMB_BASE - 1):
        q, r = divmod(x, d)
        assert (q.to_int(), r.to_int()) == builtins.divmod((1 << 300) + 7, d)


def test_operators_and_reflected_forms():
    x = BigInt(-7)
    assert x / 2 == -3
    assert x % 2 == -1
    assert builtins.divmod(x, 2) == (-3, -1)
    assert -7 / BigInt(2) == -3
    assert -7 % BigInt(2) == -1
    assert builtins.divmod(-7, BigInt(2)) == (-3, -1)
    assert divide(-7, 2) == -3
    assert remainder(-7, 2) == -1


@given(bigints(), nonzero_bigints())
def test_floor_divmod_matches_host_floor_division(a, b):
    q, r = floor_divmod(BigInt(a), BigInt(b))
    assert (q.to_int(), r.to_int()) == builtins.divmod(a, b)


def test_floor_divmod_by_zero():
    with pytest.raises(DivisionByZero):
        floor_divmod(5, 0)


@pytest.mark.parametrize("a,b", [
    (0, 5),
    (0, -(1 << 128)),
    (1, 5),
    (-1, 5),
    (4, -5),
    (-(1 << 64), 1 << 128),
    ((1 << 127) - 1, -(1 << 127)),
])
def test_numerator_smaller_than_denominator(a, b):
    q, r = divmod(BigInt(a), BigInt(b))
    assert q == 0
    assert q.sign is Sign.ZERO
    assert r == a
    assert divide(a, b) == 0
    assert remainder(a, b) == a
    assert BigInt(a) / b == 0
    assert BigInt(a) % b == a


def test_zero_over_nonzero():
    assert divmod(zero(), BigInt(5)) == (0, 0)
    q, r = divmod(zero(), BigInt(5))
    assert q.sign is Sign.ZERO
    assert r.sign is Sign.ZERO


def test_shorter_negative_numerator():
    q, r = divmod(BigInt(-(1 << 64)), BigInt(1 << 128))
    assert q == 0
    assert r == -(1 << 64)
    assert r.sign is Sign.NEGATIVE
    assert floor_divmod(BigInt(-(1 << 64)), BigInt(1 << 128)) == (-1, (1 << 128) - (1 << 64))


@pytest.mark.parametrize("a,b", [(7, 2), (-7, 2), (7, -2), (-7, -2), (1, 5), (-1, 5), (0, 3)])
def test_floor_division_operator(a, b):
    assert BigInt(a) // b == a // b
    assert a // BigInt(b) == a // b
    assert BigInt(a) // BigInt(b) == a // b


def test_floor_division_operator_by_zero():
    with pytest.raises(DivisionByZero):
        BigInt(3) // 0
    with pytest.raises(DivisionByZero):
        3 // zero()


@given(bigints(), nonzero_bigints())
def test_floor_division_operator_matches_host(a, b):
    assert (BigInt(a) // BigInt(b)).to_int() == a // b
