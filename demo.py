import logging

from bigint import BigInt, add, multiply, divmod

logger = logging.getLogger(__name__)

# --- operand size: ~4000-bit numbers, 64 limbs each ---
OPERAND_BITS = 4000


def cube(x:BigInt) -> BigInt:
    return multiply(multiply(x, x), x)


def fermat_cubes_equal(a:BigInt, b:BigInt, c:BigInt) -> bool:
    return add(cube(a), cube(b)) == cube(c)


def main() -> bool:
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    # --- small test pattern scaled up to big operands ---
    a = BigInt(3) << OPERAND_BITS
    b = BigInt(4) << OPERAND_BITS
    c = BigInt(5) << OPERAND_BITS

    holds = not fermat_cubes_equal(a, b, c)
    if holds:
        logger.info("a^3 + b^3 != c^3, Fermat holds")
    else:
        logger.info("a^3 + b^3 == c^3 ???")

    # --- the cubes scale back down exactly ---
    q, r = divmod(cube(c), cube(BigInt(1) << OPERAND_BITS))
    logger.info("c^3 / 2^%d = %s remainder %s", 3 * OPERAND_BITS, q, r)
    logger.info("c in hex has %d digits", c.size_in_base(16))
    return holds


if __name__ == "__main__":
    main()
