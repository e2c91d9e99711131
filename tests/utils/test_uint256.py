import unittest

from stakepool.nanocontracts.exception import NCArithmeticError, NCDivisionByZero, NCOverflow, NCUnderflow
from stakepool.utils.uint256 import UINT256_MAX, checked_add, checked_div, checked_mul, checked_sub, mul_div


class CustomUnderflow(NCUnderflow):
    pass


class Uint256TestCase(unittest.TestCase):
    def test_add(self) -> None:
        self.assertEqual(checked_add(1, 2), 3)
        self.assertEqual(checked_add(UINT256_MAX - 1, 1), UINT256_MAX)
        with self.assertRaises(NCOverflow):
            checked_add(UINT256_MAX, 1)

    def test_sub(self) -> None:
        self.assertEqual(checked_sub(5, 5), 0)
        with self.assertRaises(NCUnderflow):
            checked_sub(0, 1)
        with self.assertRaises(CustomUnderflow):
            checked_sub(1, 2, CustomUnderflow)

    def test_mul(self) -> None:
        self.assertEqual(checked_mul(2**128 - 1, 2**128 + 1), UINT256_MAX)
        with self.assertRaises(NCOverflow):
            checked_mul(2**128, 2**128)

    def test_div(self) -> None:
        self.assertEqual(checked_div(7, 2), 3)
        with self.assertRaises(NCDivisionByZero):
            checked_div(1, 0)

    def test_mul_div(self) -> None:
        self.assertEqual(mul_div(10, 10**18, 3), 3333333333333333333)
        with self.assertRaises(NCOverflow):
            mul_div(2**200, 2**100, 2**100)
        with self.assertRaises(NCArithmeticError):
            mul_div(1, 1, 0)
