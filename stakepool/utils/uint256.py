# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from stakepool.nanocontracts.exception import NCDivisionByZero, NCOverflow, NCUnderflow

UINT256_MAX: int = 2**256 - 1


def checked_add(a: int, b: int, error: type[NCOverflow] = NCOverflow) -> int:
    """Add two uint256 values, failing instead of wrapping."""
    result = a + b
    if result > UINT256_MAX:
        raise error('uint256 overflow')
    return result


def checked_sub(a: int, b: int, error: type[NCUnderflow] = NCUnderflow) -> int:
    """Subtract two uint256 values, failing when the result would be negative."""
    if b > a:
        raise error('uint256 underflow')
    return a - b


def checked_mul(a: int, b: int, error: type[NCOverflow] = NCOverflow) -> int:
    result = a * b
    if result > UINT256_MAX:
        raise error('uint256 overflow')
    return result


def checked_div(a: int, b: int) -> int:
    """Floor division of uint256 values; division by zero is an arithmetic fault."""
    if b == 0:
        raise NCDivisionByZero('division by zero')
    return a // b


def mul_div(a: int, b: int, denominator: int) -> int:
    """Compute `a * b // denominator` with the product range-checked first."""
    return checked_div(checked_mul(a, b), denominator)
