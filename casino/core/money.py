"""
金额运算

余额和限额统计只做精确的Decimal加减。结果无法在当前精度内精确表示时
抛出InvalidAmountError，而不是静默舍入。
"""

import operator
from decimal import Decimal, Inexact, localcontext
from typing import Callable, Iterable

from .exceptions import InvalidAmountError

__all__ = ['add_exact', 'subtract_exact', 'sum_exact']


def _exact(op: Callable[[Decimal, Decimal], Decimal], left: Decimal, right: Decimal) -> Decimal:
    with localcontext() as ctx:
        ctx.traps[Inexact] = True
        try:
            return op(left, right)
        except Inexact:
            raise InvalidAmountError(
                f"金额 {left} 与 {right} 的运算结果超出 {ctx.prec} 位有效数字"
            ) from None


def add_exact(left: Decimal, right: Decimal) -> Decimal:
    """精确相加"""
    return _exact(operator.add, left, right)


def subtract_exact(left: Decimal, right: Decimal) -> Decimal:
    """精确相减"""
    return _exact(operator.sub, left, right)


def sum_exact(amounts: Iterable[Decimal]) -> Decimal:
    total = Decimal(0)
    for amount in amounts:
        total = add_exact(total, amount)
    return total
