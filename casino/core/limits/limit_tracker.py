"""
取款限额跟踪

限额按自然周期统计：
- DailyLimit: 同一自然日
- WeeklyLimit: 同一ISO周
- MonthlyLimit: 同一自然月

一笔取款在当前周期已取款总额加上本次金额超过上限时被拒绝。
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Tuple

from ..enums import LimitType
from ..exceptions import LimitExceededError
from ..models import Player
from ..money import add_exact, sum_exact

__all__ = ['LimitTracker']


class LimitTracker:
    """取款限额检查器"""

    @staticmethod
    def period_key(limit_type: LimitType, day: date) -> Tuple[int, ...]:
        """返回日期在指定限额类型下所属周期的键"""
        if limit_type is LimitType.DAILY:
            return (day.year, day.month, day.day)
        if limit_type is LimitType.WEEKLY:
            iso = day.isocalendar()
            return (iso[0], iso[1])
        return (day.year, day.month)

    @staticmethod
    def retention_start(today: date) -> date:
        """
        today所在各周期中最早的起始日

        ISO周可能从上个月开始，因此取本月1日和本周一中较早的一个。
        早于该日期的取款记录不会再计入任何限额。
        """
        month_start = today.replace(day=1)
        week_start = today - timedelta(days=today.weekday())
        return min(month_start, week_start)

    @staticmethod
    def withdrawn_in_period(player: Player, limit_type: LimitType, today: date) -> Decimal:
        """玩家在today所属周期内已取款的总额"""
        current = LimitTracker.period_key(limit_type, today)
        return sum_exact(
            record.amount for record in player.withdrawals
            if LimitTracker.period_key(limit_type, record.on) == current
        )

    @staticmethod
    def check_withdrawal(player: Player, amount: Decimal, today: date) -> None:
        """
        检查一笔取款是否超出玩家配置的任一限额

        Raises:
            LimitExceededError: 超出限额
        """
        for limit_type in LimitType:
            cap = player.limits.get(limit_type)
            if cap is None:
                continue
            withdrawn = LimitTracker.withdrawn_in_period(player, limit_type, today)
            if add_exact(withdrawn, amount) > cap:
                raise LimitExceededError(
                    f"玩家 {player.player_id} 的{limit_type.value}为 {cap}，"
                    f"本周期已取款 {withdrawn}，本次取款 {amount} 将超出限额"
                )
