"""
赌场领域枚举定义

包含游戏类型、下注类型、回合状态、限额类型和下注结算状态。
枚举值即命令DSL中使用的关键字（区分大小写）。
"""

from enum import Enum
from typing import Tuple

__all__ = [
    'GameType',
    'BetType',
    'RoundStatus',
    'LimitType',
    'BetStatus',
    'ShowTarget',
]


class _KeywordEnum(Enum):
    """以DSL关键字为值的枚举基类"""

    @classmethod
    def keywords(cls) -> Tuple[str, ...]:
        """返回该枚举的全部DSL关键字"""
        return tuple(member.value for member in cls)

    @classmethod
    def from_keyword(cls, keyword: str):
        """根据DSL关键字查找枚举成员，找不到时抛出ValueError"""
        return cls(keyword)


class GameType(_KeywordEnum):
    """游戏类型"""
    BLACKJACK = "Blackjack"
    ROULETTE = "Roulette"
    POKER = "Poker"
    BACCARAT = "Baccarat"
    SLOTS = "Slots"


class BetType(_KeywordEnum):
    """下注类型"""
    STRAIGHT = "Straight"
    SPLIT = "Split"
    CORNER = "Corner"
    RED = "Red"
    BLACK = "Black"
    ODD = "Odd"
    EVEN = "Even"
    PASS = "Pass"
    DONT_PASS = "DontPass"


class RoundStatus(_KeywordEnum):
    """回合状态"""
    ACTIVE = "Active"
    FINISHED = "Finished"
    CANCELLED = "Cancelled"


class LimitType(_KeywordEnum):
    """玩家取款限额周期"""
    DAILY = "DailyLimit"
    WEEKLY = "WeeklyLimit"
    MONTHLY = "MonthlyLimit"


class BetStatus(Enum):
    """下注结算状态"""
    UNRESOLVED = "unresolved"
    WON = "won"
    LOST = "lost"
    PUSHED = "pushed"


class ShowTarget(_KeywordEnum):
    """show命令可查看的集合"""
    PLAYERS = "players"
    GAMES = "games"
    TABLES = "tables"
    DEALERS = "dealers"
    BETS = "bets"
    ROUNDS = "rounds"
