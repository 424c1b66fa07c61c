"""
赌场领域实体定义

所有实体都是不可变的数据类，状态变更通过dataclasses.replace生成新值。
金额统一使用Decimal表示，余额运算必须精确，无法精确表示时抛出InvalidAmountError。
"""

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Dict, Optional, Tuple

from .enums import GameType, BetType, RoundStatus, LimitType, BetStatus
from .money import add_exact, subtract_exact

__all__ = [
    'WithdrawalRecord',
    'Player',
    'Game',
    'Table',
    'Dealer',
    'Round',
    'BetResolution',
    'Bet',
]


@dataclass(frozen=True)
class WithdrawalRecord:
    """一次已提交的取款记录，用于限额统计"""
    on: date
    amount: Decimal


@dataclass(frozen=True)
class Player:
    """
    玩家

    Attributes:
        player_id: 玩家唯一ID
        name: 显示名称
        balance: 账户余额，任何已提交操作之后都不能为负
        limits: 限额类型到上限金额的映射
        withdrawals: 取款历史
    """
    player_id: int
    name: str
    balance: Decimal
    limits: Dict[LimitType, Decimal] = field(default_factory=dict)
    withdrawals: Tuple[WithdrawalRecord, ...] = ()

    def credit(self, amount: Decimal) -> 'Player':
        """返回增加余额后的新玩家"""
        return replace(self, balance=add_exact(self.balance, amount))

    def debit(self, amount: Decimal) -> 'Player':
        """返回扣减余额后的新玩家（调用方负责余额校验）"""
        return replace(self, balance=subtract_exact(self.balance, amount))

    def with_limit(self, limit_type: LimitType, amount: Decimal) -> 'Player':
        """返回设置限额后的新玩家"""
        limits = dict(self.limits)
        limits[limit_type] = amount
        return replace(self, limits=limits)

    def with_withdrawal(self, record: WithdrawalRecord, keep_since: Optional[date] = None) -> 'Player':
        """
        返回记录一次取款并扣减余额后的新玩家

        Args:
            record: 本次取款
            keep_since: 早于该日期的历史记录被丢弃，为None时保留全部
        """
        history = self.withdrawals
        if keep_since is not None:
            history = tuple(r for r in history if r.on >= keep_since)
        return replace(
            self,
            balance=subtract_exact(self.balance, record.amount),
            withdrawals=history + (record,)
        )


@dataclass(frozen=True)
class Game:
    """游戏，创建后不可修改"""
    game_id: int
    name: str
    game_type: GameType


@dataclass(frozen=True)
class Table:
    """牌桌"""
    table_id: int
    name: str
    game_id: int
    min_bet: Decimal
    max_bet: Decimal
    dealer_id: Optional[int] = None


@dataclass(frozen=True)
class Dealer:
    """荷官"""
    dealer_id: int
    name: str
    table_id: int


@dataclass(frozen=True)
class Round:
    """回合，可通过parent_round_id组成森林"""
    round_id: int
    table_id: int
    parent_round_id: Optional[int] = None
    status: RoundStatus = RoundStatus.ACTIVE


@dataclass(frozen=True)
class BetResolution:
    """下注结算结果，只有WON携带派彩金额"""
    status: BetStatus = BetStatus.UNRESOLVED
    payout: Optional[Decimal] = None

    @property
    def is_resolved(self) -> bool:
        return self.status is not BetStatus.UNRESOLVED

    @classmethod
    def won(cls, payout: Decimal) -> 'BetResolution':
        return cls(status=BetStatus.WON, payout=payout)

    @classmethod
    def lost(cls) -> 'BetResolution':
        return cls(status=BetStatus.LOST)

    @classmethod
    def pushed(cls) -> 'BetResolution':
        return cls(status=BetStatus.PUSHED)


@dataclass(frozen=True)
class Bet:
    """
    下注

    下注金额在下注时从玩家余额中扣除（托管）。
    parent_bet_id指向同一牌桌上已存在的下注。
    """
    bet_id: int
    player_id: int
    table_id: int
    amount: Decimal
    bet_type: BetType
    round_id: int
    parent_bet_id: Optional[int] = None
    resolution: BetResolution = field(default_factory=BetResolution)

    @property
    def is_open(self) -> bool:
        """下注是否尚未结算"""
        return not self.resolution.is_resolved

    def resolve(self, resolution: BetResolution) -> 'Bet':
        """返回带有结算结果的新下注"""
        return replace(self, resolution=resolution)
