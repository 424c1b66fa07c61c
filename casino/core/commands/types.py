"""
命令类型定义

每条DSL命令对应一个不可变的数据类，Command是全部命令类型的联合。
新增命令时必须同时在ALL_COMMAND_TYPES中登记，执行器会在导入时检查
分派表是否覆盖全部命令类型。
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple, Union

from ..enums import GameType, BetType, RoundStatus, LimitType, ShowTarget

__all__ = [
    'AddPlayerCommand',
    'AddGameCommand',
    'AddTableCommand',
    'PlaceBetCommand',
    'AddRoundCommand',
    'BetOutcome',
    'ResolveBetCommand',
    'AddDealerCommand',
    'DepositCommand',
    'WithdrawCommand',
    'SetLimitCommand',
    'FindPlayerByNameCommand',
    'FindPlayerByIdCommand',
    'ShowCommand',
    'RemovePlayerCommand',
    'DumpExamplesCommand',
    'Command',
    'ALL_COMMAND_TYPES',
]


@dataclass(frozen=True)
class AddPlayerCommand:
    """add player <int> <string> <double>"""
    player_id: int
    name: str
    balance: Decimal


@dataclass(frozen=True)
class AddGameCommand:
    """add game <int> <string> <game_type>"""
    game_id: int
    name: str
    game_type: GameType


@dataclass(frozen=True)
class AddTableCommand:
    """add table <int> <string> <int> <double> <double> [dealer <int>]"""
    table_id: int
    name: str
    game_id: int
    min_bet: Decimal
    max_bet: Decimal
    dealer_id: Optional[int] = None


@dataclass(frozen=True)
class PlaceBetCommand:
    """place bet <int> player <int> table <int> amount <double> type <bet_type> [parent <int>] round <int>"""
    bet_id: int
    player_id: int
    table_id: int
    amount: Decimal
    bet_type: BetType
    round_id: int
    parent_bet_id: Optional[int] = None


@dataclass(frozen=True)
class AddRoundCommand:
    """add round <int> table <int> [parent <int>] [status <round_status>]"""
    round_id: int
    table_id: int
    parent_round_id: Optional[int] = None
    status: Optional[RoundStatus] = None


@dataclass(frozen=True)
class BetOutcome:
    """结算结果：win带金额，lose和push不带金额"""
    kind: str
    amount: Optional[Decimal] = None

    WIN = "win"
    LOSE = "lose"
    PUSH = "push"

    @classmethod
    def win(cls, amount: Decimal) -> 'BetOutcome':
        return cls(kind=cls.WIN, amount=amount)

    @classmethod
    def lose(cls) -> 'BetOutcome':
        return cls(kind=cls.LOSE)

    @classmethod
    def push(cls) -> 'BetOutcome':
        return cls(kind=cls.PUSH)


@dataclass(frozen=True)
class ResolveBetCommand:
    """resolve bet <int> (win <double> | lose | push)"""
    bet_id: int
    outcome: BetOutcome


@dataclass(frozen=True)
class AddDealerCommand:
    """add dealer <int> <string> table <int>"""
    dealer_id: int
    name: str
    table_id: int


@dataclass(frozen=True)
class DepositCommand:
    """deposit player <int> amount <double>"""
    player_id: int
    amount: Decimal


@dataclass(frozen=True)
class WithdrawCommand:
    """withdraw player <int> amount <double>"""
    player_id: int
    amount: Decimal


@dataclass(frozen=True)
class SetLimitCommand:
    """set limit player <int> <limit_type> <double>"""
    player_id: int
    limit_type: LimitType
    amount: Decimal


@dataclass(frozen=True)
class FindPlayerByNameCommand:
    """find player name <string>（不区分大小写的部分匹配）"""
    name: str


@dataclass(frozen=True)
class FindPlayerByIdCommand:
    """find player id <int>"""
    player_id: int


@dataclass(frozen=True)
class ShowCommand:
    """show (players|games|tables|dealers|bets|rounds)"""
    target: ShowTarget


@dataclass(frozen=True)
class RemovePlayerCommand:
    """remove player <int>"""
    player_id: int


@dataclass(frozen=True)
class DumpExamplesCommand:
    """dump examples"""


Command = Union[
    AddPlayerCommand,
    AddGameCommand,
    AddTableCommand,
    PlaceBetCommand,
    AddRoundCommand,
    ResolveBetCommand,
    AddDealerCommand,
    DepositCommand,
    WithdrawCommand,
    SetLimitCommand,
    FindPlayerByNameCommand,
    FindPlayerByIdCommand,
    ShowCommand,
    RemovePlayerCommand,
    DumpExamplesCommand,
]

ALL_COMMAND_TYPES: Tuple[type, ...] = Command.__args__
