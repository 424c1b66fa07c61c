"""
Casino Core Module - 纯领域逻辑层

该模块包含赌场命令解释器的核心业务逻辑。
核心模块只能依赖其他核心模块，不能依赖应用层或UI层。

Modules:
    commands: 命令类型和DSL解析器
    directory: 按ID排序的玩家目录
    hierarchy: 下注/回合森林的引用校验
    limits: 取款限额统计
    state: 游戏聚合状态
"""

from .enums import GameType, BetType, RoundStatus, LimitType, BetStatus, ShowTarget
from .models import (
    WithdrawalRecord, Player, Game, Table, Dealer, Round, BetResolution, Bet
)
from .exceptions import (
    CasinoError,
    ParseErrorKind,
    ParseError,
    DuplicateIdError,
    NotFoundError,
    ReferenceNotFoundError,
    InvalidParentError,
    InsufficientBalanceError,
    LimitExceededError,
    AlreadyResolvedError,
    PlayerHasOpenBetsError,
    InvalidAmountError,
    BetOutOfRangeError,
    InvariantError,
)
from .directory import PlayerDirectory
from .state import GameState
from .hierarchy import HierarchyValidator
from .limits import LimitTracker

__all__ = [
    'GameType', 'BetType', 'RoundStatus', 'LimitType', 'BetStatus', 'ShowTarget',
    'WithdrawalRecord', 'Player', 'Game', 'Table', 'Dealer', 'Round', 'BetResolution', 'Bet',
    'CasinoError', 'ParseErrorKind', 'ParseError', 'DuplicateIdError', 'NotFoundError',
    'ReferenceNotFoundError', 'InvalidParentError', 'InsufficientBalanceError',
    'LimitExceededError', 'AlreadyResolvedError', 'PlayerHasOpenBetsError',
    'InvalidAmountError', 'BetOutOfRangeError', 'InvariantError',
    'PlayerDirectory', 'GameState', 'HierarchyValidator', 'LimitTracker',
]
