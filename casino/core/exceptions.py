"""
赌场命令解释器业务异常定义

核心组件在校验失败时抛出这些异常，由应用层的命令执行器捕获并转换为
CommandResult，异常不会越过执行器边界。
"""

from enum import Enum
from typing import Optional, Sequence, Tuple


class CasinoError(Exception):
    """赌场业务基础异常类"""

    error_code = "CASINO_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if error_code is not None:
            self.error_code = error_code


class ParseErrorKind(Enum):
    """命令解析错误类型"""
    UNKNOWN_COMMAND = "UnknownCommand"
    TYPE_MISMATCH = "TypeMismatch"
    MISSING_FIELD = "MissingField"
    OUT_OF_ORDER_CLAUSE = "OutOfOrderClause"
    UNEXPECTED_TOKEN = "UnexpectedToken"
    UNTERMINATED_STRING = "UnterminatedString"


class ParseError(CasinoError):
    """
    命令解析异常

    Attributes:
        kind: 解析错误类型
        token: 出错的词元，到达输入末尾时为None
        position: 出错词元在输入行中的列位置（从0开始）
        expected: 该位置可以接受的候选
    """

    error_code = "PARSE_ERROR"

    def __init__(self, kind: ParseErrorKind, message: str, token: Optional[str] = None,
                 position: Optional[int] = None, expected: Sequence[str] = ()):
        super().__init__(message)
        self.kind = kind
        self.token = token
        self.position = position
        self.expected: Tuple[str, ...] = tuple(expected)

    def __str__(self) -> str:
        details = [self.message]
        if self.position is not None:
            details.append(f"位置 {self.position}")
        if self.expected:
            details.append(f"期望: {' | '.join(self.expected)}")
        return f"[{self.kind.value}] " + "，".join(details)


class DuplicateIdError(CasinoError):
    """集合中已存在相同ID"""
    error_code = "DUPLICATE_ID"


class NotFoundError(CasinoError):
    """查找或删除的实体不存在"""
    error_code = "NOT_FOUND"


class ReferenceNotFoundError(CasinoError):
    """声明引用的牌桌/回合/荷官/玩家/游戏不存在"""
    error_code = "REFERENCE_NOT_FOUND"


class InvalidParentError(CasinoError):
    """父下注或父回合无效（不存在、跨牌桌或自引用）"""
    error_code = "INVALID_PARENT"


class InsufficientBalanceError(CasinoError):
    """余额不足"""
    error_code = "INSUFFICIENT_BALANCE"


class LimitExceededError(CasinoError):
    """超出周期限额"""
    error_code = "LIMIT_EXCEEDED"


class AlreadyResolvedError(CasinoError):
    """下注已经结算"""
    error_code = "ALREADY_RESOLVED"


class PlayerHasOpenBetsError(CasinoError):
    """玩家仍有未结算的下注，不能删除"""
    error_code = "PLAYER_HAS_OPEN_BETS"


class InvalidAmountError(CasinoError):
    """金额不合法（非正数、负余额或最小下注大于最大下注）"""
    error_code = "INVALID_AMOUNT"


class BetOutOfRangeError(CasinoError):
    """下注金额不在牌桌限额范围内"""
    error_code = "BET_OUT_OF_RANGE"


class InvariantError(Exception):
    """
    内部数据结构被破坏

    不是业务错误，不继承CasinoError，命令执行器不会将其转换为CommandResult。
    """

    def __init__(self, message: str, violations: Sequence[str] = ()):
        super().__init__(message)
        self.violations: Tuple[str, ...] = tuple(violations)
