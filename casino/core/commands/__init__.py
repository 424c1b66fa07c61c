"""
命令模块

提供命令类型定义和DSL命令解析器。
"""

from .types import (
    AddPlayerCommand,
    AddGameCommand,
    AddTableCommand,
    PlaceBetCommand,
    AddRoundCommand,
    BetOutcome,
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
    Command,
    ALL_COMMAND_TYPES,
)
from .tokenizer import Token, tokenize
from .parser import CommandParser, parse_command, parse_script, is_blank_or_comment

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
    'Token',
    'tokenize',
    'CommandParser',
    'parse_command',
    'parse_script',
    'is_blank_or_comment',
]
