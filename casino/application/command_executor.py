"""
Command Executor - 命令执行器

apply(state, command)是唯一的状态变更入口。每个处理器先针对输入状态完成
全部校验，再在状态副本上提交修改（先检查后执行，不做回滚）。失败时返回的
结果携带未经修改的输入状态。

命令执行器负责：
- 按命令类型分派到处理器
- 调用层级校验器和玩家目录进行校验
- 将核心层异常转换为CommandResult
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from ..core.commands import (
    ALL_COMMAND_TYPES,
    Command,
    AddPlayerCommand, AddGameCommand, AddTableCommand, PlaceBetCommand,
    AddRoundCommand, BetOutcome, ResolveBetCommand, AddDealerCommand,
    DepositCommand, WithdrawCommand, SetLimitCommand, FindPlayerByNameCommand,
    FindPlayerByIdCommand, ShowCommand, RemovePlayerCommand, DumpExamplesCommand,
    parse_command, is_blank_or_comment,
)
from ..core.enums import ShowTarget
from ..core.exceptions import (
    CasinoError,
    ParseError,
    DuplicateIdError,
    NotFoundError,
    ReferenceNotFoundError,
    InsufficientBalanceError,
    AlreadyResolvedError,
    PlayerHasOpenBetsError,
    InvalidAmountError,
    BetOutOfRangeError,
)
from ..core.hierarchy import HierarchyValidator
from ..core.limits import LimitTracker
from ..core.money import add_exact
from ..core.models import (
    WithdrawalRecord, Player, Game, Table, Dealer, Round, Bet, BetResolution
)
from ..core.state import GameState
from .config_service import ExecutorConfig, get_config_service
from .examples import EXAMPLE_COMMANDS
from .types import CommandResult

__all__ = ['apply', 'CommandExecutor']

logger = logging.getLogger(__name__)

Clock = Callable[[], date]

# 处理器返回 (新状态, 信息, 数据)
_Outcome = Tuple[GameState, str, Any]

_VALIDATION_ERRORS = (ParseError, InvalidAmountError)


class _Context:
    """单次命令执行的上下文"""

    __slots__ = ('config', 'clock')

    def __init__(self, config: ExecutorConfig, clock: Clock):
        self.config = config
        self.clock = clock


def _require_exact(amount: Decimal, what: str) -> None:
    try:
        add_exact(Decimal(0), amount)
    except InvalidAmountError:
        raise InvalidAmountError(f"{what} {amount} 的有效数字过多，无法精确记账") from None


def _require_positive(amount: Decimal, what: str) -> None:
    if amount <= 0:
        raise InvalidAmountError(f"{what}必须大于0，实际为 {amount}")
    _require_exact(amount, what)


def _require_non_negative(amount: Decimal, what: str) -> None:
    if amount < 0:
        raise InvalidAmountError(f"{what}不能为负数，实际为 {amount}")
    _require_exact(amount, what)


# ---- 新增实体 ----

def _handle_add_player(state: GameState, command: AddPlayerCommand, ctx: _Context) -> _Outcome:
    if command.player_id in state.players:
        raise DuplicateIdError(f"玩家ID {command.player_id} 已存在")
    if command.player_id in state.retired_player_ids:
        raise DuplicateIdError(f"玩家ID {command.player_id} 属于已删除的玩家，不能复用")
    _require_non_negative(command.balance, "初始余额")

    player = Player(player_id=command.player_id, name=command.name, balance=command.balance)
    new_state = state.copy()
    new_state.players.insert(player)
    return new_state, f"玩家 {player.player_id} ({player.name}) 已添加", player


def _handle_add_game(state: GameState, command: AddGameCommand, ctx: _Context) -> _Outcome:
    if command.game_id in state.games:
        raise DuplicateIdError(f"游戏ID {command.game_id} 已存在")

    game = Game(game_id=command.game_id, name=command.name, game_type=command.game_type)
    new_state = state.copy()
    new_state.games[game.game_id] = game
    return new_state, f"游戏 {game.game_id} ({game.name}) 已添加", game


def _handle_add_table(state: GameState, command: AddTableCommand, ctx: _Context) -> _Outcome:
    if command.table_id in state.tables:
        raise DuplicateIdError(f"牌桌ID {command.table_id} 已存在")
    table = Table(
        table_id=command.table_id,
        name=command.name,
        game_id=command.game_id,
        min_bet=command.min_bet,
        max_bet=command.max_bet,
        dealer_id=command.dealer_id
    )
    HierarchyValidator.validate_table(state, table)
    _require_non_negative(table.min_bet, "最小下注")
    _require_positive(table.max_bet, "最大下注")
    if table.min_bet > table.max_bet:
        raise InvalidAmountError(f"最小下注 {table.min_bet} 大于最大下注 {table.max_bet}")

    new_state = state.copy()
    new_state.tables[table.table_id] = table
    return new_state, f"牌桌 {table.table_id} ({table.name}) 已添加", table


def _handle_add_dealer(state: GameState, command: AddDealerCommand, ctx: _Context) -> _Outcome:
    if command.dealer_id in state.dealers:
        raise DuplicateIdError(f"荷官ID {command.dealer_id} 已存在")
    dealer = Dealer(dealer_id=command.dealer_id, name=command.name, table_id=command.table_id)
    HierarchyValidator.validate_dealer(state, dealer)

    new_state = state.copy()
    new_state.dealers[dealer.dealer_id] = dealer
    return new_state, f"荷官 {dealer.dealer_id} ({dealer.name}) 已添加", dealer


def _handle_add_round(state: GameState, command: AddRoundCommand, ctx: _Context) -> _Outcome:
    if command.round_id in state.rounds:
        raise DuplicateIdError(f"回合ID {command.round_id} 已存在")
    round_ = Round(
        round_id=command.round_id,
        table_id=command.table_id,
        parent_round_id=command.parent_round_id,
        status=command.status or ctx.config.default_round_status
    )
    HierarchyValidator.validate_round(state, round_)

    new_state = state.copy()
    new_state.rounds[round_.round_id] = round_
    return new_state, f"回合 {round_.round_id} 已添加", round_


def _handle_place_bet(state: GameState, command: PlaceBetCommand, ctx: _Context) -> _Outcome:
    if command.bet_id in state.bets:
        raise DuplicateIdError(f"下注ID {command.bet_id} 已存在")
    bet = Bet(
        bet_id=command.bet_id,
        player_id=command.player_id,
        table_id=command.table_id,
        amount=command.amount,
        bet_type=command.bet_type,
        round_id=command.round_id,
        parent_bet_id=command.parent_bet_id
    )
    HierarchyValidator.validate_bet(state, bet)
    _require_positive(bet.amount, "下注金额")

    table = state.tables[bet.table_id]
    if ctx.config.enforce_table_limits and not (table.min_bet <= bet.amount <= table.max_bet):
        raise BetOutOfRangeError(
            f"下注金额 {bet.amount} 不在牌桌 {table.table_id} 的范围 [{table.min_bet}, {table.max_bet}] 内"
        )

    player = state.players.find_by_id(bet.player_id)
    if bet.amount > player.balance:
        raise InsufficientBalanceError(
            f"玩家 {player.player_id} 余额 {player.balance} 不足以下注 {bet.amount}"
        )

    # 下注金额在下注时托管扣除
    new_state = state.copy()
    new_state.players.replace(player.debit(bet.amount))
    new_state.bets[bet.bet_id] = bet
    return new_state, f"下注 {bet.bet_id} 已受理，金额 {bet.amount}", bet


# ---- 资金和结算 ----

def _handle_resolve_bet(state: GameState, command: ResolveBetCommand, ctx: _Context) -> _Outcome:
    bet = state.get_bet(command.bet_id)
    if bet is None:
        raise NotFoundError(f"下注 {command.bet_id} 不存在")
    if not bet.is_open:
        raise AlreadyResolvedError(f"下注 {bet.bet_id} 已结算为 {bet.resolution.status.value}")
    if bet.player_id not in state.players:
        raise ReferenceNotFoundError(f"下注 {bet.bet_id} 的玩家 {bet.player_id} 不存在")

    outcome = command.outcome
    player = state.players.find_by_id(bet.player_id)
    if outcome.kind == BetOutcome.WIN:
        _require_non_negative(outcome.amount, "派彩金额")
        resolution = BetResolution.won(outcome.amount)
        player = player.credit(outcome.amount)
    elif outcome.kind == BetOutcome.PUSH:
        resolution = BetResolution.pushed()
        player = player.credit(bet.amount)
    else:
        resolution = BetResolution.lost()

    # 只结算指定的下注，子下注不级联
    resolved = bet.resolve(resolution)
    new_state = state.copy()
    new_state.bets[resolved.bet_id] = resolved
    new_state.players.replace(player)
    return new_state, f"下注 {resolved.bet_id} 结算为 {resolution.status.value}", resolved


def _handle_deposit(state: GameState, command: DepositCommand, ctx: _Context) -> _Outcome:
    player = state.players.find_by_id(command.player_id)
    _require_positive(command.amount, "存款金额")

    updated = player.credit(command.amount)
    new_state = state.copy()
    new_state.players.replace(updated)
    return new_state, f"玩家 {updated.player_id} 存款 {command.amount}，余额 {updated.balance}", updated


def _handle_withdraw(state: GameState, command: WithdrawCommand, ctx: _Context) -> _Outcome:
    player = state.players.find_by_id(command.player_id)
    _require_positive(command.amount, "取款金额")
    if command.amount > player.balance:
        raise InsufficientBalanceError(
            f"玩家 {player.player_id} 余额 {player.balance} 不足以取款 {command.amount}"
        )
    today = ctx.clock()
    LimitTracker.check_withdrawal(player, command.amount, today)

    updated = player.with_withdrawal(
        WithdrawalRecord(on=today, amount=command.amount),
        keep_since=LimitTracker.retention_start(today)
    )
    new_state = state.copy()
    new_state.players.replace(updated)
    return new_state, f"玩家 {updated.player_id} 取款 {command.amount}，余额 {updated.balance}", updated


def _handle_set_limit(state: GameState, command: SetLimitCommand, ctx: _Context) -> _Outcome:
    player = state.players.find_by_id(command.player_id)
    _require_non_negative(command.amount, "限额")

    updated = player.with_limit(command.limit_type, command.amount)
    new_state = state.copy()
    new_state.players.replace(updated)
    return new_state, f"玩家 {updated.player_id} 的{command.limit_type.value}设为 {command.amount}", updated


def _handle_remove_player(state: GameState, command: RemovePlayerCommand, ctx: _Context) -> _Outcome:
    player = state.players.find_by_id(command.player_id)
    open_bets = state.open_bets_for_player(player.player_id)
    if open_bets:
        raise PlayerHasOpenBetsError(
            f"玩家 {player.player_id} 仍有未结算的下注: {', '.join(str(b.bet_id) for b in open_bets)}"
        )

    new_state = state.copy()
    new_state.players.remove(player.player_id)
    new_state.retired_player_ids.add(player.player_id)
    return new_state, f"玩家 {player.player_id} 已删除", player


# ---- 只读查询 ----

def _handle_find_by_name(state: GameState, command: FindPlayerByNameCommand, ctx: _Context) -> _Outcome:
    players = state.players.find_by_name_partial(command.name)
    return state, f"找到 {len(players)} 名玩家", players


def _handle_find_by_id(state: GameState, command: FindPlayerByIdCommand, ctx: _Context) -> _Outcome:
    player = state.players.find_by_id(command.player_id)
    return state, f"找到玩家 {player.player_id}", player


def _handle_show(state: GameState, command: ShowCommand, ctx: _Context) -> _Outcome:
    target = command.target
    if target is ShowTarget.PLAYERS:
        items: List[Any] = list(state.players)
    else:
        collection: Dict[int, Any] = {
            ShowTarget.GAMES: state.games,
            ShowTarget.TABLES: state.tables,
            ShowTarget.DEALERS: state.dealers,
            ShowTarget.BETS: state.bets,
            ShowTarget.ROUNDS: state.rounds,
        }[target]
        items = [collection[key] for key in sorted(collection)]
    return state, f"{target.value}: {len(items)}", items


def _handle_dump_examples(state: GameState, command: DumpExamplesCommand, ctx: _Context) -> _Outcome:
    return state, f"{len(EXAMPLE_COMMANDS)} 条示例命令", list(EXAMPLE_COMMANDS)


_HANDLERS: Dict[type, Callable[[GameState, Any, _Context], _Outcome]] = {
    AddPlayerCommand: _handle_add_player,
    AddGameCommand: _handle_add_game,
    AddTableCommand: _handle_add_table,
    AddDealerCommand: _handle_add_dealer,
    AddRoundCommand: _handle_add_round,
    PlaceBetCommand: _handle_place_bet,
    ResolveBetCommand: _handle_resolve_bet,
    DepositCommand: _handle_deposit,
    WithdrawCommand: _handle_withdraw,
    SetLimitCommand: _handle_set_limit,
    RemovePlayerCommand: _handle_remove_player,
    FindPlayerByNameCommand: _handle_find_by_name,
    FindPlayerByIdCommand: _handle_find_by_id,
    ShowCommand: _handle_show,
    DumpExamplesCommand: _handle_dump_examples,
}

_missing_handlers = [cls.__name__ for cls in ALL_COMMAND_TYPES if cls not in _HANDLERS]
if _missing_handlers:
    raise TypeError(f"以下命令类型没有处理器: {', '.join(_missing_handlers)}")


def apply(state: GameState, command: Command, config: Optional[ExecutorConfig] = None,
          clock: Optional[Clock] = None) -> CommandResult:
    """
    将一条命令应用到游戏状态

    Args:
        state: 当前游戏状态，不会被修改
        command: 已解析的命令
        config: 执行配置，默认取配置服务的default配置
        clock: 返回当前日期的函数，默认为date.today。取款记录会保存该日期，
            重放命令序列时必须注入相同的时钟才能得到相同状态

    Returns:
        命令结果；成功时result.state为新状态，失败时为输入状态

    Raises:
        TypeError: command不是已知的命令类型
    """
    handler = _HANDLERS.get(type(command))
    if handler is None:
        raise TypeError(f"未知的命令类型: {type(command).__name__}")
    if config is None:
        config = get_config_service().get_executor_config().data
    ctx = _Context(config, clock or date.today)

    try:
        new_state, message, data = handler(state, command, ctx)
    except _VALIDATION_ERRORS as e:
        logger.info(f"命令校验失败 {type(command).__name__}: {e}")
        return CommandResult.validation_error(state, e)
    except CasinoError as e:
        logger.info(f"命令被拒绝 {type(command).__name__}: {e}")
        return CommandResult.business_rule_violation(state, e)

    logger.debug(f"命令执行成功 {type(command).__name__}: {message}")
    return CommandResult.success_result(new_state, message=message, data=data)


class CommandExecutor:
    """
    命令执行会话

    持有当前状态、执行配置和时钟，按接收顺序逐条执行命令。
    同一实例不支持并发调用。
    """

    def __init__(self, state: Optional[GameState] = None,
                 config: Optional[ExecutorConfig] = None,
                 clock: Optional[Clock] = None):
        """
        初始化命令执行会话

        Args:
            state: 初始状态，默认为空状态
            config: 执行配置，默认取配置服务的default配置
            clock: 返回当前日期的函数
        """
        self.logger = logging.getLogger(__name__)
        self._state = state if state is not None else GameState()
        self._config = config or get_config_service().get_executor_config().data
        self._clock = clock or date.today
        self._history: List[Command] = []

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def history(self) -> List[Command]:
        """已成功执行的命令"""
        return list(self._history)

    def execute(self, command: Command) -> CommandResult:
        """执行一条命令，成功时推进会话状态"""
        result = apply(self._state, command, self._config, self._clock)
        if result.success:
            self._state = result.state
            self._history.append(command)
        return result

    def execute_line(self, line: str) -> CommandResult:
        """解析并执行一行命令，语法错误转换为失败结果"""
        try:
            command = parse_command(line)
        except ParseError as e:
            self.logger.info(f"命令解析失败 '{line.strip()}': {e}")
            return CommandResult.validation_error(self._state, e)
        return self.execute(command)

    def iter_script(self, text: str, stop_on_error: bool = False) -> Iterator[Tuple[int, CommandResult]]:
        """
        逐行执行脚本，每执行一行产出一次 (行号, 结果)

        跳过空行和注释行，行号从1开始。

        Args:
            text: 多行命令文本
            stop_on_error: 为True时产出第一条失败结果后停止，否则失败不影响后续行
        """
        for line_number, line in enumerate(text.splitlines(), start=1):
            if is_blank_or_comment(line):
                continue
            result = self.execute_line(line)
            yield line_number, result
            if stop_on_error and not result.success:
                self.logger.warning(f"第 {line_number} 行执行失败，停止执行脚本")
                return

    def execute_script(self, text: str, stop_on_error: bool = False) -> List[Tuple[int, CommandResult]]:
        """执行整个脚本，返回 (行号, 结果) 列表"""
        return list(self.iter_script(text, stop_on_error))
