"""
Property-based Tests for Command Execution - 命令执行属性测试

对随机生成的命令序列验证：
- 输入状态永远不会被修改，失败命令返回输入状态本身
- 资金守恒：余额与托管金额之和只随存取款、派彩和删除玩家变化
- 余额永不为负，玩家目录始终平衡
- 重放成功命令的历史得到相同状态
- 已结算的下注不能再次结算
"""

from datetime import date
from decimal import Decimal
from typing import List

import pytest
from hypothesis import given, settings, strategies as st

from casino.application import CommandExecutor, ExecutorConfig, apply
from casino.core import BetType, GameState, GameType, LimitType, RoundStatus, ShowTarget
from casino.core.commands import (
    AddPlayerCommand, AddGameCommand, AddTableCommand, PlaceBetCommand,
    AddRoundCommand, BetOutcome, ResolveBetCommand, AddDealerCommand,
    DepositCommand, WithdrawCommand, SetLimitCommand, FindPlayerByIdCommand,
    ShowCommand, RemovePlayerCommand,
)

CONFIG = ExecutorConfig()
TODAY = date(2024, 3, 15)

SETUP = (
    'add player 1 "John Smith" 1000.0',
    'add player 2 "Jane Smith" 2000.0',
    'add game 1 "Roulette Royale" Roulette',
    'add table 1 "Roulette Table" 1 10.0 1000.0',
    'add round 1 table 1',
)

ids = st.integers(min_value=1, max_value=4)
optional_ids = st.none() | ids
money = st.decimals(min_value=Decimal("-10"), max_value=Decimal("1500"), places=2,
                    allow_nan=False, allow_infinity=False)

outcome_strategy = st.one_of(
    st.builds(BetOutcome.win, money),
    st.just(BetOutcome.lose()),
    st.just(BetOutcome.push()),
)

command_strategy = st.one_of(
    st.builds(AddPlayerCommand, player_id=ids, name=st.sampled_from(["Ann", "Bob"]), balance=money),
    st.builds(AddGameCommand, game_id=ids, name=st.just("Game"), game_type=st.sampled_from(list(GameType))),
    st.builds(AddTableCommand, table_id=ids, name=st.just("Table"), game_id=ids,
              min_bet=money, max_bet=money, dealer_id=optional_ids),
    st.builds(AddDealerCommand, dealer_id=ids, name=st.just("Dealer"), table_id=ids),
    st.builds(AddRoundCommand, round_id=ids, table_id=ids, parent_round_id=optional_ids,
              status=st.none() | st.sampled_from(list(RoundStatus))),
    st.builds(PlaceBetCommand, bet_id=ids, player_id=ids, table_id=ids, amount=money,
              bet_type=st.sampled_from(list(BetType)), round_id=ids, parent_bet_id=optional_ids),
    st.builds(ResolveBetCommand, bet_id=ids, outcome=outcome_strategy),
    st.builds(DepositCommand, player_id=ids, amount=money),
    st.builds(WithdrawCommand, player_id=ids, amount=money),
    st.builds(SetLimitCommand, player_id=ids, limit_type=st.sampled_from(list(LimitType)), amount=money),
    st.builds(RemovePlayerCommand, player_id=ids),
    st.builds(FindPlayerByIdCommand, player_id=ids),
    st.builds(ShowCommand, target=st.sampled_from(list(ShowTarget))),
)


def _seeded_executor() -> CommandExecutor:
    executor = CommandExecutor(config=CONFIG, clock=lambda: TODAY)
    for line in SETUP:
        assert executor.execute_line(line).success
    return executor


def _total_money(state: GameState) -> Decimal:
    """玩家余额与未结算下注托管金额之和"""
    balances = sum((player.balance for player in state.players), Decimal(0))
    escrow = sum((bet.amount for bet in state.bets.values() if bet.is_open), Decimal(0))
    return balances + escrow


def _expected_delta(state: GameState, command, data) -> Decimal:
    """成功执行一条命令后资金总额的预期变化"""
    if isinstance(command, AddPlayerCommand):
        return command.balance
    if isinstance(command, DepositCommand):
        return command.amount
    if isinstance(command, WithdrawCommand):
        return -command.amount
    if isinstance(command, RemovePlayerCommand):
        return -data.balance
    if isinstance(command, ResolveBetCommand):
        stake = state.get_bet(command.bet_id).amount
        if command.outcome.kind == BetOutcome.WIN:
            return command.outcome.amount - stake
        if command.outcome.kind == BetOutcome.LOSE:
            return -stake
    return Decimal(0)


@pytest.mark.property_test
@settings(deadline=None, max_examples=200)
@given(st.lists(command_strategy, min_size=1, max_size=40))
def test_command_sequence_invariants(commands: List):
    """Property test: 任意命令序列下状态变更的不变量都成立"""
    state = _seeded_executor().state

    for command in commands:
        snapshot = state.copy()
        result = apply(state, command, CONFIG, lambda: TODAY)

        assert state == snapshot, f"{command} 修改了输入状态"
        if not result.success:
            assert result.state is state
            continue

        new_state = result.state
        assert _total_money(new_state) == _total_money(state) + _expected_delta(state, command, result.data)
        assert all(player.balance >= 0 for player in new_state.players)
        new_state.players.check_invariants()
        for bet in new_state.bets.values():
            assert bet.table_id in new_state.tables
            assert bet.round_id in new_state.rounds
            if bet.parent_bet_id is not None:
                assert new_state.bets[bet.parent_bet_id].table_id == bet.table_id
        state = new_state


@pytest.mark.property_test
@settings(deadline=None)
@given(st.lists(command_strategy, max_size=40))
def test_replaying_history_reproduces_state(commands: List):
    """Property test: 在同一初始状态上重放成功命令得到相同状态"""
    executor = _seeded_executor()
    for command in commands:
        executor.execute(command)

    replay = _seeded_executor()
    for command in executor.history[len(SETUP):]:
        assert replay.execute(command).success
    assert replay.state == executor.state


@pytest.mark.property_test
@settings(deadline=None)
@given(outcome_strategy, outcome_strategy)
def test_bet_resolves_at_most_once(first, second):
    """Property test: 第一次结算之后的任何结算都被拒绝"""
    executor = _seeded_executor()
    assert executor.execute_line('place bet 1 player 1 table 1 amount 100 type Red round 1').success
    first_result = executor.execute(ResolveBetCommand(bet_id=1, outcome=first))
    if not first_result.success:
        # 负数派彩金额被拒绝，下注保持未结算
        assert executor.state.get_bet(1).is_open
        return

    resolved_state = executor.state
    second_result = executor.execute(ResolveBetCommand(bet_id=1, outcome=second))
    assert not second_result.success
    assert second_result.error_code == 'ALREADY_RESOLVED'
    assert executor.state is resolved_state
