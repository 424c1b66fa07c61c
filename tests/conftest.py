"""
测试配置 - pytest配置文件

该文件提供通用的测试fixture：
- 固定日期的时钟
- 新的命令执行会话
- 预先搭建好的赌场场景
"""

from datetime import date
from typing import Callable, List

import pytest

from casino.application import CommandExecutor, CommandResult, ExecutorConfig
from casino.core import GameState

FIXED_DAY = date(2024, 3, 15)

BASE_SCRIPT = """
add player 1 "John Smith" 1000.0
add player 2 "Jane Smith" 2000.0
add player 3 "John Doe" 500.0
add game 1 "Roulette Royale" Roulette
add table 1 "Roulette Table" 1 10.0 1000.0
add table 2 "Second Table" 1 10.0 1000.0
add round 1 table 1
"""


@pytest.fixture
def fixed_clock() -> Callable[[], date]:
    """总是返回FIXED_DAY的时钟"""
    return lambda: FIXED_DAY


@pytest.fixture
def executor_config() -> ExecutorConfig:
    return ExecutorConfig()


@pytest.fixture
def executor(fixed_clock, executor_config) -> CommandExecutor:
    """空状态的命令执行会话"""
    return CommandExecutor(config=executor_config, clock=fixed_clock)


@pytest.fixture
def run() -> Callable[..., List[CommandResult]]:
    """逐行执行命令并断言每一行都成功"""
    def _run(executor: CommandExecutor, *lines: str) -> List[CommandResult]:
        results = []
        for line in lines:
            result = executor.execute_line(line)
            assert result.success, f"命令 '{line}' 执行失败: {result.message}"
            results.append(result)
        return results
    return _run


@pytest.fixture
def casino(executor, run) -> CommandExecutor:
    """
    预置场景：三名玩家、一个轮盘游戏、两张牌桌、牌桌1上的回合1
    """
    run(executor, *[line for line in BASE_SCRIPT.strip().splitlines()])
    return executor


@pytest.fixture
def casino_state(casino) -> GameState:
    return casino.state
