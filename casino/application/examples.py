"""
示例命令脚本

dump examples命令返回的示例，演示每种命令的用法。脚本中每一行都能被
成功解析和执行。
"""

from typing import Tuple

__all__ = ['EXAMPLE_COMMANDS', 'example_script']

EXAMPLE_COMMANDS: Tuple[str, ...] = (
    'add player 1 "John Smith" 1000.0',
    'add player 2 "Jane Smith" 2500.0',
    'add player 3 "John Doe" 500.0',
    'add game 1 "Roulette Royale" Roulette',
    'add game 2 "Blackjack Classic" Blackjack',
    'add table 1 "Roulette Table 1" 1 10.0 1000.0',
    'add dealer 1 "Alice" table 1',
    'add table 2 "High Stakes" 2 100.0 5000.0 dealer 1',
    'add round 1 table 1',
    'add round 2 table 1 parent 1 status Active',
    'place bet 1 player 1 table 1 amount 500.0 type Red round 1',
    'place bet 2 player 1 table 1 amount 100.0 type Odd parent 1 round 2',
    'place bet 3 player 2 table 1 amount 250.0 type Black round 1',
    'resolve bet 1 win 1000.0',
    'resolve bet 3 lose',
    'resolve bet 2 push',
    'deposit player 3 amount 200.0',
    'set limit player 2 DailyLimit 1000.0',
    'withdraw player 2 amount 300.0',
    'find player name "smith"',
    'find player id 1',
    'show players',
    'remove player 3',
)


def example_script() -> str:
    """以多行文本形式返回示例脚本"""
    return "\n".join(EXAMPLE_COMMANDS) + "\n"
