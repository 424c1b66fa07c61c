"""赌场命令解释器CLI渲染模块.

这个模块负责将命令结果渲染为命令行文本，
实现显示逻辑与核心逻辑的分离。
"""

from decimal import Decimal
from typing import Any, List, Optional

from casino.core import (
    Player, Game, Table, Dealer, Round, Bet, BetStatus, LimitType, ParseError
)
from casino.application import CommandResult


class CLIRenderer:
    """CLI渲染器.

    所有渲染方法都是纯函数，仅依赖传入的结果数据。
    """

    @staticmethod
    def render_result(result: CommandResult, line_number: Optional[int] = None) -> str:
        """渲染一条命令的执行结果.

        Args:
            result: 命令执行结果
            line_number: 脚本中的行号，交互模式下为None

        Returns:
            格式化的结果字符串
        """
        prefix = f"[{line_number}] " if line_number is not None else ""
        if not result.success:
            return prefix + CLIRenderer.render_error(result)

        data = result.data
        if isinstance(data, list):
            body = CLIRenderer.render_listing(data)
            return f"{prefix}{result.message}" + (f"\n{body}" if body else "")
        if data is not None and not isinstance(data, str):
            return f"{prefix}{result.message}\n  {CLIRenderer.render_entity(data)}"
        return f"{prefix}{result.message}"

    @staticmethod
    def render_error(result: CommandResult) -> str:
        """渲染失败结果.

        语法错误额外显示出错的词元。
        """
        lines = [f"错误 [{result.error_code}]: {result.message}"]
        error = result.error
        if isinstance(error, ParseError) and error.token is not None:
            lines.append(f"  出错词元: {error.token}")
        return "\n".join(lines)

    @staticmethod
    def render_listing(items: List[Any]) -> str:
        """渲染实体或文本列表，每项一行."""
        return "\n".join(
            f"  {item}" if isinstance(item, str) else f"  {CLIRenderer.render_entity(item)}"
            for item in items
        )

    @staticmethod
    def render_entity(entity: Any) -> str:
        """渲染单个实体."""
        if isinstance(entity, Player):
            return CLIRenderer._render_player(entity)
        if isinstance(entity, Game):
            return f"游戏 #{entity.game_id} {entity.name} ({entity.game_type.value})"
        if isinstance(entity, Table):
            dealer = f", 荷官 #{entity.dealer_id}" if entity.dealer_id is not None else ""
            return (f"牌桌 #{entity.table_id} {entity.name} 游戏 #{entity.game_id} "
                    f"下注范围 {_money(entity.min_bet)}-{_money(entity.max_bet)}{dealer}")
        if isinstance(entity, Dealer):
            return f"荷官 #{entity.dealer_id} {entity.name} 牌桌 #{entity.table_id}"
        if isinstance(entity, Round):
            parent = f", 父回合 #{entity.parent_round_id}" if entity.parent_round_id is not None else ""
            return f"回合 #{entity.round_id} 牌桌 #{entity.table_id} {entity.status.value}{parent}"
        if isinstance(entity, Bet):
            return CLIRenderer._render_bet(entity)
        return str(entity)

    @staticmethod
    def _render_player(player: Player) -> str:
        text = f"玩家 #{player.player_id} {player.name} 余额 {_money(player.balance)}"
        if player.limits:
            limits = ", ".join(
                f"{limit_type.value}={_money(player.limits[limit_type])}"
                for limit_type in LimitType if limit_type in player.limits
            )
            text += f" [{limits}]"
        return text

    @staticmethod
    def _render_bet(bet: Bet) -> str:
        resolution = bet.resolution
        if resolution.status is BetStatus.WON:
            status = f"won {_money(resolution.payout)}"
        else:
            status = resolution.status.value
        parent = f", 父下注 #{bet.parent_bet_id}" if bet.parent_bet_id is not None else ""
        return (f"下注 #{bet.bet_id} 玩家 #{bet.player_id} 牌桌 #{bet.table_id} "
                f"回合 #{bet.round_id} {bet.bet_type.value} {_money(bet.amount)} {status}{parent}")


def _money(amount: Decimal) -> str:
    return f"{amount:.2f}"
