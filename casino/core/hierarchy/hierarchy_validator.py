"""
层级校验器

在下注、回合（以及牌桌、荷官）进入GameState之前，校验其声明的全部引用
是否存在且一致。父节点必须在子节点创建之前就已存在，因此森林中不可能
形成环，无需额外的环检测。
"""

from typing import List

from ..exceptions import ReferenceNotFoundError, InvalidParentError
from ..models import Bet, Round, Table, Dealer
from ..state import GameState

__all__ = ['HierarchyValidator']


class HierarchyValidator:
    """
    层级校验器

    所有方法只读取状态，校验失败时抛出ReferenceNotFoundError或
    InvalidParentError。
    """

    @staticmethod
    def validate_bet(state: GameState, bet: Bet) -> None:
        """
        校验待创建的下注

        依次检查：玩家存在、牌桌存在、回合存在、父下注（如有）存在且
        在同一牌桌上，且不是自身。
        """
        if not state.has_player(bet.player_id):
            raise ReferenceNotFoundError(f"下注 {bet.bet_id} 引用的玩家 {bet.player_id} 不存在")
        HierarchyValidator._require_table(state, bet.table_id, f"下注 {bet.bet_id}")
        if state.get_round(bet.round_id) is None:
            raise ReferenceNotFoundError(f"下注 {bet.bet_id} 引用的回合 {bet.round_id} 不存在")

        if bet.parent_bet_id is None:
            return
        if bet.parent_bet_id == bet.bet_id:
            raise InvalidParentError(f"下注 {bet.bet_id} 不能以自身为父下注")
        parent = state.get_bet(bet.parent_bet_id)
        if parent is None:
            raise InvalidParentError(f"下注 {bet.bet_id} 的父下注 {bet.parent_bet_id} 不存在")
        if parent.table_id != bet.table_id:
            raise InvalidParentError(
                f"下注 {bet.bet_id} 位于牌桌 {bet.table_id}，"
                f"父下注 {parent.bet_id} 位于牌桌 {parent.table_id}"
            )

    @staticmethod
    def validate_round(state: GameState, round_: Round) -> None:
        """校验待创建的回合：牌桌存在，父回合（如有）存在且不是自身"""
        HierarchyValidator._require_table(state, round_.table_id, f"回合 {round_.round_id}")

        if round_.parent_round_id is None:
            return
        if round_.parent_round_id == round_.round_id:
            raise InvalidParentError(f"回合 {round_.round_id} 不能以自身为父回合")
        if state.get_round(round_.parent_round_id) is None:
            raise InvalidParentError(
                f"回合 {round_.round_id} 的父回合 {round_.parent_round_id} 不存在"
            )

    @staticmethod
    def validate_table(state: GameState, table: Table) -> None:
        """校验待创建的牌桌：所属游戏存在，荷官（如有）存在"""
        if table.game_id not in state.games:
            raise ReferenceNotFoundError(f"牌桌 {table.table_id} 引用的游戏 {table.game_id} 不存在")
        if table.dealer_id is not None and table.dealer_id not in state.dealers:
            raise ReferenceNotFoundError(f"牌桌 {table.table_id} 引用的荷官 {table.dealer_id} 不存在")

    @staticmethod
    def validate_dealer(state: GameState, dealer: Dealer) -> None:
        """校验待创建的荷官：所在牌桌存在"""
        HierarchyValidator._require_table(state, dealer.table_id, f"荷官 {dealer.dealer_id}")

    @staticmethod
    def bet_ancestors(state: GameState, bet_id: int) -> List[Bet]:
        """从直接父下注到根下注的祖先链"""
        ancestors: List[Bet] = []
        bet = state.get_bet(bet_id)
        while bet is not None and bet.parent_bet_id is not None:
            bet = state.get_bet(bet.parent_bet_id)
            if bet is not None:
                ancestors.append(bet)
        return ancestors

    @staticmethod
    def round_ancestors(state: GameState, round_id: int) -> List[Round]:
        """从直接父回合到根回合的祖先链"""
        ancestors: List[Round] = []
        round_ = state.get_round(round_id)
        while round_ is not None and round_.parent_round_id is not None:
            round_ = state.get_round(round_.parent_round_id)
            if round_ is not None:
                ancestors.append(round_)
        return ancestors

    @staticmethod
    def _require_table(state: GameState, table_id: int, owner: str) -> None:
        if state.get_table(table_id) is None:
            raise ReferenceNotFoundError(f"{owner} 引用的牌桌 {table_id} 不存在")
