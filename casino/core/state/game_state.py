"""
游戏聚合状态

GameState是全部实体的唯一所有者：一个玩家目录加上按ID索引的游戏、
牌桌、荷官、下注和回合集合。下注和回合通过父ID反向引用组成森林，
子集合按需推导，不在实体内部保存子列表。
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from ..directory import PlayerDirectory
from ..models import Game, Table, Dealer, Round, Bet

__all__ = ['GameState']


@dataclass
class GameState:
    """
    游戏聚合状态

    Attributes:
        players: 玩家目录
        games: 游戏集合
        tables: 牌桌集合
        dealers: 荷官集合
        bets: 下注集合
        rounds: 回合集合
        retired_player_ids: 已删除玩家的ID，之后的命令不得再引用
    """
    players: PlayerDirectory = field(default_factory=PlayerDirectory)
    games: Dict[int, Game] = field(default_factory=dict)
    tables: Dict[int, Table] = field(default_factory=dict)
    dealers: Dict[int, Dealer] = field(default_factory=dict)
    bets: Dict[int, Bet] = field(default_factory=dict)
    rounds: Dict[int, Round] = field(default_factory=dict)
    retired_player_ids: Set[int] = field(default_factory=set)

    def copy(self) -> 'GameState':
        """
        创建可独立修改的副本

        实体都是不可变对象，只需复制容器本身。
        """
        return GameState(
            players=self.players.copy(),
            games=dict(self.games),
            tables=dict(self.tables),
            dealers=dict(self.dealers),
            bets=dict(self.bets),
            rounds=dict(self.rounds),
            retired_player_ids=set(self.retired_player_ids),
        )

    def has_player(self, player_id: int) -> bool:
        return player_id in self.players

    def get_table(self, table_id: int) -> Optional[Table]:
        return self.tables.get(table_id)

    def get_round(self, round_id: int) -> Optional[Round]:
        return self.rounds.get(round_id)

    def get_bet(self, bet_id: int) -> Optional[Bet]:
        return self.bets.get(bet_id)

    def child_bets(self, parent_bet_id: int) -> List[Bet]:
        """直接子下注，按ID升序"""
        return _by_bet_id(bet for bet in self.bets.values() if bet.parent_bet_id == parent_bet_id)

    def child_rounds(self, parent_round_id: int) -> List[Round]:
        """直接子回合，按ID升序"""
        return _by_round_id(
            round_ for round_ in self.rounds.values() if round_.parent_round_id == parent_round_id
        )

    def root_bets(self) -> List[Bet]:
        return _by_bet_id(bet for bet in self.bets.values() if bet.parent_bet_id is None)

    def root_rounds(self) -> List[Round]:
        return _by_round_id(round_ for round_ in self.rounds.values() if round_.parent_round_id is None)

    def open_bets_for_player(self, player_id: int) -> List[Bet]:
        """玩家尚未结算的下注"""
        return _by_bet_id(
            bet for bet in self.bets.values() if bet.player_id == player_id and bet.is_open
        )

    def bets_in_round(self, round_id: int) -> List[Bet]:
        return _by_bet_id(bet for bet in self.bets.values() if bet.round_id == round_id)


def _by_bet_id(bets: Iterable[Bet]) -> List[Bet]:
    return sorted(bets, key=lambda bet: bet.bet_id)


def _by_round_id(rounds: Iterable[Round]) -> List[Round]:
    return sorted(rounds, key=lambda round_: round_.round_id)
