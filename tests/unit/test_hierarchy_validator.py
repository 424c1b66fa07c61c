"""
层级校验器单元测试
"""

from decimal import Decimal

import pytest

from casino.core import (
    Bet, BetType, Round, Table, Dealer, HierarchyValidator,
    ReferenceNotFoundError, InvalidParentError,
)


def _bet(bet_id: int, table_id: int = 1, round_id: int = 1, parent: int = None, player_id: int = 1) -> Bet:
    return Bet(
        bet_id=bet_id, player_id=player_id, table_id=table_id, amount=Decimal("10"),
        bet_type=BetType.RED, round_id=round_id, parent_bet_id=parent
    )


@pytest.fixture
def state_with_bet(casino, run):
    run(casino, 'place bet 1 player 1 table 1 amount 100 type Red round 1')
    return casino.state


@pytest.mark.unit
class TestBetValidation:
    """下注引用校验"""

    def test_valid_root_bet(self, casino_state):
        HierarchyValidator.validate_bet(casino_state, _bet(1))

    def test_valid_child_bet(self, state_with_bet):
        HierarchyValidator.validate_bet(state_with_bet, _bet(2, parent=1))

    def test_missing_player(self, casino_state):
        with pytest.raises(ReferenceNotFoundError):
            HierarchyValidator.validate_bet(casino_state, _bet(1, player_id=42))

    def test_missing_table(self, casino_state):
        with pytest.raises(ReferenceNotFoundError):
            HierarchyValidator.validate_bet(casino_state, _bet(1, table_id=9))

    def test_missing_round(self, casino_state):
        with pytest.raises(ReferenceNotFoundError):
            HierarchyValidator.validate_bet(casino_state, _bet(1, round_id=9))

    def test_missing_parent(self, casino_state):
        with pytest.raises(InvalidParentError):
            HierarchyValidator.validate_bet(casino_state, _bet(2, parent=1))

    def test_self_parent(self, state_with_bet):
        with pytest.raises(InvalidParentError):
            HierarchyValidator.validate_bet(state_with_bet, _bet(5, parent=5))

    def test_parent_on_other_table(self, state_with_bet, casino, run):
        run(casino, 'add round 2 table 2')
        with pytest.raises(InvalidParentError):
            HierarchyValidator.validate_bet(casino.state, _bet(2, table_id=2, round_id=2, parent=1))

    def test_child_may_use_different_round(self, state_with_bet, casino, run):
        run(casino, 'add round 2 table 1')
        HierarchyValidator.validate_bet(casino.state, _bet(2, round_id=2, parent=1))


@pytest.mark.unit
class TestRoundValidation:
    """回合引用校验"""

    def test_valid_root_and_child(self, casino_state):
        HierarchyValidator.validate_round(casino_state, Round(round_id=2, table_id=1))
        HierarchyValidator.validate_round(casino_state, Round(round_id=2, table_id=1, parent_round_id=1))

    def test_missing_table(self, casino_state):
        with pytest.raises(ReferenceNotFoundError):
            HierarchyValidator.validate_round(casino_state, Round(round_id=2, table_id=9))

    def test_forward_reference_rejected(self, casino_state):
        with pytest.raises(InvalidParentError):
            HierarchyValidator.validate_round(casino_state, Round(round_id=2, table_id=1, parent_round_id=3))

    def test_self_parent(self, casino_state):
        with pytest.raises(InvalidParentError):
            HierarchyValidator.validate_round(casino_state, Round(round_id=2, table_id=1, parent_round_id=2))


@pytest.mark.unit
class TestTableAndDealerValidation:
    """牌桌和荷官引用校验"""

    def test_table_requires_game(self, casino_state):
        table = Table(table_id=3, name="T", game_id=9, min_bet=Decimal("1"), max_bet=Decimal("2"))
        with pytest.raises(ReferenceNotFoundError):
            HierarchyValidator.validate_table(casino_state, table)

    def test_table_dealer_must_exist(self, casino_state):
        table = Table(table_id=3, name="T", game_id=1, min_bet=Decimal("1"), max_bet=Decimal("2"), dealer_id=5)
        with pytest.raises(ReferenceNotFoundError):
            HierarchyValidator.validate_table(casino_state, table)

    def test_dealer_requires_table(self, casino_state):
        with pytest.raises(ReferenceNotFoundError):
            HierarchyValidator.validate_dealer(casino_state, Dealer(dealer_id=1, name="D", table_id=9))


@pytest.mark.unit
class TestAncestry:
    """祖先链"""

    def test_round_ancestors(self, casino, run):
        run(casino, 'add round 2 table 1 parent 1', 'add round 3 table 1 parent 2')
        ancestors = HierarchyValidator.round_ancestors(casino.state, 3)
        assert [r.round_id for r in ancestors] == [2, 1]

    def test_bet_ancestors_and_children(self, casino, run):
        run(
            casino,
            'place bet 1 player 1 table 1 amount 100 type Red round 1',
            'place bet 2 player 1 table 1 amount 50 type Odd parent 1 round 1',
            'place bet 3 player 2 table 1 amount 50 type Even parent 2 round 1',
            'place bet 4 player 2 table 1 amount 50 type Even parent 1 round 1',
        )
        state = casino.state
        assert [b.bet_id for b in HierarchyValidator.bet_ancestors(state, 3)] == [2, 1]
        assert HierarchyValidator.bet_ancestors(state, 1) == []
        assert [b.bet_id for b in state.child_bets(1)] == [2, 4]
        assert [b.bet_id for b in state.root_bets()] == [1]
