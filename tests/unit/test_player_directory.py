"""
玩家目录单元测试
"""

from decimal import Decimal

import pytest

from casino.core import (
    Player, PlayerDirectory, CasinoError, DuplicateIdError, InvariantError, NotFoundError
)


def _player(player_id: int, name: str = None, balance: str = "100") -> Player:
    return Player(player_id=player_id, name=name or f"Player {player_id}", balance=Decimal(balance))


@pytest.fixture
def directory() -> PlayerDirectory:
    players = [
        _player(50, "John Smith"),
        _player(20, "Jane Smith"),
        _player(70, "John Doe"),
        _player(10, "jOHN sMITH"),
        _player(30, "Alice"),
    ]
    return PlayerDirectory(players)


@pytest.mark.unit
class TestPlayerDirectoryInsert:
    """插入测试"""

    def test_in_order_traversal_is_sorted(self, directory):
        assert directory.ids() == [10, 20, 30, 50, 70]
        assert len(directory) == 5

    def test_duplicate_id_rejected_without_mutation(self, directory):
        before = list(directory)
        with pytest.raises(DuplicateIdError):
            directory.insert(_player(30, "Impostor"))
        assert list(directory) == before
        assert directory.find_by_id(30).name == "Alice"

    def test_sequential_inserts_stay_balanced(self):
        directory = PlayerDirectory()
        for player_id in range(1, 1025):
            directory.insert(_player(player_id))
        # 1024个节点的AVL树高度不超过 1.44 * log2(1025)
        assert directory.height() <= 14
        directory.check_invariants()

    def test_contains(self, directory):
        assert 20 in directory
        assert 21 not in directory


@pytest.mark.unit
class TestPlayerDirectoryRemove:
    """删除测试"""

    def test_remove_leaf(self, directory):
        removed = directory.remove(10)
        assert removed.player_id == 10
        assert directory.ids() == [20, 30, 50, 70]
        directory.check_invariants()

    def test_remove_node_with_two_children(self, directory):
        directory.remove(20)
        assert directory.ids() == [10, 30, 50, 70]
        directory.check_invariants()

    def test_remove_root_repeatedly(self, directory):
        for expected_size in range(4, -1, -1):
            root_id = directory.ids()[len(directory) // 2]
            directory.remove(root_id)
            assert len(directory) == expected_size
            directory.check_invariants()
        assert directory.ids() == []
        assert directory.height() == 0

    def test_remove_missing_raises_not_found(self, directory):
        with pytest.raises(NotFoundError):
            directory.remove(99)
        assert len(directory) == 5

    def test_find_after_remove(self, directory):
        directory.remove(50)
        with pytest.raises(NotFoundError):
            directory.find_by_id(50)


@pytest.mark.unit
class TestPlayerDirectoryLookup:
    """查找测试"""

    def test_find_by_id(self, directory):
        assert directory.find_by_id(70).name == "John Doe"

    def test_find_by_name_is_exact_and_case_sensitive(self, directory):
        matches = directory.find_by_name("John Smith")
        assert [p.player_id for p in matches] == [50]
        assert directory.find_by_name("john smith") == []
        assert directory.find_by_name("Smith") == []

    def test_find_by_name_partial_is_case_insensitive(self, directory):
        matches = directory.find_by_name_partial("SMITH")
        assert [p.player_id for p in matches] == [10, 20, 50]

    def test_find_by_name_partial_no_match(self, directory):
        assert directory.find_by_name_partial("zzz") == []

    def test_empty_substring_matches_everyone(self, directory):
        assert len(directory.find_by_name_partial("")) == 5


@pytest.mark.unit
class TestPlayerDirectoryCopy:
    """复制、替换和相等性"""

    def test_copy_is_independent(self, directory):
        clone = directory.copy()
        clone.remove(10)
        clone.insert(_player(99))
        assert directory.ids() == [10, 20, 30, 50, 70]
        assert clone.ids() == [20, 30, 50, 70, 99]
        clone.check_invariants()

    def test_replace_updates_player(self, directory):
        directory.replace(_player(30, "Alice", "555"))
        assert directory.find_by_id(30).balance == Decimal("555")

    def test_replace_missing_raises(self, directory):
        with pytest.raises(NotFoundError):
            directory.replace(_player(31))

    def test_equality_ignores_insertion_order(self):
        a = PlayerDirectory([_player(1), _player(2), _player(3)])
        b = PlayerDirectory([_player(3), _player(1), _player(2)])
        assert a == b
        b.replace(_player(2, balance="1"))
        assert a != b


@pytest.mark.unit
class TestPlayerDirectoryInvariants:
    """结构校验"""

    def test_valid_tree_passes(self, directory):
        directory.check_invariants()

    def test_corrupted_height_is_reported(self, directory):
        directory._root.height = 99
        with pytest.raises(InvariantError) as exc_info:
            directory.check_invariants()
        assert "高度记录错误" in str(exc_info.value)
        assert len(exc_info.value.violations) == 1

    def test_unordered_keys_are_reported(self, directory):
        directory._root.left.player = _player(99)
        with pytest.raises(InvariantError) as exc_info:
            directory.check_invariants()
        assert any("左界" in v or "右界" in v for v in exc_info.value.violations)

    def test_invariant_error_is_not_a_casino_error(self):
        assert not issubclass(InvariantError, CasinoError)
