"""
Property-based Tests for PlayerDirectory - 玩家目录属性测试

任意插入/删除序列之后，玩家目录与字典模型保持一致，且始终满足AVL不变量。
"""

from decimal import Decimal
from typing import List, Tuple

import pytest
from hypothesis import given, settings, strategies as st

from casino.core import DuplicateIdError, NotFoundError, Player, PlayerDirectory

operation_strategy = st.tuples(st.booleans(), st.integers(min_value=0, max_value=60))


def _player(player_id: int) -> Player:
    return Player(player_id=player_id, name=f"P{player_id}", balance=Decimal(player_id))


@pytest.mark.property_test
@settings(deadline=None)
@given(st.lists(operation_strategy, max_size=120))
def test_directory_matches_dict_model(operations: List[Tuple[bool, int]]):
    """Property test: 目录的内容、顺序和错误行为与字典模型一致"""
    directory = PlayerDirectory()
    model = {}

    for is_insert, player_id in operations:
        if is_insert:
            if player_id in model:
                with pytest.raises(DuplicateIdError):
                    directory.insert(_player(player_id))
            else:
                directory.insert(_player(player_id))
                model[player_id] = _player(player_id)
        else:
            if player_id in model:
                assert directory.remove(player_id) == model.pop(player_id)
            else:
                with pytest.raises(NotFoundError):
                    directory.remove(player_id)

        directory.check_invariants()

    assert directory.ids() == sorted(model)
    assert list(directory) == [model[key] for key in sorted(model)]
    assert len(directory) == len(model)


@pytest.mark.property_test
@given(st.sets(st.integers(min_value=-1000, max_value=1000), max_size=200))
def test_height_is_logarithmic(player_ids):
    """Property test: 树高满足AVL上界 1.44 * log2(n + 2)"""
    directory = PlayerDirectory([_player(player_id) for player_id in player_ids])
    size = len(player_ids)
    bound = 1
    while (1 << bound) < size + 2:
        bound += 1
    assert directory.height() <= int(1.45 * bound) + 1


@pytest.mark.property_test
@given(st.sets(st.integers(min_value=0, max_value=100), min_size=1, max_size=50), st.data())
def test_copy_is_unaffected_by_mutation(player_ids, data):
    """Property test: 修改副本不影响原目录"""
    directory = PlayerDirectory([_player(player_id) for player_id in player_ids])
    clone = directory.copy()
    victim = data.draw(st.sampled_from(sorted(player_ids)))
    clone.remove(victim)

    assert victim in directory
    assert directory.ids() == sorted(player_ids)
    assert clone != directory
