"""
玩家目录

按玩家ID排序的AVL树。每个节点持有左右两个子节点槽位，节点只被其父节点
拥有，删除时两子节点情况用中序后继替换。树高保持O(log n)。
"""

from typing import Iterator, List, Optional, Tuple

from ..exceptions import DuplicateIdError, NotFoundError, InvariantError
from ..models import Player

__all__ = ['PlayerDirectory']


class _Node:
    """AVL树节点"""

    __slots__ = ('player', 'left', 'right', 'height')

    def __init__(self, player: Player):
        self.player = player
        self.left: Optional['_Node'] = None
        self.right: Optional['_Node'] = None
        self.height = 1

    @property
    def key(self) -> int:
        return self.player.player_id


def _height(node: Optional[_Node]) -> int:
    return node.height if node is not None else 0


def _update(node: _Node) -> None:
    node.height = 1 + max(_height(node.left), _height(node.right))


def _balance_factor(node: _Node) -> int:
    return _height(node.left) - _height(node.right)


def _rotate_right(node: _Node) -> _Node:
    pivot = node.left
    node.left = pivot.right
    pivot.right = node
    _update(node)
    _update(pivot)
    return pivot


def _rotate_left(node: _Node) -> _Node:
    pivot = node.right
    node.right = pivot.left
    pivot.left = node
    _update(node)
    _update(pivot)
    return pivot


def _rebalance(node: _Node) -> _Node:
    _update(node)
    balance = _balance_factor(node)
    if balance > 1:
        if _balance_factor(node.left) < 0:
            node.left = _rotate_left(node.left)
        return _rotate_right(node)
    if balance < -1:
        if _balance_factor(node.right) > 0:
            node.right = _rotate_right(node.right)
        return _rotate_left(node)
    return node


def _insert(node: Optional[_Node], player: Player) -> _Node:
    if node is None:
        return _Node(player)
    if player.player_id < node.key:
        node.left = _insert(node.left, player)
    else:
        node.right = _insert(node.right, player)
    return _rebalance(node)


def _remove_min(node: _Node) -> Tuple[Optional[_Node], _Node]:
    """摘下子树中的最小节点，返回(新子树根, 被摘下的节点)"""
    if node.left is None:
        return node.right, node
    node.left, minimum = _remove_min(node.left)
    return _rebalance(node), minimum


def _remove(node: Optional[_Node], player_id: int) -> Optional[_Node]:
    if node is None:
        return None
    if player_id < node.key:
        node.left = _remove(node.left, player_id)
    elif player_id > node.key:
        node.right = _remove(node.right, player_id)
    else:
        if node.left is None:
            return node.right
        if node.right is None:
            return node.left
        # 两个子节点：用中序后继顶替当前节点
        right, successor = _remove_min(node.right)
        successor.left = node.left
        successor.right = right
        node = successor
    return _rebalance(node)


def _copy(node: Optional[_Node]) -> Optional[_Node]:
    if node is None:
        return None
    clone = _Node(node.player)
    clone.left = _copy(node.left)
    clone.right = _copy(node.right)
    clone.height = node.height
    return clone


class PlayerDirectory:
    """
    玩家目录

    以玩家ID为键的有序查找结构，支持插入、删除、按ID精确查找、
    按名称精确查找以及不区分大小写的名称部分匹配。
    所有操作要么成功，要么在不修改目录的情况下抛出异常。
    """

    def __init__(self, players: Optional[List[Player]] = None):
        self._root: Optional[_Node] = None
        self._size = 0
        for player in players or []:
            self.insert(player)

    def __len__(self) -> int:
        return self._size

    def __contains__(self, player_id: int) -> bool:
        return self._find_node(player_id) is not None

    def __iter__(self) -> Iterator[Player]:
        """按ID升序（中序）遍历"""
        stack: List[_Node] = []
        node = self._root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node.player
            node = node.right

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlayerDirectory):
            return NotImplemented
        return len(self) == len(other) and list(self) == list(other)

    def __repr__(self) -> str:
        return f"PlayerDirectory(size={self._size}, height={self.height()})"

    def height(self) -> int:
        """树高，空目录为0"""
        return _height(self._root)

    def ids(self) -> List[int]:
        return [player.player_id for player in self]

    def _find_node(self, player_id: int) -> Optional[_Node]:
        node = self._root
        while node is not None:
            if player_id < node.key:
                node = node.left
            elif player_id > node.key:
                node = node.right
            else:
                return node
        return None

    def insert(self, player: Player) -> None:
        """
        插入玩家

        Raises:
            DuplicateIdError: ID已存在
        """
        if player.player_id in self:
            raise DuplicateIdError(f"玩家ID {player.player_id} 已存在")
        self._root = _insert(self._root, player)
        self._size += 1

    def remove(self, player_id: int) -> Player:
        """
        删除玩家并返回被删除的玩家

        Raises:
            NotFoundError: ID不存在
        """
        node = self._find_node(player_id)
        if node is None:
            raise NotFoundError(f"玩家 {player_id} 不存在")
        removed = node.player
        self._root = _remove(self._root, player_id)
        self._size -= 1
        return removed

    def replace(self, player: Player) -> None:
        """
        用新值替换已存在的玩家（ID不变，树结构不变）

        Raises:
            NotFoundError: ID不存在
        """
        node = self._find_node(player.player_id)
        if node is None:
            raise NotFoundError(f"玩家 {player.player_id} 不存在")
        node.player = player

    def find_by_id(self, player_id: int) -> Player:
        """
        按ID查找玩家

        Raises:
            NotFoundError: ID不存在
        """
        node = self._find_node(player_id)
        if node is None:
            raise NotFoundError(f"玩家 {player_id} 不存在")
        return node.player

    def find_by_name(self, name: str) -> List[Player]:
        """按名称精确查找（区分大小写），结果按ID升序"""
        return [player for player in self if player.name == name]

    def find_by_name_partial(self, substring: str) -> List[Player]:
        """按名称部分匹配（不区分大小写），结果按ID升序"""
        needle = substring.casefold()
        return [player for player in self if needle in player.name.casefold()]

    def copy(self) -> 'PlayerDirectory':
        """结构复制；玩家对象本身不可变，可以共享"""
        clone = PlayerDirectory()
        clone._root = _copy(self._root)
        clone._size = self._size
        return clone

    def check_invariants(self) -> None:
        """
        校验BST有序性和AVL平衡性

        Raises:
            InvariantError: 结构被破坏，violations列出全部问题
        """
        violations: List[str] = []

        def walk(node: Optional[_Node], low: Optional[int], high: Optional[int]) -> int:
            if node is None:
                return 0
            if low is not None and node.key <= low:
                violations.append(f"节点 {node.key} 违反左界 {low}")
            if high is not None and node.key >= high:
                violations.append(f"节点 {node.key} 违反右界 {high}")
            left = walk(node.left, low, node.key)
            right = walk(node.right, node.key, high)
            if abs(left - right) > 1:
                violations.append(f"节点 {node.key} 失衡: {left} vs {right}")
            if node.height != 1 + max(left, right):
                violations.append(f"节点 {node.key} 高度记录错误")
            return 1 + max(left, right)

        walk(self._root, None, None)
        count = sum(1 for _ in self)
        if count != self._size:
            violations.append(f"节点数 {count} 与记录 {self._size} 不一致")
        if violations:
            raise InvariantError(f"玩家目录结构被破坏: {violations[0]}", violations)
