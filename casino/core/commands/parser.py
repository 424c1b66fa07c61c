"""
Command Parser - 命令解析器

将一行DSL文本解析为类型化的命令对象。解析器只检查语法结构，
不检查引用的ID是否存在（那是层级校验器的职责）。

语法要点：
- 关键字区分大小写
- 可选子句（parent / round / dealer / status）必须按语法规定的顺序出现
- 整数位置只接受整数字面量，金额位置接受十进制小数
"""

import re
from decimal import Decimal
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from ..enums import GameType, BetType, RoundStatus, LimitType, ShowTarget
from ..exceptions import ParseError, ParseErrorKind
from .tokenizer import Token, tokenize
from .types import (
    Command,
    AddPlayerCommand, AddGameCommand, AddTableCommand, PlaceBetCommand,
    AddRoundCommand, BetOutcome, ResolveBetCommand, AddDealerCommand,
    DepositCommand, WithdrawCommand, SetLimitCommand, FindPlayerByNameCommand,
    FindPlayerByIdCommand, ShowCommand, RemovePlayerCommand, DumpExamplesCommand,
)

__all__ = ['CommandParser', 'parse_command', 'parse_script', 'is_blank_or_comment']

_INT_RE = re.compile(r'[-+]?\d+')
_DECIMAL_RE = re.compile(r'[-+]?(?:\d+(?:\.\d*)?|\.\d+)')

_STRING_HINT = '"<string>"'
_INT_HINT = '<int>'
_DECIMAL_HINT = '<double>'


class _TokenCursor:
    """词元游标，负责逐个消费词元并生成带位置的解析错误"""

    def __init__(self, tokens: List[Token], line: str, keywords: Sequence[str] = ()):
        self._tokens = tokens
        self._index = 0
        self._line = line
        # 当前产生式中出现的全部子句关键字，用于识别顺序错误
        self.keywords = tuple(keywords)

    def peek(self) -> Optional[Token]:
        if self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    def advance(self) -> Token:
        token = self._tokens[self._index]
        self._index += 1
        return token

    def has_more(self) -> bool:
        return self._index < len(self._tokens)

    def _end_position(self) -> int:
        return len(self._line.rstrip())

    def _take(self, field_name: str, expected: Sequence[str]) -> Token:
        token = self.peek()
        if token is None:
            raise ParseError(
                ParseErrorKind.MISSING_FIELD,
                f"缺少字段 {field_name}",
                position=self._end_position(),
                expected=expected
            )
        return self.advance()

    def _unexpected(self, token: Token, expected: Sequence[str]) -> ParseError:
        if not token.quoted and token.text in self.keywords:
            return ParseError(
                ParseErrorKind.OUT_OF_ORDER_CLAUSE,
                f"子句 '{token.text}' 出现的位置不正确",
                token=token.display(),
                position=token.position,
                expected=expected
            )
        return ParseError(
            ParseErrorKind.UNEXPECTED_TOKEN,
            f"无法识别的词元 '{token.display()}'",
            token=token.display(),
            position=token.position,
            expected=expected
        )

    def expect_keyword(self, keyword: str) -> None:
        token = self._take(keyword, (keyword,))
        if token.quoted or token.text != keyword:
            raise self._unexpected(token, (keyword,))

    def expect_int(self, field_name: str) -> int:
        token = self._take(field_name, (_INT_HINT,))
        if token.quoted or not _INT_RE.fullmatch(token.text):
            raise ParseError(
                ParseErrorKind.TYPE_MISMATCH,
                f"字段 {field_name} 需要整数，实际为 '{token.display()}'",
                token=token.display(),
                position=token.position,
                expected=(_INT_HINT,)
            )
        try:
            return int(token.text)
        except ValueError:
            # 超过解释器整数字符串位数上限
            raise ParseError(
                ParseErrorKind.TYPE_MISMATCH,
                f"字段 {field_name} 的整数位数过多（{len(token.text)} 位）",
                token=token.display(),
                position=token.position,
                expected=(_INT_HINT,)
            ) from None

    def expect_decimal(self, field_name: str) -> Decimal:
        token = self._take(field_name, (_DECIMAL_HINT,))
        if token.quoted or not _DECIMAL_RE.fullmatch(token.text):
            raise ParseError(
                ParseErrorKind.TYPE_MISMATCH,
                f"字段 {field_name} 需要数字，实际为 '{token.display()}'",
                token=token.display(),
                position=token.position,
                expected=(_DECIMAL_HINT,)
            )
        return Decimal(token.text)

    def expect_string(self, field_name: str) -> str:
        token = self._take(field_name, (_STRING_HINT,))
        if not token.quoted:
            raise ParseError(
                ParseErrorKind.TYPE_MISMATCH,
                f"字段 {field_name} 需要双引号字符串，实际为 '{token.text}'",
                token=token.text,
                position=token.position,
                expected=(_STRING_HINT,)
            )
        return token.text

    def expect_choice(self, field_name: str, choices: Sequence[str]) -> str:
        token = self._take(field_name, choices)
        if token.quoted or token.text not in choices:
            raise ParseError(
                ParseErrorKind.TYPE_MISMATCH,
                f"字段 {field_name} 的取值 '{token.display()}' 无效",
                token=token.display(),
                position=token.position,
                expected=choices
            )
        return token.text

    def expect_enum(self, field_name: str, enum_cls):
        return enum_cls.from_keyword(self.expect_choice(field_name, enum_cls.keywords()))

    def optional_clauses(self, clauses: Sequence[Tuple[str, Callable[['_TokenCursor'], object]]]) -> Dict[str, object]:
        """
        按固定顺序解析可选子句

        遇到排在已解析子句之前（或重复）的子句时抛出OUT_OF_ORDER_CLAUSE；
        遇到不属于可选子句的词元时停止，交由调用方继续解析。
        """
        order = [keyword for keyword, _ in clauses]
        values: Dict[str, object] = {}
        next_allowed = 0
        while self.has_more():
            token = self.peek()
            if token.quoted or token.text not in order:
                break
            index = order.index(token.text)
            if index < next_allowed:
                raise ParseError(
                    ParseErrorKind.OUT_OF_ORDER_CLAUSE,
                    f"子句 '{token.text}' 顺序错误或重复出现",
                    token=token.text,
                    position=token.position,
                    expected=tuple(order[next_allowed:])
                )
            self.advance()
            values[token.text] = clauses[index][1](self)
            next_allowed = index + 1
        return values

    def expect_end(self) -> None:
        token = self.peek()
        if token is not None:
            raise self._unexpected(token, ('<end of line>',))


_Handler = Callable[['CommandParser', _TokenCursor], Command]


class CommandParser:
    """
    命令解析器

    前导关键字序列（如 "add player"、"place bet"）通过分派表映射到
    各产生式的解析方法。
    """

    def __init__(self):
        self._productions: Dict[Tuple[str, Optional[str]], Tuple[_Handler, Tuple[str, ...]]] = {
            ('add', 'player'): (CommandParser._parse_add_player, ()),
            ('add', 'game'): (CommandParser._parse_add_game, ()),
            ('add', 'table'): (CommandParser._parse_add_table, ('dealer',)),
            ('add', 'round'): (CommandParser._parse_add_round, ('table', 'parent', 'status')),
            ('add', 'dealer'): (CommandParser._parse_add_dealer, ('table',)),
            ('place', 'bet'): (CommandParser._parse_place_bet,
                               ('player', 'table', 'amount', 'type', 'parent', 'round')),
            ('resolve', 'bet'): (CommandParser._parse_resolve_bet, ()),
            ('deposit', 'player'): (CommandParser._parse_deposit, ('amount',)),
            ('withdraw', 'player'): (CommandParser._parse_withdraw, ('amount',)),
            ('set', 'limit'): (CommandParser._parse_set_limit, ('player',)),
            ('find', 'player'): (CommandParser._parse_find_player, ('name', 'id')),
            ('show', None): (CommandParser._parse_show, ()),
            ('remove', 'player'): (CommandParser._parse_remove_player, ()),
            ('dump', 'examples'): (CommandParser._parse_dump_examples, ()),
        }

    @property
    def leading_keywords(self) -> Tuple[str, ...]:
        seen: List[str] = []
        for first, _ in self._productions:
            if first not in seen:
                seen.append(first)
        return tuple(seen)

    def parse(self, line: str) -> Command:
        """
        解析一行命令

        Args:
            line: 命令文本

        Returns:
            类型化的命令对象

        Raises:
            ParseError: 语法错误
        """
        tokens = tokenize(line)
        if not tokens:
            raise ParseError(
                ParseErrorKind.UNKNOWN_COMMAND,
                "空命令",
                position=0,
                expected=self.leading_keywords
            )

        first = tokens[0]
        if first.quoted or first.text not in self.leading_keywords:
            raise ParseError(
                ParseErrorKind.UNKNOWN_COMMAND,
                f"未知命令 '{first.display()}'",
                token=first.display(),
                position=first.position,
                expected=self.leading_keywords
            )

        if (first.text, None) in self._productions:
            handler, keywords = self._productions[(first.text, None)]
            cursor = _TokenCursor(tokens, line, keywords)
            cursor.advance()
            return handler(self, cursor)

        seconds = tuple(second for lead, second in self._productions if lead == first.text)
        second = tokens[1] if len(tokens) > 1 else None
        if second is None or second.quoted or (first.text, second.text) not in self._productions:
            raise ParseError(
                ParseErrorKind.UNKNOWN_COMMAND,
                f"未知命令 '{first.text} {second.display() if second else ''}'".rstrip(),
                token=second.display() if second else None,
                position=second.position if second else len(line.rstrip()),
                expected=seconds
            )

        handler, keywords = self._productions[(first.text, second.text)]
        cursor = _TokenCursor(tokens, line, keywords)
        cursor.advance()
        cursor.advance()
        return handler(self, cursor)

    # ---- 各产生式 ----

    def _parse_add_player(self, cursor: _TokenCursor) -> Command:
        player_id = cursor.expect_int('player_id')
        name = cursor.expect_string('name')
        balance = cursor.expect_decimal('balance')
        cursor.expect_end()
        return AddPlayerCommand(player_id=player_id, name=name, balance=balance)

    def _parse_add_game(self, cursor: _TokenCursor) -> Command:
        game_id = cursor.expect_int('game_id')
        name = cursor.expect_string('name')
        game_type = cursor.expect_enum('game_type', GameType)
        cursor.expect_end()
        return AddGameCommand(game_id=game_id, name=name, game_type=game_type)

    def _parse_add_table(self, cursor: _TokenCursor) -> Command:
        table_id = cursor.expect_int('table_id')
        name = cursor.expect_string('name')
        game_id = cursor.expect_int('game_id')
        min_bet = cursor.expect_decimal('min_bet')
        max_bet = cursor.expect_decimal('max_bet')
        clauses = cursor.optional_clauses([
            ('dealer', lambda c: c.expect_int('dealer_id')),
        ])
        cursor.expect_end()
        return AddTableCommand(
            table_id=table_id, name=name, game_id=game_id,
            min_bet=min_bet, max_bet=max_bet, dealer_id=clauses.get('dealer')
        )

    def _parse_place_bet(self, cursor: _TokenCursor) -> Command:
        bet_id = cursor.expect_int('bet_id')
        cursor.expect_keyword('player')
        player_id = cursor.expect_int('player_id')
        cursor.expect_keyword('table')
        table_id = cursor.expect_int('table_id')
        cursor.expect_keyword('amount')
        amount = cursor.expect_decimal('amount')
        cursor.expect_keyword('type')
        bet_type = cursor.expect_enum('bet_type', BetType)
        clauses = cursor.optional_clauses([
            ('parent', lambda c: c.expect_int('parent_bet_id')),
        ])
        cursor.expect_keyword('round')
        round_id = cursor.expect_int('round_id')
        cursor.expect_end()
        return PlaceBetCommand(
            bet_id=bet_id, player_id=player_id, table_id=table_id, amount=amount,
            bet_type=bet_type, round_id=round_id, parent_bet_id=clauses.get('parent')
        )

    def _parse_add_round(self, cursor: _TokenCursor) -> Command:
        round_id = cursor.expect_int('round_id')
        cursor.expect_keyword('table')
        table_id = cursor.expect_int('table_id')
        clauses = cursor.optional_clauses([
            ('parent', lambda c: c.expect_int('parent_round_id')),
            ('status', lambda c: c.expect_enum('round_status', RoundStatus)),
        ])
        cursor.expect_end()
        return AddRoundCommand(
            round_id=round_id, table_id=table_id,
            parent_round_id=clauses.get('parent'), status=clauses.get('status')
        )

    def _parse_resolve_bet(self, cursor: _TokenCursor) -> Command:
        bet_id = cursor.expect_int('bet_id')
        kind = cursor.expect_choice('outcome', (BetOutcome.WIN, BetOutcome.LOSE, BetOutcome.PUSH))
        if kind == BetOutcome.WIN:
            outcome = BetOutcome.win(cursor.expect_decimal('amount'))
        elif kind == BetOutcome.LOSE:
            outcome = BetOutcome.lose()
        else:
            outcome = BetOutcome.push()
        cursor.expect_end()
        return ResolveBetCommand(bet_id=bet_id, outcome=outcome)

    def _parse_add_dealer(self, cursor: _TokenCursor) -> Command:
        dealer_id = cursor.expect_int('dealer_id')
        name = cursor.expect_string('name')
        cursor.expect_keyword('table')
        table_id = cursor.expect_int('table_id')
        cursor.expect_end()
        return AddDealerCommand(dealer_id=dealer_id, name=name, table_id=table_id)

    def _parse_deposit(self, cursor: _TokenCursor) -> Command:
        player_id = cursor.expect_int('player_id')
        cursor.expect_keyword('amount')
        amount = cursor.expect_decimal('amount')
        cursor.expect_end()
        return DepositCommand(player_id=player_id, amount=amount)

    def _parse_withdraw(self, cursor: _TokenCursor) -> Command:
        player_id = cursor.expect_int('player_id')
        cursor.expect_keyword('amount')
        amount = cursor.expect_decimal('amount')
        cursor.expect_end()
        return WithdrawCommand(player_id=player_id, amount=amount)

    def _parse_set_limit(self, cursor: _TokenCursor) -> Command:
        cursor.expect_keyword('player')
        player_id = cursor.expect_int('player_id')
        limit_type = cursor.expect_enum('limit_type', LimitType)
        amount = cursor.expect_decimal('amount')
        cursor.expect_end()
        return SetLimitCommand(player_id=player_id, limit_type=limit_type, amount=amount)

    def _parse_find_player(self, cursor: _TokenCursor) -> Command:
        selector = cursor.expect_choice('selector', ('name', 'id'))
        if selector == 'name':
            command: Command = FindPlayerByNameCommand(name=cursor.expect_string('name'))
        else:
            command = FindPlayerByIdCommand(player_id=cursor.expect_int('player_id'))
        cursor.expect_end()
        return command

    def _parse_show(self, cursor: _TokenCursor) -> Command:
        target = cursor.expect_enum('target', ShowTarget)
        cursor.expect_end()
        return ShowCommand(target=target)

    def _parse_remove_player(self, cursor: _TokenCursor) -> Command:
        player_id = cursor.expect_int('player_id')
        cursor.expect_end()
        return RemovePlayerCommand(player_id=player_id)

    def _parse_dump_examples(self, cursor: _TokenCursor) -> Command:
        cursor.expect_end()
        return DumpExamplesCommand()


_default_parser = CommandParser()


def parse_command(line: str) -> Command:
    """使用默认解析器解析一行命令"""
    return _default_parser.parse(line)


def is_blank_or_comment(line: str) -> bool:
    """空行和以#开头的注释行不是命令"""
    stripped = line.strip()
    return not stripped or stripped.startswith('#')


def parse_script(text: str) -> Iterator[Tuple[int, Command]]:
    """
    逐行解析脚本，跳过空行和注释行

    Yields:
        (行号, 命令)，行号从1开始

    Raises:
        ParseError: 遇到第一条语法错误的命令时抛出
    """
    for line_number, line in enumerate(text.splitlines(), start=1):
        if is_blank_or_comment(line):
            continue
        yield line_number, parse_command(line)
