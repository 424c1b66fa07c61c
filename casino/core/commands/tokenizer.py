"""
命令行词法分析

按空白切分词元；双引号字符串可以包含空格，支持 \\" 和 \\\\ 转义。
"""

from dataclasses import dataclass
from typing import List

from ..exceptions import ParseError, ParseErrorKind

__all__ = ['Token', 'tokenize']

_ESCAPES = {'"': '"', '\\': '\\'}


@dataclass(frozen=True)
class Token:
    """
    词元

    Attributes:
        text: 词元文本（引号字符串为去掉引号和转义后的内容）
        position: 词元在行内的起始列
        quoted: 是否为双引号字符串
    """
    text: str
    position: int
    quoted: bool = False

    def display(self) -> str:
        """用于错误信息的原样显示"""
        return f'"{self.text}"' if self.quoted else self.text


def tokenize(line: str) -> List[Token]:
    """
    将一行命令切分为词元

    Args:
        line: 命令文本

    Returns:
        词元列表

    Raises:
        ParseError: 字符串未闭合或包含不支持的转义
    """
    tokens: List[Token] = []
    pos = 0
    length = len(line)

    while pos < length:
        char = line[pos]
        if char.isspace():
            pos += 1
            continue

        if char == '"':
            start = pos
            pos += 1
            chars: List[str] = []
            closed = False
            while pos < length:
                char = line[pos]
                if char == '\\' and pos + 1 < length and line[pos + 1] in _ESCAPES:
                    chars.append(_ESCAPES[line[pos + 1]])
                    pos += 2
                    continue
                if char == '"':
                    closed = True
                    pos += 1
                    break
                chars.append(char)
                pos += 1
            if not closed:
                raise ParseError(
                    ParseErrorKind.UNTERMINATED_STRING,
                    "字符串缺少结束引号",
                    token=line[start:],
                    position=start,
                    expected=('"',)
                )
            tokens.append(Token(text=''.join(chars), position=start, quoted=True))
            continue

        start = pos
        while pos < length and not line[pos].isspace() and line[pos] != '"':
            pos += 1
        tokens.append(Token(text=line[start:pos], position=start))

    return tokens
