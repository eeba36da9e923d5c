import re
import enum

from .exceptions import CapacityExceeded

DEFAULT_LINE_ENDING = "\n"
LINE_COMMENT = "//"
BLOCK_COMMENT_START = "/*"
BLOCK_COMMENT_END = "*/"
QUOTES = ("\"", "'")

IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class TokenType(enum.Enum):
    IDENTIFIER = enum.auto()
    NUMBER = enum.auto()
    STRING = enum.auto()
    WHITESPACE = enum.auto()
    SYMBOL = enum.auto()


class Token:
    __slots__ = ["line_no", "value", "type", "whitespace"]

    def __init__(self, line_no, value, type_, whitespace):
        self.line_no = line_no
        self.value = value
        self.type = type_
        self.whitespace = whitespace

    @classmethod
    def from_string(cls, line_no, value, type_):
        text = value if value is not None else ""
        return cls(line_no, text, type_, not text.strip())

    def __repr__(self):
        return (
            f"Line {self.line_no}, {self.type.name}, value {self.value!r}"
        )  # pragma: no cover


def is_identifier(value):
    return bool(value) and IDENTIFIER_RE.fullmatch(value) is not None


class Tokenizer:
    """Splits one logical line into tokens for macro expansion."""

    def __init__(self, line_no=None):
        self.line_no = line_no
        self._scanner = re.Scanner([
            (r'"(?:[^"\\]|\\.)*"', self._make_cb(TokenType.STRING)),
            (r"'(?:[^'\\]|\\.)*'", self._make_cb(TokenType.STRING)),
            (r"[A-Za-z_][A-Za-z0-9_]*", self._make_cb(TokenType.IDENTIFIER)),
            (r"\.?\d(?:[eEpP][+-]|[\w.])*", self._make_cb(TokenType.NUMBER)),
            (r"[ \t\f\v]+", self._make_cb(TokenType.WHITESPACE)),
            (r".", self._make_cb(TokenType.SYMBOL)),
        ])

    def _make_cb(self, type_):
        def _cb(s, t):
            return Token.from_string(self.line_no, t, type_)
        return _cb

    def tokenize(self, line, line_no=None):
        if line_no is not None:
            self.line_no = line_no
        tokens, remainder = self._scanner.scan(line)
        if remainder:
            raise SyntaxError(
                f"Unrecognized input: {remainder!r}"
            )  # pragma: no cover
        return tokens


def scan_lines(source, max_line_length=None, filename=None):
    """
    Yield ``(line_no, text)`` for every line of ``source``.

    Line numbers start at 1, CRLF endings are normalized and a trailing
    newline does not produce an extra empty line.
    """
    if not source:
        return
    lines = source.split(DEFAULT_LINE_ENDING)
    if lines[-1] == "":
        lines.pop()
    for line_no, line in enumerate(lines, 1):
        if line.endswith("\r"):
            line = line[:-1]
        if max_line_length is not None and len(line) > max_line_length:
            raise CapacityExceeded("Line too long", line_no, filename)
        yield line_no, line


def strip_comments(line):
    """
    Remove ``//`` and ``/* */`` comments from a single line.

    Quotes open a literal that only the same quote character closes, and
    comment markers inside a literal are kept. A block comment that is
    not closed on this line truncates the rest of the line.
    """
    pieces = []
    quote = None
    start = 0
    pos = 0
    length = len(line)
    while pos < length:
        char = line[pos]
        if quote is not None:
            if char == quote and line[pos - 1] != "\\":
                quote = None
        elif char in QUOTES:
            quote = char
        elif line.startswith(LINE_COMMENT, pos):
            length = pos
            break
        elif line.startswith(BLOCK_COMMENT_START, pos):
            end = line.find(BLOCK_COMMENT_END, pos + 2)
            if end == -1:
                length = pos
                break
            pieces.append(line[start:pos])
            start = pos = end + len(BLOCK_COMMENT_END)
            continue
        pos += 1
    pieces.append(line[start:length])
    return "".join(pieces)
