"""Parser for the feedburst config language.

A config file is a list of feed blocks. Each block names a feed, gives its
URL in angle brackets, and picks a batching policy after an ``@``::

    # comics
    "Questionable Content" <https://questionablecontent.net/QCRSS.xml> @ immediately

    "Dumbing of Age"
    <https://www.dumbingofage.com/feed/>
    @ wait 5 comics

    "Gunnerkrigg Court" <https://www.gunnerkrigg.com/rss.xml> @ every 2 weeks

Blank lines end a block, lines starting with ``#`` are skipped, and keywords
are case-insensitive. Parsing is all-or-nothing: the first problem raises a
ParseError pointing at the offending token.
"""

import string
from dataclasses import dataclass
from datetime import timedelta

from feedburst.errors import ParseError
from feedburst.models import (
    BatchingPolicy,
    FeedSubscription,
    Immediate,
    Interval,
    MinimumCount,
)

COMMENT_MARKER = "#"

COUNT_UNITS = frozenset(
    {"comic", "comics", "item", "items", "post", "posts", "update", "updates"}
)
TIME_UNITS = {"day": 1, "days": 1, "week": 7, "weeks": 7}

POLICY_KEYWORDS = "'immediately', 'wait' or 'every'"

# Token kinds
STRING = "string"
URL = "url"
AT = "at"
NUMBER = "number"
WORD = "word"
BLANK = "blank"
EOF = "eof"


@dataclass(frozen=True)
class Token:
    """A lexical token with its 1-based position in the source."""

    kind: str
    value: str
    line: int
    column: int
    length: int = 1


def parse_config(text: str) -> list[FeedSubscription]:
    """Parse config text into subscriptions, in declaration order.

    Args:
        text: The full contents of the config file.

    Returns:
        One FeedSubscription per feed block.

    Raises:
        ParseError: If the text is malformed anywhere.
    """
    return _Parser(tokenize(text)).parse()


def tokenize(text: str) -> list[Token]:
    """Split config text into tokens, ending with an EOF token.

    Comment lines produce nothing. A run of blank lines produces a single
    BLANK token marking the end of a block.
    """
    tokens: list[Token] = []
    lines = text.split("\n")
    for lineno, line in enumerate(lines, start=1):
        stripped = line.strip()
        if not stripped:
            if tokens and tokens[-1].kind != BLANK:
                tokens.append(Token(BLANK, "", lineno, 1, 0))
            continue
        if stripped.startswith(COMMENT_MARKER):
            continue
        tokens.extend(_tokenize_line(line, lineno))
    tokens.append(Token(EOF, "", len(lines), len(lines[-1]) + 1, 0))
    return tokens


def _tokenize_line(line: str, lineno: int) -> list[Token]:
    tokens = []
    pos = 0
    while pos < len(line):
        char = line[pos]
        if char.isspace():
            pos += 1
            continue
        start = pos
        if char == '"':
            value, pos = _read_string(line, pos, lineno)
            kind = STRING
        elif char == "<":
            value, pos = _read_url(line, pos, lineno)
            kind = URL
        elif char == "@":
            value, pos = char, pos + 1
            kind = AT
        elif char in string.digits:
            while pos < len(line) and line[pos] in string.digits:
                pos += 1
            value, kind = line[start:pos], NUMBER
        elif char.isalpha():
            while pos < len(line) and line[pos].isalpha():
                pos += 1
            value, kind = line[start:pos], WORD
        else:
            raise ParseError(
                lineno,
                start + 1,
                "a quoted name, a <URL>, '@', a number or a keyword",
                repr(char),
            )
        tokens.append(Token(kind, value, lineno, start + 1, pos - start))
    return tokens


def _read_string(line: str, pos: int, lineno: int) -> tuple[str, int]:
    """Read a double-quoted string starting at ``pos``. Returns (value, end)."""
    chars = []
    i = pos + 1
    while i < len(line):
        char = line[i]
        if char == '"':
            value = "".join(chars)
            if not value.strip():
                raise ParseError(
                    lineno, pos + 1, "a non-empty feed name", '""', i + 1 - pos
                )
            return value, i + 1
        if char == "\\":
            if i + 1 >= len(line) or line[i + 1] not in '"\\':
                raise ParseError(
                    lineno, i + 1, "'\"' or '\\' after a backslash", repr(line[i : i + 2])
                )
            chars.append(line[i + 1])
            i += 2
            continue
        chars.append(char)
        i += 1
    raise ParseError(
        lineno, pos + 1, "a closing '\"' for the feed name", "end of line", len(line) - pos
    )


def _read_url(line: str, pos: int, lineno: int) -> tuple[str, int]:
    """Read an angle-bracketed URL starting at ``pos``. Returns (value, end)."""
    end = line.find(">", pos + 1)
    if end == -1:
        raise ParseError(
            lineno, pos + 1, "a closing '>' for the URL", "end of line", len(line) - pos
        )
    value = line[pos + 1 : end]
    if not value:
        raise ParseError(lineno, pos + 1, "a non-empty URL", "<>", 2)
    for offset, char in enumerate(value):
        if char.isspace():
            raise ParseError(
                lineno, pos + 2 + offset, "a URL without whitespace", repr(char)
            )
    return value, end + 1


class _Parser:
    """Recursive-descent parser over the token list."""

    def __init__(self, tokens: list[Token]):
        self._tokens = tokens
        self._pos = 0

    def parse(self) -> list[FeedSubscription]:
        subscriptions: list[FeedSubscription] = []
        declared: dict[str, int] = {}

        while True:
            while self._peek().kind == BLANK:
                self._pos += 1
            if self._peek().kind == EOF:
                return subscriptions

            name_token = self._peek()
            subscription = self._block()
            if subscription.name in declared:
                raise ParseError(
                    name_token.line,
                    name_token.column,
                    "a unique feed name (already declared on line "
                    f"{declared[subscription.name]})",
                    repr(subscription.name),
                    name_token.length,
                )
            declared[subscription.name] = name_token.line
            subscriptions.append(subscription)

            # A block ends at a blank line, at EOF, or where the next name starts.
            if self._peek().kind not in (BLANK, EOF, STRING):
                self._fail("the end of the feed block")

    def _block(self) -> FeedSubscription:
        name = self._expect(STRING, "a quoted feed name")
        url = self._expect(URL, "a feed URL in angle brackets")
        self._expect(AT, "a policy clause starting with '@'")
        policy = self._policy()
        return FeedSubscription(name=name.value, source_url=url.value, policy=policy)

    def _policy(self) -> BatchingPolicy:
        keyword = self._expect(WORD, f"a policy keyword ({POLICY_KEYWORDS})")
        verb = keyword.value.lower()

        if verb == "immediately":
            return Immediate()

        if verb not in ("wait", "every"):
            raise ParseError(
                keyword.line,
                keyword.column,
                f"a policy keyword ({POLICY_KEYWORDS})",
                repr(keyword.value),
                keyword.length,
            )

        number = self._expect(NUMBER, f"a number after '{keyword.value}'")
        try:
            amount = int(number.value)
        except ValueError:
            # Past the interpreter's limit on integer string conversion.
            raise ParseError(
                number.line,
                number.column,
                "a shorter number",
                f"a {number.length}-digit number",
                number.length,
            )
        if amount < 1:
            raise ParseError(
                number.line, number.column, "a positive number", number.value, number.length
            )

        if verb == "wait":
            expected_unit = "a unit (comics, items, posts, updates, days or weeks)"
        else:
            expected_unit = "a unit (days or weeks)"
        unit = self._expect(WORD, expected_unit)
        unit_name = unit.value.lower()

        if unit_name in TIME_UNITS:
            try:
                duration = timedelta(days=amount * TIME_UNITS[unit_name])
            except OverflowError:
                raise ParseError(
                    number.line, number.column, "a shorter interval", number.value, number.length
                )
            return Interval(duration)
        if verb == "wait" and unit_name in COUNT_UNITS:
            return MinimumCount(amount)
        raise ParseError(
            unit.line, unit.column, expected_unit, repr(unit.value), unit.length
        )

    def _peek(self) -> Token:
        return self._tokens[self._pos]

    def _expect(self, kind: str, expected: str) -> Token:
        token = self._peek()
        if token.kind != kind:
            self._fail(expected)
        self._pos += 1
        return token

    def _fail(self, expected: str):
        """Raise a ParseError for the current token."""
        token = self._peek()
        if token.kind in (BLANK, EOF) and self._pos > 0:
            # Point just past the last real token so the error lands on the
            # line of the incomplete block.
            previous = self._tokens[self._pos - 1]
            raise ParseError(
                previous.line,
                previous.column + previous.length,
                expected,
                _describe(token),
                0,
            )
        raise ParseError(
            token.line, token.column, expected, _describe(token), token.length
        )


def _describe(token: Token) -> str:
    """Human-readable description of a token for error messages."""
    if token.kind == STRING:
        return f"name {token.value!r}"
    if token.kind == URL:
        return f"URL <{token.value}>"
    if token.kind == AT:
        return "'@'"
    if token.kind == BLANK:
        return "end of block"
    if token.kind == EOF:
        return "end of input"
    return repr(token.value)
