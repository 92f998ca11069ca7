from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from .errors import EmptyRequestError, UnaryOperatorError, UnexpectedCharacterError

_LETTERS = "a-zA-Zа-яА-ЯёЁ"

_UNSUPPORTED_RE = re.compile(rf"[^{_LETTERS}0-9+\-\s]")
_DIGIT_GAP_RE = re.compile(r"(?<=[0-9])\s+(?=[0-9])")
_SPACE_RE = re.compile(r"\s+")
_WORD_RE = re.compile(rf"[{_LETTERS}]+")

DICE_MARKER = "d"
SEPARATOR = " "
OPERATORS = frozenset({"+", "-"})


class TokenType(Enum):
    DICE = "dice"
    NUMBER = "number"
    OPERATOR = "operator"


@dataclass(frozen=True)
class Token:
    kind: TokenType
    text: str

    def __repr__(self) -> str:
        return f"{self.kind.name.title()}({self.text!r})"


def normalize(request: str) -> str:
    """Reduce a recognized phrase to digits, `d`, `+` and `-`.

    Any run of letters, Latin or Cyrillic, becomes one dice marker, so
    "three d8" and "три д8" both end up as "d8". Whitespace between two
    digits survives as a single space so "3 8" is not read as 38.
    """
    text = _UNSUPPORTED_RE.sub("", request)
    text = _DIGIT_GAP_RE.sub("\0", text)
    text = _SPACE_RE.sub("", text).replace("\0", SEPARATOR)
    return _WORD_RE.sub(DICE_MARKER, text)


def _step(
    state: TokenType | None, acc: str, char: str, started: bool
) -> tuple[TokenType | None, str, Token | None]:
    """Advance the lexer by one character.

    Returns the new state, the new accumulator and the token closed by this
    character, if any.
    """
    closed = Token(state, acc) if state is not None else None

    if char in OPERATORS:
        if not started:
            raise UnaryOperatorError(
                f"Unary operator {char} at the start of request is not supported", char
            )
        return TokenType.OPERATOR, char, closed

    if "0" <= char <= "9":
        if state in (TokenType.DICE, TokenType.NUMBER):
            return state, acc + char, None
        return TokenType.NUMBER, char, closed

    if char == DICE_MARKER:
        return TokenType.DICE, "", closed

    if char == SEPARATOR:
        return None, "", closed

    raise UnexpectedCharacterError(f"Unexpected character: {char!r}", char)


def tokenize(text: str) -> list[Token]:
    """Split a normalized request into tokens.

    `3d8+1` -> [Number('3'), Dice('8'), Operator('+'), Number('1')]
    """
    tokens: list[Token] = []
    state: TokenType | None = None
    acc = ""

    for char in text:
        started = state is not None or bool(tokens)
        state, acc, closed = _step(state, acc, char, started)
        if closed is not None:
            tokens.append(closed)

    if state is not None:
        tokens.append(Token(state, acc))
    if not tokens:
        raise EmptyRequestError("Empty request")
    return tokens
