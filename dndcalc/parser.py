from __future__ import annotations

import random
from typing import Sequence

from .errors import (
    InvalidConstantError,
    InvalidDiceSpecError,
    MissingOperatorError,
    UnexpectedEndOfExpressionError,
    UnexpectedOperatorError,
    UnsupportedOperatorError,
)
from .lexer import DICE_MARKER, Token, TokenType
from .result import DiceResult, combine

MIN_VALUE = 1
MAX_VALUE = 1000


def _as_int(digits: str) -> int:
    # Oversized literals only need to compare as out of range.
    digits = digits.lstrip("0") or "0"
    return int(digits) if len(digits) <= 18 else MAX_VALUE + 1


class TokenStream:
    """Read-once cursor over a token sequence with a single pushback slot."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        self._tokens = tuple(tokens)
        self._pos = 0
        self._pushed: Token | None = None

    def read(self) -> Token | None:
        if self._pushed is not None:
            tok, self._pushed = self._pushed, None
            return tok
        if self._pos >= len(self._tokens):
            return None
        tok = self._tokens[self._pos]
        self._pos += 1
        return tok

    def unread(self, token: Token) -> None:
        if self._pushed is not None:
            raise RuntimeError("token stream holds at most one pushed-back token")
        self._pushed = token


class Parser:
    """Evaluator for dice formulas.

    The right-hand side of an operator is the whole rest of the stream, so
    chains associate to the right: `10-3-2` is `10-(3-2)`. Terms are read
    and rolled left to right, then folded from the right.
    """

    def __init__(self, stream: TokenStream, rng: random.Random | None = None) -> None:
        self._stream = stream
        self._rng = rng or random.Random()

    def parse(self) -> DiceResult:
        return self._read_expression()

    def _read_expression(self) -> DiceResult:
        terms = [self._read_term()]
        ops: list[str] = []

        while True:
            op_token = self._stream.read()
            if op_token is None:
                break
            if op_token.kind is not TokenType.OPERATOR:
                raise MissingOperatorError(
                    f"Unexpected {op_token.kind.value} {op_token.text!r} "
                    "after expression with no operator",
                    op_token.text,
                )
            ops.append(op_token.text)
            terms.append(self._read_term())

        result = terms.pop()
        while ops:
            op = ops.pop()
            if op not in ("+", "-"):
                raise UnsupportedOperatorError(f"Unsupported operator {op}", op)
            result = combine(terms.pop(), result, op)
        return result

    def _read_term(self) -> DiceResult:
        token = self._stream.read()
        if token is None:
            raise UnexpectedEndOfExpressionError("Unexpected end of expression")
        if token.kind is TokenType.OPERATOR:
            raise UnexpectedOperatorError(f"Unexpected operator: {token.text}", token.text)
        if token.kind is TokenType.DICE:
            return self.dice_result(token.text)

        nxt = self._stream.read()
        if nxt is not None and nxt.kind is TokenType.DICE:
            return self.dice_result(nxt.text, _as_int(token.text))
        if nxt is not None:
            self._stream.unread(nxt)
        return self.number_result(token.text)

    def dice_result(self, value: str, multiplier: int = 1) -> DiceResult:
        if not MIN_VALUE <= multiplier <= MAX_VALUE:
            raise InvalidDiceSpecError(f"Incorrect multiplier {multiplier}", str(multiplier))
        if not value:
            raise InvalidDiceSpecError("Missing dice faces count", DICE_MARKER)
        faces = _as_int(value)
        if not MIN_VALUE <= faces <= MAX_VALUE:
            raise InvalidDiceSpecError(f"Incorrect dice faces count {value}", value)

        low = multiplier
        high = faces * multiplier
        generated = sum(self._rng.randint(1, faces) for _ in range(multiplier))
        text = f"d{value}" if multiplier == 1 else f"{multiplier}d{value}"
        return DiceResult(
            min=low,
            max=high,
            average=(low + high) / 2.0,
            generated=generated,
            text=text,
        )

    def number_result(self, value: str) -> DiceResult:
        number = _as_int(value)
        if not MIN_VALUE <= number <= MAX_VALUE:
            raise InvalidConstantError(f"Unsupported number: {value}", value)
        return DiceResult(
            min=number,
            max=number,
            average=float(number),
            generated=number,
            text=str(number),
        )
