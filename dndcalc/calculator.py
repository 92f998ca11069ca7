from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any

from .errors import DiceFormulaError, ErrorKind
from .lexer import Token, normalize, tokenize
from .parser import Parser, TokenStream
from .result import DiceResult

log = logging.getLogger(__name__)

# Shared between calls; random.Random methods are safe to call from several threads.
_default_rng = random.Random()


@dataclass(frozen=True)
class Outcome:
    request: str
    normalized: str
    tokens: tuple[Token, ...] = ()
    result: DiceResult | None = None
    error: DiceFormulaError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        return self.error.kind if self.error is not None else None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"ok": self.ok, "normalized": self.normalized}
        if self.result is not None:
            out["result"] = self.result.to_dict()
        if self.error is not None:
            out.update(self.error.to_dict())
        return out


def _resolve_rng(rng: random.Random | None, seed: int | None) -> random.Random:
    if rng is not None:
        return rng
    if seed is not None:
        return random.Random(seed)
    return _default_rng


def _evaluate(normalized: str, rng: random.Random, tokens: list[Token]) -> DiceResult:
    # Tokens are collected into the caller's list so they survive a parse failure.
    tokens.extend(tokenize(normalized))
    log.debug("Tokenized request %r: %s", normalized, tokens)
    return Parser(TokenStream(tokens), rng).parse()


def calculate(
    request: str, *, rng: random.Random | None = None, seed: int | None = None
) -> DiceResult:
    """Evaluate a recognized phrase as a dice formula.

    Raises a DiceFormulaError subclass when the phrase is not a formula.
    """
    try:
        return _evaluate(normalize(request), _resolve_rng(rng, seed), [])
    except DiceFormulaError as e:
        log.info("Request %r rejected (%s): %s", request, e.kind.value, e)
        raise


def try_calculate(
    request: str, *, rng: random.Random | None = None, seed: int | None = None
) -> Outcome:
    normalized = normalize(request)
    tokens: list[Token] = []
    try:
        result = _evaluate(normalized, _resolve_rng(rng, seed), tokens)
    except DiceFormulaError as e:
        log.info("Request %r rejected (%s): %s", request, e.kind.value, e)
        return Outcome(request=request, normalized=normalized, tokens=tuple(tokens), error=e)
    return Outcome(request=request, normalized=normalized, tokens=tuple(tokens), result=result)
