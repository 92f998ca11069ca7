from __future__ import annotations

import operator
from dataclasses import asdict, dataclass
from typing import Any, Callable

_COMBINERS: dict[str, Callable[[Any, Any], Any]] = {
    "+": operator.add,
    "-": operator.sub,
}


@dataclass(frozen=True)
class DiceResult:
    min: int
    max: int
    average: float
    generated: int
    text: str

    def __add__(self, other: "DiceResult") -> "DiceResult":
        return combine(self, other, "+")

    def __sub__(self, other: "DiceResult") -> "DiceResult":
        return combine(self, other, "-")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def combine(a: DiceResult, b: DiceResult, op: str) -> DiceResult:
    # Composite averages are combined like the other fields, never recomputed.
    fn = _COMBINERS.get(op)
    if fn is None:
        raise ValueError(f"unsupported operator: {op!r}")
    return DiceResult(
        min=fn(a.min, b.min),
        max=fn(a.max, b.max),
        average=fn(a.average, b.average),
        generated=fn(a.generated, b.generated),
        text=a.text + op + b.text,
    )


Result = DiceResult
