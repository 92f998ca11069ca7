from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    EMPTY_REQUEST = "empty_request"
    UNEXPECTED_CHARACTER = "unexpected_character"
    UNARY_OPERATOR = "unary_operator"
    UNEXPECTED_OPERATOR = "unexpected_operator"
    UNEXPECTED_END = "unexpected_end_of_expression"
    MISSING_OPERATOR = "missing_operator"
    UNSUPPORTED_OPERATOR = "unsupported_operator"
    INVALID_DICE_SPEC = "invalid_dice_spec"
    INVALID_CONSTANT = "invalid_constant"


class DiceFormulaError(ValueError):
    """Base class for every failure of a single calculation.

    Subclasses pin `kind`; `fragment` is the offending piece of the request
    when there is one.
    """

    kind: ErrorKind

    def __init__(self, message: str, fragment: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.fragment = fragment

    def to_dict(self) -> dict[str, str | None]:
        return {"kind": self.kind.value, "error": self.message, "fragment": self.fragment}


class EmptyRequestError(DiceFormulaError):
    kind = ErrorKind.EMPTY_REQUEST


class UnexpectedCharacterError(DiceFormulaError):
    kind = ErrorKind.UNEXPECTED_CHARACTER


class UnaryOperatorError(DiceFormulaError):
    kind = ErrorKind.UNARY_OPERATOR


class UnexpectedOperatorError(DiceFormulaError):
    kind = ErrorKind.UNEXPECTED_OPERATOR


class UnexpectedEndOfExpressionError(DiceFormulaError):
    kind = ErrorKind.UNEXPECTED_END


class MissingOperatorError(DiceFormulaError):
    kind = ErrorKind.MISSING_OPERATOR


class UnsupportedOperatorError(DiceFormulaError):
    kind = ErrorKind.UNSUPPORTED_OPERATOR


class InvalidDiceSpecError(DiceFormulaError):
    kind = ErrorKind.INVALID_DICE_SPEC


class InvalidConstantError(DiceFormulaError):
    kind = ErrorKind.INVALID_CONSTANT
