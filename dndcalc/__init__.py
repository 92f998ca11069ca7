from .calculator import Outcome, calculate, try_calculate
from .errors import (
    DiceFormulaError,
    EmptyRequestError,
    ErrorKind,
    InvalidConstantError,
    InvalidDiceSpecError,
    MissingOperatorError,
    UnaryOperatorError,
    UnexpectedCharacterError,
    UnexpectedEndOfExpressionError,
    UnexpectedOperatorError,
    UnsupportedOperatorError,
)
from .lexer import Token, TokenType, normalize, tokenize
from .result import DiceResult, Result, combine

__version__ = "0.1.0"

__all__ = [
    "DiceFormulaError",
    "DiceResult",
    "EmptyRequestError",
    "ErrorKind",
    "InvalidConstantError",
    "InvalidDiceSpecError",
    "MissingOperatorError",
    "Outcome",
    "Result",
    "Token",
    "TokenType",
    "UnaryOperatorError",
    "UnexpectedCharacterError",
    "UnexpectedEndOfExpressionError",
    "UnexpectedOperatorError",
    "UnsupportedOperatorError",
    "calculate",
    "combine",
    "normalize",
    "tokenize",
    "try_calculate",
]
