"""cellcalc.calc - Expression evaluation and dependency tracking for spreadsheet cells."""

from cellcalc.calc._errors import (
    CalcError,
    EvaluationErrorKind,
    FormulaEvaluationError,
    FormulaSyntaxError,
    InvalidArgumentError,
)
from cellcalc.calc._expression import Expression
from cellcalc.calc._graph import DependencyGraph
from cellcalc.calc._tokenizer import Token, Tokenizer, TokenKind, tokenize

__all__ = [
    "CalcError",
    "DependencyGraph",
    "EvaluationErrorKind",
    "Expression",
    "FormulaEvaluationError",
    "FormulaSyntaxError",
    "InvalidArgumentError",
    "Token",
    "TokenKind",
    "Tokenizer",
    "tokenize",
]
