"""Error hierarchy shared by the expression engine and the dependency graph."""

from __future__ import annotations

from enum import Enum, auto


class CalcError(Exception):
    """Base class for every error raised by cellcalc."""


class InvalidArgumentError(CalcError, ValueError):
    """A required argument was missing (``None``).

    Raised before any mutation, so the receiving object is left unchanged.
    """

    def __init__(self, argument: str, message: str | None = None) -> None:
        self.argument = argument
        super().__init__(message or f"{argument} cannot be None")


class FormulaSyntaxError(CalcError):
    """An expression string does not match the grammar.

    ``position`` is the 1-based index of the offending token, or None when
    the problem is only detectable at end of input.
    """

    def __init__(self, reason: str, position: int | None = None) -> None:
        self.reason = reason
        self.position = position
        if position is None:
            super().__init__(reason)
        else:
            super().__init__(f"{reason} (token {position})")


class EvaluationErrorKind(Enum):
    """Why an evaluation was aborted."""

    UNDEFINED_VARIABLE = auto()
    DIVIDE_BY_ZERO = auto()
    NON_NUMERIC_VALUE = auto()
    UNKNOWN_OPERATOR = auto()  # unreachable for a validated expression


class FormulaEvaluationError(CalcError):
    """Evaluation failed; no partial result is available."""

    def __init__(
        self,
        kind: EvaluationErrorKind,
        message: str,
        variable: str | None = None,
    ) -> None:
        self.kind = kind
        self.variable = variable
        super().__init__(message)
