"""Expression: grammar-checked infix arithmetic with two-stack evaluation.

An Expression is validated once, when it is constructed, and never changes
afterwards. Evaluation walks the stored tokens left to right with an operand
stack and an operator stack instead of building a syntax tree. Multiplicative
operators are collapsed as soon as their right operand arrives, and at most
one additive operator is pending per parenthesis level.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import replace
from numbers import Real
from typing import Callable, Optional

from cellcalc.calc._errors import (
    EvaluationErrorKind,
    FormulaEvaluationError,
    FormulaSyntaxError,
    InvalidArgumentError,
)
from cellcalc.calc._tokenizer import Token, TokenKind, tokenize

logger = logging.getLogger(__name__)

Normalizer = Callable[[str], str]
Validator = Callable[[str], bool]
# Returns the variable's value, or None when the name is not defined.
Resolver = Callable[[str], Optional[float]]

_ADDITIVE = frozenset("+-")
_MULTIPLICATIVE = frozenset("*/")

_VALUE_KINDS = (TokenKind.NUMBER, TokenKind.VARIABLE)


# ---------------------------------------------------------------------------
# Grammar validation
# ---------------------------------------------------------------------------


def _reject(formula: str, reason: str, position: int | None = None) -> FormulaSyntaxError:
    logger.debug("Rejected formula %r: %s", formula, reason)
    return FormulaSyntaxError(reason, position)


def _validate(formula: str) -> tuple[Token, ...]:
    """Scan *formula* once and return its tokens if the grammar accepts it.

    Tracks whether the next token must sit in value position (number,
    variable, ``(``) or operator position (operator, ``)``), plus the
    current parenthesis depth.
    """
    tokens: list[Token] = []
    expecting_value = True
    depth = 0

    for position, token in enumerate(tokenize(formula), start=1):
        tokens.append(token)
        kind = token.kind

        if kind is TokenKind.INVALID:
            raise _reject(formula, f"Invalid token {token.text!r}", position)
        if kind is TokenKind.LEFT_PAREN:
            if not expecting_value:
                raise _reject(formula, "Opening parenthesis is misplaced", position)
            depth += 1
        elif kind is TokenKind.RIGHT_PAREN:
            if expecting_value:
                raise _reject(formula, "Closing parenthesis is misplaced", position)
            depth -= 1
        elif kind in _VALUE_KINDS:
            if not expecting_value:
                raise _reject(formula, f"Value {token.text!r} is misplaced", position)
            expecting_value = False
        else:
            if expecting_value:
                raise _reject(formula, f"Operator {token.text!r} is misplaced", position)
            expecting_value = True

        if depth < 0:
            raise _reject(formula, "Unbalanced closing parenthesis", position)

    if depth != 0:
        raise _reject(formula, "Unclosed parenthesis")
    if not tokens:
        raise _reject(formula, "Empty expression")
    if expecting_value:
        raise _reject(formula, "Expression ends with an operator")

    return tuple(tokens)


def _normalize(
    formula: str,
    tokens: tuple[Token, ...],
    normalizer: Normalizer,
    validator: Validator,
) -> tuple[Token, ...]:
    """Rewrite variable names through *normalizer* and check them with *validator*."""
    result: list[Token] = []
    for position, token in enumerate(tokens, start=1):
        if token.kind is TokenKind.VARIABLE:
            token = replace(token, text=normalizer(token.text))
            if not validator(token.text):
                raise _reject(
                    formula,
                    f"Normalized variable name {token.text!r} rejected",
                    position,
                )
        result.append(token)
    return tuple(result)


# ---------------------------------------------------------------------------
# Evaluation helpers
# ---------------------------------------------------------------------------


def _apply(op: str, left: float, right: float) -> float:
    """Combine two operands."""
    if op == "+":
        return left + right
    if op == "-":
        return left - right
    if op == "*":
        return left * right
    if op == "/":
        if right == 0:
            logger.debug("Division by zero: %r / %r", left, right)
            raise FormulaEvaluationError(
                EvaluationErrorKind.DIVIDE_BY_ZERO, "Division by zero",
            )
        return left / right
    raise FormulaEvaluationError(
        EvaluationErrorKind.UNKNOWN_OPERATOR, f"Unrecognized operator {op!r}",
    )


def _reduce(values: list[float], ops: list[str]) -> None:
    """Pop one operator and two operands, push the combined result."""
    right = values.pop()
    left = values.pop()
    values.append(_apply(ops.pop(), left, right))


def _resolve(name: str, resolver: Resolver) -> float:
    value = resolver(name)
    if value is None:
        logger.debug("Undefined variable: %s", name)
        raise FormulaEvaluationError(
            EvaluationErrorKind.UNDEFINED_VARIABLE,
            f"Undefined variable: {name}",
            variable=name,
        )
    if isinstance(value, bool) or not isinstance(value, Real):
        raise FormulaEvaluationError(
            EvaluationErrorKind.NON_NUMERIC_VALUE,
            f"Variable {name} resolved to non-numeric value {value!r}",
            variable=name,
        )
    return float(value)


# ---------------------------------------------------------------------------
# Expression
# ---------------------------------------------------------------------------


class Expression:
    """An infix arithmetic expression over numbers and named variables.

    The grammar allows non-negative numeric literals, variables (a letter
    followed by letters and digits), the binary operators ``+ - * /`` and
    parentheses. There are no unary operators, so ``-5.3`` is rejected.

    Usage::

        expr = Expression("x*y-2+35/9")
        expr.variables()                  # {"x", "y"}
        expr.evaluate({"x": 3, "y": 4})   # 13.888...

    With a normalizer and validator, variable names are canonicalised and
    checked after the grammar has been accepted::

        Expression("a1 + b2", str.upper, lambda name: name in cells)

    Raises FormulaSyntaxError if *formula* is malformed, or if a normalized
    variable name is rejected by *validator*.
    """

    __slots__ = ("_tokens",)

    def __init__(
        self,
        formula: str,
        normalizer: Normalizer | None = None,
        validator: Validator | None = None,
    ) -> None:
        if formula is None:
            raise InvalidArgumentError("formula")

        tokens = _validate(formula)
        if normalizer is not None or validator is not None:
            tokens = _normalize(
                formula,
                tokens,
                normalizer if normalizer is not None else _identity,
                validator if validator is not None else _accept,
            )
        self._tokens = tokens

    @property
    def tokens(self) -> tuple[Token, ...]:
        """The validated token sequence."""
        return self._tokens

    def variables(self) -> set[str]:
        """Distinct variable names referenced by this expression."""
        return {t.text for t in self._tokens if t.kind is TokenKind.VARIABLE}

    def evaluate(self, resolver: Resolver | Mapping[str, float]) -> float:
        """Compute the value of this expression.

        *resolver* maps a variable name to its value, returning None for
        names it does not know. A plain mapping is accepted as well.

        Raises FormulaEvaluationError on an undefined variable, a
        non-numeric variable value, or division by zero.
        """
        if resolver is None:
            raise InvalidArgumentError("resolver")
        if isinstance(resolver, Mapping):
            resolver = resolver.get

        values: list[float] = []
        ops: list[str] = []

        for token in self._tokens:
            kind = token.kind
            if kind in _VALUE_KINDS:
                if kind is TokenKind.NUMBER:
                    value = float(token.text)
                else:
                    value = _resolve(token.text, resolver)
                if ops and ops[-1] in _MULTIPLICATIVE:
                    values.append(_apply(ops.pop(), values.pop(), value))
                else:
                    values.append(value)
            elif kind is TokenKind.OPERATOR:
                if token.text in _ADDITIVE and ops and ops[-1] in _ADDITIVE:
                    _reduce(values, ops)
                ops.append(token.text)
            elif kind is TokenKind.LEFT_PAREN:
                ops.append(token.text)
            elif kind is TokenKind.RIGHT_PAREN:
                if ops[-1] in _ADDITIVE:
                    _reduce(values, ops)
                ops.pop()  # "("
                # The group may itself be the right operand of * or /
                if ops and ops[-1] in _MULTIPLICATIVE:
                    _reduce(values, ops)

        if not ops:
            return values.pop()
        right = values.pop()
        left = values.pop()
        return _apply(ops.pop(), left, right)

    def __str__(self) -> str:
        return "".join(t.text for t in self._tokens)

    def __repr__(self) -> str:
        return f"Expression({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Expression):
            return str(self) == str(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(str(self))


def _identity(name: str) -> str:
    return name


def _accept(name: str) -> bool:
    return True
