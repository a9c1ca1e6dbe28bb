"""cellcalc: the parsing and dependency core of a spreadsheet recalculation engine.

Usage::

    from cellcalc import DependencyGraph, Expression

    values = {"A1": 10.0, "A2": 32.0}
    expr = Expression("(a1 + a2) / 2", normalizer=str.upper)
    expr.evaluate(values)          # 21.0

    graph = DependencyGraph()
    graph.replace_dependents("B1", expr.variables())
    graph.dependees_of("A1")       # ("B1",)
"""

from cellcalc.calc import (
    CalcError,
    DependencyGraph,
    EvaluationErrorKind,
    Expression,
    FormulaEvaluationError,
    FormulaSyntaxError,
    InvalidArgumentError,
    Token,
    TokenKind,
    Tokenizer,
    tokenize,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
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
