"""Tests for cellcalc.calc Expression construction, variables and rendering."""

from __future__ import annotations

import pytest

from cellcalc.calc._errors import FormulaSyntaxError, InvalidArgumentError
from cellcalc.calc._expression import Expression
from cellcalc.calc._tokenizer import TokenKind


class TestGrammarAcceptance:
    @pytest.mark.parametrize(
        "formula",
        [
            "2.5e9 + x5 / 17",
            "(5 * 2) + 8",
            "x*y-2+35/9",
            "7",
            "x",
            "((x))",
            "(a + b) * (c - d) / 2",
            "1.5 * (2 + (3 / (4 - x)))",
        ],
    )
    def test_valid(self, formula: str) -> None:
        Expression(formula)


class TestGrammarRejection:
    @pytest.mark.parametrize(
        "formula",
        ["", "   ", "_", "-5.3", "2 5 + 3", "(2+3", "2+3)", "()", "2+", "*2", "x y", "(2)(3)", "2 (3)", "2.5E9", "٣ + 1"],
    )
    def test_invalid(self, formula: str) -> None:
        with pytest.raises(FormulaSyntaxError):
            Expression(formula)

    def test_empty_reason(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="Empty expression") as exc:
            Expression("")
        assert exc.value.position is None

    def test_invalid_token_position(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="Invalid token") as exc:
            Expression("1 + $")
        assert exc.value.position == 3
        assert "(token 3)" in str(exc.value)

    def test_leading_minus_is_misplaced_operator(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="Operator '-' is misplaced") as exc:
            Expression("-5.3")
        assert exc.value.position == 1

    def test_adjacent_values(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="Value '5' is misplaced") as exc:
            Expression("2 5 + 3")
        assert exc.value.position == 2

    def test_unclosed_parenthesis(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="Unclosed parenthesis"):
            Expression("(2+3")

    def test_overclosed_parenthesis(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="Unbalanced closing parenthesis") as exc:
            Expression("2+3)")
        assert exc.value.position == 4

    def test_empty_parentheses(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="Closing parenthesis is misplaced"):
            Expression("()")

    def test_dangling_operator(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="ends with an operator"):
            Expression("2 +")

    def test_uppercase_exponent_rejected(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="Value 'E9' is misplaced") as exc:
            Expression("2.5E9")
        assert exc.value.position == 2

    def test_non_ascii_digit_rejected(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="Invalid token") as exc:
            Expression("٣ + 1")
        assert exc.value.position == 1

    def test_opening_paren_after_value(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="Opening parenthesis is misplaced"):
            Expression("2(3)")

    def test_none_formula(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc:
            Expression(None)  # type: ignore[arg-type]
        assert exc.value.argument == "formula"


class TestNormalization:
    def test_normalizer_rewrites_variables(self) -> None:
        expr = Expression("a1 + b2 * 3", str.upper, lambda name: True)
        assert expr.variables() == {"A1", "B2"}
        assert str(expr) == "A1+B2*3"

    def test_numbers_untouched(self) -> None:
        expr = Expression("x + 2e3", lambda name: name * 2, lambda name: True)
        assert str(expr) == "xx+2e3"

    def test_kind_preserved(self) -> None:
        expr = Expression("x", str.upper, lambda name: True)
        assert expr.tokens[0].kind is TokenKind.VARIABLE

    def test_validator_rejects(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="rejected") as exc:
            Expression("a1 + zz9", str.upper, lambda name: name.startswith("A"))
        assert exc.value.position == 3

    def test_validator_sees_normalized_name(self) -> None:
        seen: list[str] = []

        def validator(name: str) -> bool:
            seen.append(name)
            return True

        Expression("x + y", str.upper, validator)
        assert seen == ["X", "Y"]

    def test_grammar_checked_before_normalization(self) -> None:
        calls: list[str] = []

        def normalizer(name: str) -> str:
            calls.append(name)
            return name

        with pytest.raises(FormulaSyntaxError, match="misplaced"):
            Expression("x +", normalizer, lambda name: True)
        assert calls == []

    def test_validator_only(self) -> None:
        with pytest.raises(FormulaSyntaxError, match="rejected"):
            Expression("x", validator=lambda name: False)

    def test_normalizer_only(self) -> None:
        assert str(Expression("x", normalizer=str.upper)) == "X"

    def test_normalizer_exception_propagates(self) -> None:
        def normalizer(name: str) -> str:
            raise KeyError(name)

        with pytest.raises(KeyError):
            Expression("x", normalizer, lambda name: True)


class TestVariables:
    def test_distinct(self) -> None:
        assert Expression("x + x * y - x").variables() == {"x", "y"}

    def test_none(self) -> None:
        assert Expression("(1 + 2) * 3").variables() == set()

    def test_case_sensitive_without_normalizer(self) -> None:
        assert Expression("x + X").variables() == {"x", "X"}


class TestRendering:
    def test_whitespace_dropped(self) -> None:
        assert str(Expression(" ( 5 * 2 )  + 8 ")) == "(5*2)+8"

    def test_repr(self) -> None:
        assert repr(Expression("x + 1")) == "Expression('x+1')"

    def test_equality_by_text(self) -> None:
        assert Expression("x+1") == Expression(" x + 1 ")
        assert Expression("x+1") != Expression("1+x")
        assert hash(Expression("x+1")) == hash(Expression("x +1"))

    def test_not_equal_to_string(self) -> None:
        assert Expression("x+1") != "x+1"

    def test_rendered_text_reparses(self) -> None:
        expr = Expression("2.5e9 + x5 / 17")
        assert Expression(str(expr)) == expr
