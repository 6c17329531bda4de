"""Tests for the ordered syntax rules."""

import pytest

from formulavalidator.engine import (
    ErrorKind,
    FormulaSyntaxError,
    SymbolTables,
    tokenize,
    validate_syntax,
)
from formulavalidator.engine.grammar import RULE_ORDER


def check(text, tables=None):
    validate_syntax(text, tokenize(text), tables)


def failure(text, tables=None) -> FormulaSyntaxError:
    with pytest.raises(FormulaSyntaxError) as exc_info:
        check(text, tables)
    return exc_info.value


class TestRuleOrder:
    """Tests for the fixed rule order."""

    def test_rule_order_matches_error_kinds(self):
        """Test every rule name is an error kind."""
        assert [ErrorKind(name) for name in RULE_ORDER]
        assert RULE_ORDER[0] == "EmptyFormula"
        assert RULE_ORDER[-1] == "UndefinedSymbol"

    def test_unbalanced_before_leading_operator(self):
        """Test the earlier rule wins when two rules fail."""
        assert failure("(* 2").kind == ErrorKind.UNBALANCED_PARENTHESES

    def test_unknown_function_before_undefined_symbol(self):
        """Test rule 9 is reported before rule 10."""
        error = failure("$x + nope(1)")
        assert error.kind == ErrorKind.UNKNOWN_FUNCTION
        assert error.message == "Unknown function 'nope' at position 5."

    def test_double_operator_before_symbol_syntax(self):
        """Test rule 6 is reported before rule 7."""
        assert failure("2 ** $1").kind == ErrorKind.DOUBLE_OPERATOR


class TestStructuralRules:
    """Tests for rules 1 to 3."""

    @pytest.mark.parametrize("text", ["", " ", "\t\n "])
    def test_empty_formula(self, text):
        """Test empty and whitespace-only text."""
        error = failure(text)
        assert error.kind == ErrorKind.EMPTY_FORMULA
        assert error.message == "Formula is empty."

    def test_unmatched_close(self):
        """Test a ')' without an opener reports its own position."""
        error = failure("2 + 3)")
        assert error.kind == ErrorKind.UNBALANCED_PARENTHESES
        assert error.message == "Unmatched ')' at position 5."

    def test_unclosed_open_reports_first_unmatched(self):
        """Test the earliest unmatched '(' is reported."""
        error = failure("((1) + (2")
        assert error.message == "Missing ')' for '(' at position 0."

    def test_close_before_open(self):
        """Test ')(' is unbalanced even with equal counts."""
        assert failure(")(").message == "Unmatched ')' at position 0."

    def test_empty_parentheses(self):
        """Test '()' anywhere in the formula."""
        error = failure("2 * (3 + ())")
        assert error.kind == ErrorKind.EMPTY_PARENTHESES
        assert error.message == "Empty parentheses at position 9."

    def test_empty_call_arguments(self):
        """Test a call with no arguments is empty parentheses."""
        assert failure("sqrt()").kind == ErrorKind.EMPTY_PARENTHESES


class TestOperatorRules:
    """Tests for rules 4 to 6."""

    def test_leading_operator(self):
        """Test a formula starting with a non-minus operator."""
        error = failure("* 2")
        assert error.kind == ErrorKind.LEADING_OPERATOR
        assert error.message == "'*' at position 0 has no left operand."

    def test_leading_operator_after_paren(self):
        """Test an operator right after '('."""
        assert failure("(^2)").kind == ErrorKind.LEADING_OPERATOR

    def test_leading_operator_after_comma(self):
        """Test an operator opening a call argument."""
        assert failure("max(1, /2)").kind == ErrorKind.LEADING_OPERATOR

    def test_leading_minus_allowed(self):
        """Test unary minus at the start, after '(' and after ','."""
        check("-2")
        check("(-2)")
        check("max(1, -2)")

    def test_trailing_operator(self):
        """Test a formula ending with an operator."""
        error = failure("2 +")
        assert error.kind == ErrorKind.TRAILING_OPERATOR
        assert error.message == "'+' at position 2 has no right operand."

    def test_trailing_minus_is_trailing(self):
        """Test a dangling minus is also trailing."""
        assert failure("2 -").kind == ErrorKind.TRAILING_OPERATOR

    def test_trailing_operator_before_paren(self):
        """Test an operator right before ')'."""
        assert failure("(2 *)").message == "'*' at position 3 has no right operand."

    def test_trailing_comma(self):
        """Test a comma right before ')'."""
        error = failure("max(1,)")
        assert error.kind == ErrorKind.TRAILING_OPERATOR
        assert error.message == "',' at position 5 has no right operand."

    def test_double_operator(self):
        """Test two adjacent binary operators."""
        error = failure("2 ++ 3")
        assert error.kind == ErrorKind.DOUBLE_OPERATOR
        assert error.message == "Unexpected '+' after '+' at position 3."

    @pytest.mark.parametrize("text", ["2 * -3", "2 - -3", "2 ^ -1", "2 --3", "2 - - - 3"])
    def test_operator_then_minus_allowed(self, text):
        """Test that a second operator may be unary minus."""
        check(text)


class TestSymbolSyntax:
    """Tests for rule 7."""

    def test_malformed_symbol(self):
        """Test a sigil followed by a digit."""
        error = failure("$1abc + 2")
        assert error.kind == ErrorKind.INVALID_SYMBOL_SYNTAX
        assert error.message == (
            "Invalid symbol '$1abc' at position 0: '$' must be followed by a letter or underscore."
        )

    def test_unknown_character(self):
        """Test a character outside the grammar."""
        error = failure("2 & 3")
        assert error.kind == ErrorKind.INVALID_SYMBOL_SYNTAX
        assert error.message == "Unexpected character '&' at position 2."

    def test_bare_identifier(self):
        """Test a name with neither sigil nor call."""
        error = failure("rate * 2")
        assert error.kind == ErrorKind.INVALID_SYMBOL_SYNTAX
        assert "use '$' for variables" in error.message

    def test_underscore_names_are_valid(self):
        """Test names starting with an underscore."""
        check("$_x + #_y1", SymbolTables.from_inputs({"_x": 1}, {"_y1": 2}))


class TestMissingOperator:
    """Tests for rule 8."""

    def test_adjacent_numbers(self):
        """Test two operands separated by whitespace only."""
        error = failure("2 3")
        assert error.kind == ErrorKind.MISSING_OPERATOR
        assert error.message == "Missing operator between '2' and '3' at position 2."

    def test_group_followed_by_operand(self):
        """Test ')' directly followed by a number."""
        assert failure("(2)3").message == "Missing operator between ')' and '3' at position 3."

    def test_operand_followed_by_call(self):
        """Test a number directly followed by a function call."""
        assert failure("2 sqrt(4)").kind == ErrorKind.MISSING_OPERATOR

    def test_comma_outside_call(self):
        """Test a comma inside a plain group."""
        error = failure("(1, 2)")
        assert error.kind == ErrorKind.MISSING_OPERATOR
        assert error.message == "',' at position 2 is only allowed between function arguments."

    def test_comma_at_top_level(self):
        """Test a comma with no enclosing parentheses."""
        assert failure("1, 2").kind == ErrorKind.MISSING_OPERATOR

    def test_comma_in_group_inside_call(self):
        """Test that only the innermost parenthesis decides."""
        assert failure("max((1, 2), 3)").kind == ErrorKind.MISSING_OPERATOR


class TestFunctions:
    """Tests for rule 9."""

    def test_unknown_function(self):
        """Test a name outside the whitelist."""
        error = failure("foo(2)")
        assert error.kind == ErrorKind.UNKNOWN_FUNCTION
        assert error.message == "Unknown function 'foo' at position 0."

    def test_function_names_are_case_sensitive(self):
        """Test that SQRT is not sqrt."""
        assert failure("SQRT(4)").kind == ErrorKind.UNKNOWN_FUNCTION

    @pytest.mark.parametrize(
        "text,message",
        [
            ("sqrt(1, 2)", "Function 'sqrt' expects 1 argument(s) but got 2."),
            ("pow(2)", "Function 'pow' expects 2 argument(s) but got 1."),
            ("min(1)", "Function 'min' expects at least 2 argument(s) but got 1."),
            ("round(1, 2, 3)", "Function 'round' expects 1 to 2 argument(s) but got 3."),
        ],
    )
    def test_wrong_arity(self, text, message):
        """Test argument counts outside a function's arity."""
        error = failure(text)
        assert error.kind == ErrorKind.UNKNOWN_FUNCTION
        assert error.message == message

    def test_nested_call_arguments_counted_per_call(self):
        """Test commas of an inner call do not count for the outer one."""
        check("sqrt(max(1, 2, 3))")
        check("pow(max(1, 2), min(3, 4))")


class TestUndefinedSymbols:
    """Tests for rule 10."""

    def test_undefined_without_candidates(self):
        """Test no suggestion when the namespace is empty."""
        error = failure("$unknown")
        assert error.kind == ErrorKind.UNDEFINED_SYMBOL
        assert error.message == "Undefined variable '$unknown' at position 0."
        assert error.suggestion is None

    def test_undefined_with_suggestion(self):
        """Test the suggestion carries the sigil."""
        tables = SymbolTables.from_inputs({"temperature": 21.5})
        error = failure("$temp", tables)
        assert error.suggestion == "$temperature"
        assert error.message.endswith("Did you mean '$temperature'?")

    def test_constant_not_resolved_from_variables(self):
        """Test namespaces never cross."""
        tables = SymbolTables.from_inputs({"g": 1})
        error = failure("#g", tables)
        assert error.message == "Undefined constant '#g' at position 0."

    def test_first_undefined_reported(self):
        """Test the earliest unresolved symbol wins."""
        tables = SymbolTables.from_inputs({"a": 1})
        assert failure("$a + $b + $c", tables).message.startswith("Undefined variable '$b'")

    def test_defined_symbols_pass(self, pythagoras_tables):
        """Test resolvable symbols pass every rule."""
        check("sqrt($a^2 + $b^2) * #g", pythagoras_tables)

    def test_unreferenceable_names_not_suggested(self):
        """Test ids that no formula can spell are never offered."""
        tables = SymbolTables.from_inputs([{"id": "te mp", "value": 1}, {"id": "1temp", "value": 2}])

        error = failure("$temp", tables)

        assert error.suggestion is None
        assert error.message == "Undefined variable '$temp' at position 0."

    def test_valid_name_suggested_past_invalid_one(self):
        """Test a closer invalid id does not hide a valid candidate."""
        tables = SymbolTables.from_inputs([{"id": "temp!", "value": 1}, {"id": "tempo", "value": 2}])
        assert failure("$temp", tables).suggestion == "$tempo"
