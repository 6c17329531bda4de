"""Engine facade: validate and evaluate a formula in one pure call."""

import logging
from typing import Union

from . import grammar
from .evaluator import evaluate_expression
from .limits import InputLimits
from .models import (
    ErrorKind,
    FormulaAnalysis,
    FormulaError,
    FormulaRequest,
    InvalidOutcome,
    TokenInfo,
    TokenKind,
    ValidationOutcome,
    ValidOutcome,
)
from .substitution import substitute_symbols
from .symbols import SymbolSource, SymbolTables
from .tokenizer import tokenize
from .validator import SyntaxValidator

logger = logging.getLogger(__name__)


class FormulaEngine:
    """Validate formulas and evaluate the valid ones.

    The engine holds configuration only; every call builds its own tokens,
    symbol tables and result, so one instance can serve any number of
    threads concurrently.
    """

    def __init__(
        self,
        max_formula_length: int = grammar.MAX_FORMULA_LENGTH,
        max_nesting_depth: int = grammar.MAX_NESTING_DEPTH,
        log_formulas: bool = False,
    ):
        self.limits = InputLimits(max_formula_length, max_nesting_depth)
        self.log_formulas = log_formulas

    def validate(self, request: FormulaRequest) -> ValidationOutcome:
        """
        Validate and evaluate one formula.

        Args:
            request: Formula text plus the variables and constants it may use

        Returns:
            ValidOutcome or InvalidOutcome; never raises
        """
        return self.validate_formula(request.formula, request.variables, request.constants)

    def validate_formula(
        self,
        formula: Union[str, bytes],
        variables: SymbolSource = None,
        constants: SymbolSource = None,
    ) -> ValidationOutcome:
        """Same as ``validate`` with the request fields passed separately."""
        try:
            outcome = self._run(formula, variables, constants)
        except FormulaError as e:
            outcome = e.to_outcome()
        except Exception as e:
            logger.exception(f"Unexpected failure while validating formula: {e}")
            outcome = InvalidOutcome(
                error_kind=ErrorKind.INTERNAL,
                message=grammar.message("internal", detail="unexpected engine failure"),
            )

        if isinstance(outcome, InvalidOutcome):
            if self.log_formulas:
                logger.info(f"Formula {formula!r} rejected: {outcome.error_kind.value}")
            else:
                logger.debug(f"Formula rejected: {outcome.error_kind.value}")
        return outcome

    def _run(self, formula, variables: SymbolSource, constants: SymbolSource) -> ValidOutcome:
        # Caller errors come before anything looks at the text
        tables = SymbolTables.from_inputs(variables, constants)

        text = self.limits.decode(formula)
        self.limits.enforce(self.limits.validate_formula_length(text))

        tokens = tokenize(text)
        self.limits.enforce(self.limits.validate_nesting_depth(tokens))

        SyntaxValidator(tables).validate(text, tokens)

        evaluated = substitute_symbols(text, tokens, tables)
        result = evaluate_expression(evaluated, self.limits.max_nesting_depth)

        if self.log_formulas:
            logger.info(f"Formula {text!r} evaluated to {result!r}")
        return ValidOutcome(evaluated_formula=evaluated, result=result)

    def analyze(self, formula: Union[str, bytes]) -> FormulaAnalysis:
        """
        Tokenize a formula for editors: token stream plus referenced names.

        No rules run here; malformed input still yields its tokens. The
        encoding and length limits still apply.

        Raises:
            FormulaError: Internal, if the text is not valid UTF-8 or too long
        """
        text = self.limits.decode(formula)
        self.limits.enforce(self.limits.validate_formula_length(text))
        tokens = tokenize(text)
        variables: list[str] = []
        constants: list[str] = []
        functions: list[str] = []
        for index, token in enumerate(tokens):
            if token.kind == TokenKind.VARIABLE:
                target = variables
            elif token.kind == TokenKind.CONSTANT:
                target = constants
            elif (
                token.kind == TokenKind.IDENTIFIER
                and tokens[index + 1].kind == TokenKind.LPAREN
            ):
                target = functions
            else:
                continue
            if token.bare_name not in target:
                target.append(token.bare_name)

        return FormulaAnalysis(
            formula=text,
            tokens=[
                TokenInfo(kind=t.kind, lexeme=t.lexeme, start=t.start, end=t.end)
                for t in tokens
            ],
            variables=variables,
            constants=constants,
            functions=functions,
        )


_default_engine = FormulaEngine()


def validate_formula(
    formula: Union[str, bytes],
    variables: SymbolSource = None,
    constants: SymbolSource = None,
) -> ValidationOutcome:
    """Validate and evaluate a formula with the default limits."""
    return _default_engine.validate_formula(formula, variables, constants)
