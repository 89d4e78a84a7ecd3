# Loopy language package
# This package provides a tokenizer, parser and tree-walking evaluator for the Loopy language.
from .errors import Span, SpanError, LexerError, ParseError, EvaluationError, format_error
from .lexer import SimpleTokenizer
from .parser import Parser, parse_program
from .interpreter import Evaluator, run_program, compile_module

__all__ = [
    'Span',
    'SpanError',
    'LexerError',
    'ParseError',
    'EvaluationError',
    'format_error',
    'SimpleTokenizer',
    'Parser',
    'parse_program',
    'Evaluator',
    'run_program',
    'compile_module',
]
