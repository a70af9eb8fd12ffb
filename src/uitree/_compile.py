"""Compile descriptions into programs and run them."""

__all__ = ["compile_ui", "build_ui", "shorthand"]

import logging

import uitree

from ._emit import emit
from ._ops import Program
from ._parse import parse, parse_expr
from ._shorthand import RUNTIME_NAME

_log = logging.getLogger(__name__)


def compile_ui(text, filename=None, override_field=None):
    """Compile a tree description into a Program.

    Every host expression is compiled as Python, so a malformed
    expression fails here rather than in the middle of a build.

    Args:
        text: (str) Description source
        filename: (str | None) Name used in positions and error messages
        override_field: (str | None) See `emit`

    Returns:
        (Program) Compiled program

    Raises:
        ParseError: Invalid description or expression
    """
    tree = parse(text, filename=filename)
    program = Program(emit(tree, override_field), source=text, filename=filename)
    for expr in program.expressions():
        expr.check()
    _log.debug("Compiled %s into %d operations", filename or "<text>", len(program))
    return program


def build_ui(text, host, namespace=None, **options):
    """Compile a description and run it against a host.

    Args:
        text: (str) Description source
        host: (Host) Receives the build calls
        namespace: (dict | None) Base templates and expression globals
        **options: Passed to compile_ui

    Returns:
        The root node returned by the host
    """
    program = compile_ui(text, **options)
    return program.run(host, namespace)


def shorthand(text, namespace=None):
    """Evaluate a standalone expression such as `rect!(2 px, 4 px)`."""
    expr = parse_expr(text)
    scope = dict(namespace or {})
    scope[RUNTIME_NAME] = uitree
    return expr.evaluate(scope)
