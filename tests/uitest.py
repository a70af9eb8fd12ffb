"""Helpers shared by the uitree tests."""

import pytest

import uitree


def params(names, **cases):
    """Parametrize a test from keyword cases.

    Each keyword is the case id and is passed as the `key` argument. A
    tuple value fills the named columns in order; any other value fills a
    single column, so a single column that takes a tuple must wrap it.

        @params("code base", leaf=("square", "square"))
        def test_base(key, code, base): ...
    """
    columns = ["key", *names.replace(",", " ").split()]
    rows = [(key, *value) if isinstance(value, tuple) else (key, value)
            for key, value in cases.items()]
    return pytest.mark.parametrize(columns, rows, ids=list(cases))


def parse_error(code, match=None):
    """Assert code fails to parse and return the ParseError."""
    with pytest.raises(uitree.ParseError, match=match) as info:
        uitree.compile_ui(code)
    return info.value


def op_names(operations):
    """Flatten operation class names, RuntimeIf branches in brackets."""
    names = []
    for op in operations:
        names.append(type(op).__name__)
        if isinstance(op, uitree.RuntimeIf):
            names.append(op_names(op.then_ops))
            names.append(op_names(op.else_ops))
    return names


def run(code, override_field=None, **namespace):
    """Compile and build code with a RecordingHost.

    Names in the description that are not passed in the namespace are
    bound to their own name as a string, so templates can be checked by
    name in the recorded calls.
    """
    program = uitree.compile_ui(code, override_field=override_field)
    scope = {name: name for name in _base_names(program.operations)}
    scope.update(namespace)
    host = uitree.RecordingHost()
    program.run(host, scope)
    return host


def _base_names(operations):
    for op in operations:
        if isinstance(op, uitree.CreateNode) and op.base is not None:
            yield op.base
        elif isinstance(op, uitree.RuntimeIf):
            yield from _base_names(op.then_ops)
            yield from _base_names(op.else_ops)


def created(host):
    """Templates passed to create_node, in call order."""
    return [value for call, value in host.calls if call == "create"]


def call_names(host):
    """Host calls as compact strings, eg. ['create square', 'begin', ...]."""
    names = []
    for call, value in host.calls:
        match call:
            case "create":
                names.append(f"create {value}")
            case "begin" | "end":
                names.append(call)
            case _:
                names.append(f"{call} {value}")
    return names
