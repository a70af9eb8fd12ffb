"""
Generated Python source.

The generated function must make the same host calls, in the same order,
as running the program directly.
"""

import pytest

import uitree
import uitest
from uitree import Style


def build_generated(code, namespace, **options):
    program = uitree.compile_ui(code, **options)
    source = uitree.render_python(program)
    scope = dict(namespace)
    exec(compile(source, "<generated>", "exec"), scope)
    host = uitree.RecordingHost()
    root = scope["build_ui"](host)
    return host, root


def build_direct(code, namespace, **options):
    host = uitree.RecordingHost()
    root = uitree.build_ui(code, host, namespace, **options)
    return host, root


NAMES = {name: name for name in "abcdefg"}


@uitest.params(
    "code namespace",
    leaf=("a", {}),
    kids=("a(b, c(d, e))", {}),
    markers=("a[m1, m2](b[; m1])", {"m1": 1, "m2": 2}),
    bundles=("a[m1; m2]", {"m1": 1, "m2": 2}),
    if_true=("a(b, if (p) {c, d(e)}, f)", {"p": True}),
    if_false=("a(b, if (p) {c, d(e)}, f)", {"p": False}),
    elif_taken=("a(if (p) {b} else if (q) {c} else {d})", {"p": False, "q": True}),
    else_taken=("a(if (p) {b} else if (q) {c} else {d})", {"p": False, "q": False}),
    empty_branch=("a(if (p) {} else {b})", {"p": True}),
    nested=("a(if (p) {b(if (q) {c})})", {"p": True, "q": True}),
    entity=("entity(a)", {}),
    shorthand=("a[rect!(1 px, 2 px)]", {}),
)
def test_same_calls_as_executor(key, code, namespace):
    namespace = {**NAMES, **namespace}
    generated, _root = build_generated(code, namespace)
    direct, _root = build_direct(code, namespace)
    assert uitest.call_names(generated) == uitest.call_names(direct)


def test_overrides_with_field():
    namespace = {"a": {"name": "a", "style": Style()}}
    generated, root = build_generated(
        "a{flex_grow: 3.0}", namespace, override_field="style")
    assert root.template["style"].flex_grow == 3.0
    direct, _root = build_direct("a{flex_grow: 3.0}", namespace, override_field="style")
    assert generated.calls == direct.calls


def test_overrides():
    namespace = {"a": {"w": 1, "h": 2}, "x": 10}
    generated, root = build_generated("a{w: x * 2, w: x}", namespace)
    assert root.template == {"w": 10, "h": 2}


def test_adopt():
    host = uitree.RecordingHost()
    existing = host.create_node("old")
    program = uitree.compile_ui("a(id(existing))")
    scope = {"a": "a", "existing": existing}
    exec(uitree.render_python(program), scope)
    root = scope["build_ui"](host)
    assert root.children == [existing]


def test_returns_root():
    _host, root = build_generated("a(b)", NAMES)
    assert root.template == "a"


def test_source_layout():
    program = uitree.compile_ui("square(select_square, if (selected) {marker})")
    lines = uitree.render_python(program, name="build_squares").splitlines()
    assert "import uitree as _uitree" in lines
    assert "def build_squares(_host):" in lines
    assert "    _n0 = _host.create_node(square)" in lines
    assert "    with _uitree.children(_host, _n0):" in lines
    assert "        if (selected):" in lines
    assert "            _n2 = _host.create_node(marker)" in lines
    assert lines[-1] == "    return _n0"


def test_else_if_renders_elif():
    program = uitree.compile_ui("a(if (p) {b} else if (q) {c} else {d})")
    source = uitree.render_python(program)
    assert "elif (q):" in source
    assert source.count("else:") == 1


def test_scopes_closed_on_error():
    namespace = {**NAMES, "boom": None}
    with pytest.raises(TypeError):
        build_generated("a(b(c{w: boom()}))", namespace)


def test_missing_template_is_name_error():
    with pytest.raises(NameError):
        build_generated("a(b)", {"a": "a"})
