"""
Conditional child groups: if / else if / else.

Arms are kept in source order with their children. Predicates are opaque
Python expressions and are never evaluated while parsing.
"""

import uitree
import uitest


def test_if_only():
    tree = uitree.parse("panel(if (show) {a, b})")
    cond, = tree.children
    assert isinstance(cond, uitree.Conditional)
    arm, = cond.arms
    assert arm.predicate.source == "show"
    assert [c.base for c in arm.children] == ["a", "b"]
    assert cond.orelse is None


def test_if_else():
    cond = uitree.parse("panel(if (show) {a} else {b})").children[0]
    assert len(cond.arms) == 1
    assert [c.base for c in cond.orelse] == ["b"]


def test_else_if_chain():
    code = "panel(if (x > 1) {a} else if (x == 1) {b} else if (y) {c} else {d})"
    cond = uitree.parse(code).children[0]
    assert [arm.predicate.source for arm in cond.arms] == ["x > 1", "x == 1", "y"]
    assert [[c.base for c in arm.children] for arm in cond.arms] == [["a"], ["b"], ["c"]]
    assert [c.base for c in cond.orelse] == ["d"]


def test_empty_branches():
    cond = uitree.parse("panel(if (p) {} else {})").children[0]
    assert cond.arms[0].children == ()
    assert cond.orelse == ()


def test_empty_else_differs_from_missing_else():
    with_else = uitree.parse("panel(if (p) {a} else {})").children[0]
    without = uitree.parse("panel(if (p) {a})").children[0]
    assert with_else.orelse == ()
    assert without.orelse is None


def test_siblings_around_conditional():
    tree = uitree.parse("panel(a, if (p) {b} else {c}, d)")
    first, cond, last = tree.children
    assert first.base == "a"
    assert isinstance(cond, uitree.Conditional)
    assert last.base == "d"


def test_nested_conditionals():
    code = """
    panel(
        if (outer) {
            row(if (inner) {a} else {b}),
            if (other) {c},
        } else {
            if (last) {d}
        }
    )
    """
    cond = uitree.parse(code).children[0]
    row, inner_cond = cond.arms[0].children
    assert isinstance(row.children[0], uitree.Conditional)
    assert inner_cond.arms[0].predicate.source == "other"
    assert isinstance(cond.orelse[0], uitree.Conditional)


def test_branch_children_take_full_syntax():
    cond = uitree.parse("panel(if (p) {a{w: 1}[m](b)} else {id(n)})").children[0]
    a = cond.arms[0].children[0]
    assert a.overrides[0].field == "w"
    assert a.markers[0].value.source == "m"
    assert a.children[0].base == "b"
    assert isinstance(cond.orelse[0], uitree.Adopt)


def test_predicate_expressions():
    cond = uitree.parse("p(if (len(items) > 0 and not hidden) {a})").children[0]
    assert cond.arms[0].predicate.source == "len(items) > 0 and not hidden"


@uitest.params(
    "code",
    single="p(if (a) {b})",
    orelse="p(if (a) {b} else {c})",
    chain="p(if (a) {b} else if (c) {d} else {e})",
)
def test_conditional_roundtrip(key, code):
    tree = uitree.parse(code)
    assert uitree.parse(tree.unparse()) == tree
