"""
Shorthand macros: unit!, size!, rect! and style!.

Macros are expanded while parsing into calls through the `_uitree` name,
with literal lengths and arities checked at compile time.
"""

import uitree
import uitest
from uitree import AUTO, Rect, Size, Style, Val


@uitest.params(
    "text source",
    px=("unit!(10 px)", "_uitree.unit(10, 'px')"),
    pct=("unit!(50 pct)", "_uitree.unit(50, 'pct')"),
    negative=("unit!(-5 px)", "_uitree.unit(-5, 'px')"),
    positive=("unit!(+5 px)", "_uitree.unit(5, 'px')"),
    float=("unit!(2.5 pct)", "_uitree.unit(2.5, 'pct')"),
    auto=("unit!(auto)", "_uitree.unit('auto')"),
    size=("size!(100 pct, 50 px)",
          "_uitree.size(_uitree.unit(100, 'pct'), _uitree.unit(50, 'px'))"),
    rect1=("rect!(2 px)", "_uitree.rect(_uitree.unit(2, 'px'))"),
    rect_trailing=("rect!(2 px,)", "_uitree.rect(_uitree.unit(2, 'px'))"),
    style=("style!{flex_grow: 1.0}", "_uitree.style(('flex_grow', (1.0)))"),
    style_empty=("style!{}", "_uitree.style()"),
)
def test_expansion_source(key, text, source):
    assert uitree.parse_expr(text).source == source


def test_expansion_inside_expression():
    expr = uitree.parse_expr("[unit!(1 px), f(rect!(auto))]")
    assert expr.source == "[_uitree.unit(1, 'px'), f(_uitree.rect(_uitree.unit('auto')))]"
    assert expr.text == "[unit!(1 px), f(rect!(auto))]"


def test_not_equal_is_not_a_macro():
    expr = uitree.parse_expr("size!=3")
    assert expr.source == "size!=3"


@uitest.params(
    "text expected",
    unit=("unit!(10 px)", Val.px(10)),
    unit_pct=("unit!(50 pct)", Val.percent(50)),
    auto=("unit!(auto)", AUTO),
    size=("size!(100 pct, 50 px)", Size(Val.percent(100), Val.px(50))),
    rect1=("rect!(2 px)", Rect.all(Val.px(2))),
    rect2=("rect!(2 px, 4 px)",
           Rect(left=Val.px(2), right=Val.px(2), top=Val.px(4), bottom=Val.px(4))),
    rect4=("rect!(1 px, 2 px, 3 px, 4 px)",
           Rect(left=Val.px(1), top=Val.px(2), right=Val.px(3), bottom=Val.px(4))),
)
def test_shorthand_values(key, text, expected):
    assert uitree.shorthand(text) == expected


def test_style_shorthand_nested():
    style = uitree.shorthand(
        "style!{flex_grow: 1.0, size: size!(10 px, 20 px), margin: rect!(auto)}")
    assert style == Style(
        flex_grow=1.0,
        size=Size(Val.px(10), Val.px(20)),
        margin=Rect.all(AUTO),
    )


def test_style_shorthand_uses_namespace():
    style = uitree.shorthand("style!{flex_grow: grow * 2}", {"grow": 1.5})
    assert style.flex_grow == 3.0


def test_style_shorthand_last_field_wins():
    assert uitree.shorthand("style!{flex_grow: 1.0, flex_grow: 2.0}").flex_grow == 2.0


def test_expansion_in_description():
    tree = uitree.parse("square{margin: rect!(1 px, 2 px)}")
    value = tree.overrides[0].value
    assert value.text == "rect!(1 px, 2 px)"
    assert value.source.startswith("_uitree.rect(")
