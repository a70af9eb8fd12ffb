"""Compile-time expansion of shorthand value macros.

Inside any host expression a description may write

    unit!(10 px)   unit!(auto)
    size!(100 pct, 50 px)
    rect!(2 px)   rect!(2 px, 4 px)   rect!(1 px, 2 px, 3 px, 4 px)
    style!{flex_grow: 1.0, size: size!(10 px, 10 px)}

Each macro is replaced with Python source calling the matching function
from `uitree._values` through the `_uitree` name, which the executor and
the generated code bind to the uitree package. Lengths must be literal and
arities are checked here, so mistakes fail the compile.
"""

__all__ = ["expand", "RUNTIME_NAME"]

from lark import Token

from ._error import ArityError
from ._values import UNIT_KEYWORDS, UNIT_SUFFIXES

# Global name the expanded source uses to reach the uitree package
RUNTIME_NAME = "_uitree"

RECT_ARITIES = (1, 2, 4)


def expand(macro, ctx):
    """Expand a lark `macro` tree into Python source.

    Args:
        macro: (lark.Tree) `macro` node: MACRO token and bracket group
        ctx: Converter providing `render(items)` for nested expressions
            and `error(message, item, cls)` for positioned errors

    Returns:
        (str) Python expression source
    """
    name = macro.children[0].value.rstrip("!")
    group = macro.children[1]
    args = _split_args(group.children[1:-1], ctx)

    match name:
        case "unit":
            if len(args) != 1:
                raise ctx.error(
                    f"unit! takes 1 argument, got {len(args)}", group, ArityError)
            return _length(args[0], ctx)
        case "size":
            if len(args) != 2:
                raise ctx.error(
                    f"size! takes 2 arguments, got {len(args)}", group, ArityError)
            width, height = (_length(arg, ctx) for arg in args)
            return f"{RUNTIME_NAME}.size({width}, {height})"
        case "rect":
            if len(args) not in RECT_ARITIES:
                raise ctx.error(
                    f"rect! takes 1, 2 or 4 arguments, got {len(args)}",
                    group, ArityError)
            sides = ", ".join(_length(arg, ctx) for arg in args)
            return f"{RUNTIME_NAME}.rect({sides})"
        case "style":
            pairs = [_style_field(arg, ctx) for arg in args]
            return f"{RUNTIME_NAME}.style({', '.join(pairs)})"
    raise ctx.error(f"Unknown shorthand {name}!", macro)


def _split_args(items, ctx):
    """Split group contents on top-level commas.

    A trailing comma is allowed, an empty argument between commas is not.
    """
    args = [[]]
    for item in items:
        if isinstance(item, Token) and item.type == "COMMA":
            if not args[-1]:
                raise ctx.error("Expected an argument before ','", item)
            args.append([])
        else:
            args[-1].append(item)
    if not args[-1]:
        args.pop()
    return args


def _length(items, ctx):
    """Source for one literal length: `10 px`, `-2.5 pct` or `auto`."""
    words = [item for item in items if isinstance(item, Token)]
    if len(words) != len(items):
        raise ctx.error("Expected a length like `10 px`", items[0])

    match [(word.type, word.value) for word in words]:
        case [("NAME", keyword)] if keyword in UNIT_KEYWORDS:
            return f"{RUNTIME_NAME}.unit({keyword!r})"
        case [("NUMBER", number), ("NAME", suffix)]:
            sign = ""
        case [("OP", "-" | "+" as sign), ("NUMBER", number), ("NAME", suffix)]:
            sign = sign.lstrip("+")
        case _:
            raise ctx.error("Expected a length like `10 px`", items[0])

    if suffix not in UNIT_SUFFIXES:
        raise ctx.error(
            f"Unknown unit suffix {suffix!r}, expected px or pct", words[-1])
    return f"{RUNTIME_NAME}.unit({sign}{number}, {suffix!r})"


def _style_field(items, ctx):
    """Source for one `name: expr` pair of style!."""
    match items:
        case [Token(type="NAME") as name, Token(type="COLON"), *value] if value:
            return f"({name.value!r}, ({ctx.render(value)}))"
    raise ctx.error("Expected `field: value` in style!", items[0])
