"""Layout value records and their shorthand constructors.

These are the small literal types a UI style is made of: a length
(`Val`), a width/height pair (`Size`), four sides (`Rect`) and the style
record itself (`Style`). The functions `unit`, `size`, `rect` and `style`
build them from short forms and are what the `unit!`, `size!`, `rect!` and
`style!` macros in a tree description expand to.
"""

__all__ = [
    "Val",
    "Size",
    "Rect",
    "Style",
    "AUTO",
    "UNDEFINED",
    "UNIT_SUFFIXES",
    "UNIT_KEYWORDS",
    "unit",
    "size",
    "rect",
    "style",
]

from dataclasses import dataclass

from ._error import ArityError, UnitError
from ._merge import merge

# Suffix written after a number -> Val.unit
UNIT_SUFFIXES = {
    "px": "px",
    "pct": "percent",
}


@dataclass(frozen=True)
class Val:
    """A length.

    Attributes:
        unit: One of "px", "percent", "auto" or "undefined"
        value: Magnitude, only meaningful for px and percent
    """
    unit: str = "undefined"
    value: float = 0.0

    @classmethod
    def px(cls, value):
        return cls("px", float(value))

    @classmethod
    def percent(cls, value):
        return cls("percent", float(value))

    def __str__(self):
        match self.unit:
            case "px":
                return f"{self.value:g}px"
            case "percent":
                return f"{self.value:g}%"
        return self.unit


AUTO = Val("auto")
UNDEFINED = Val("undefined")

# Bare words accepted in place of a number and suffix
UNIT_KEYWORDS = {
    "auto": AUTO,
    "undefined": UNDEFINED,
}


@dataclass(frozen=True)
class Size:
    """Width and height pair."""
    width: Val = UNDEFINED
    height: Val = UNDEFINED


@dataclass(frozen=True)
class Rect:
    """Four side lengths, as used for margins, padding and borders."""
    left: Val = UNDEFINED
    right: Val = UNDEFINED
    top: Val = UNDEFINED
    bottom: Val = UNDEFINED

    @classmethod
    def all(cls, value):
        return cls(value, value, value, value)


@dataclass(frozen=True)
class Style:
    """Flexbox style of a UI node.

    The defaults describe an unstyled node; `style()` and node overrides
    replace individual fields.
    """
    display: str = "flex"
    position_type: str = "relative"
    direction: str = "inherit"
    flex_direction: str = "row"
    flex_wrap: str = "no_wrap"
    align_items: str = "stretch"
    align_self: str = "auto"
    align_content: str = "stretch"
    justify_content: str = "flex_start"
    position: Rect = Rect()
    margin: Rect = Rect()
    padding: Rect = Rect()
    border: Rect = Rect()
    flex_grow: float = 0.0
    flex_shrink: float = 1.0
    flex_basis: Val = AUTO
    size: Size = Size(AUTO, AUTO)
    min_size: Size = Size(AUTO, AUTO)
    max_size: Size = Size(AUTO, AUTO)
    aspect_ratio: float | None = None
    overflow: str = "visible"


def unit(value, suffix=None):
    """Build a length from a number and suffix.

    `unit(10, "px")` is 10 pixels, `unit(50, "pct")` is 50 percent.
    `unit("auto")` and `unit("undefined")` give the keyword lengths, and a
    Val passes through unchanged.

    Raises:
        UnitError: Unknown suffix or keyword
    """
    if suffix is None:
        if isinstance(value, Val):
            return value
        if isinstance(value, str) and value in UNIT_KEYWORDS:
            return UNIT_KEYWORDS[value]
        raise UnitError(f"Expected a length keyword (auto, undefined), got {value!r}")
    try:
        kind = UNIT_SUFFIXES[suffix]
    except KeyError:
        raise UnitError(f"Unknown unit suffix {suffix!r}, expected px or pct") from None
    return Val(kind, float(value))


def _length(arg):
    """Coerce a size/rect argument into a Val."""
    if isinstance(arg, tuple):
        return unit(*arg)
    return unit(arg)


def size(width, height):
    """Build a Size; arguments stay in width, height order.

    Each argument is a Val, a keyword, or a (number, suffix) pair.
    """
    return Size(_length(width), _length(height))


def rect(*sides):
    """Build a Rect with CSS style shorthand.

    - `rect(v)`: all four sides are v
    - `rect(h, v)`: left and right are h, top and bottom are v
    - `rect(left, top, right, bottom)`: each side given

    The four argument form is left, top, right, bottom, not the CSS
    top, right, bottom, left order.

    Raises:
        ArityError: Any other number of sides
    """
    lengths = [_length(side) for side in sides]
    match lengths:
        case [value]:
            return Rect.all(value)
        case [horizontal, vertical]:
            return Rect(left=horizontal, right=horizontal,
                        top=vertical, bottom=vertical)
        case [left, top, right, bottom]:
            return Rect(left=left, right=right, top=top, bottom=bottom)
    raise ArityError(f"rect() takes 1, 2 or 4 sides, got {len(lengths)}")


def style(*pairs, **fields):
    """Build a Style from the default with named fields replaced.

    Positional arguments are (name, value) pairs applied in order, then
    keyword arguments. A repeated name keeps its last value.
    """
    return merge(Style(), [*pairs, *fields.items()])
