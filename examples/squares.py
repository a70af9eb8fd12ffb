"""Names used by squares.uit when run with `uitree squares.uit --run`."""

import collections

import uitree

Selectable = collections.namedtuple("Selectable", "side")
Outline = collections.namedtuple("Outline", "color")

Interaction = "Interaction"
Focusable = "Focusable"

square = {"kind": "square", "size": None}
select_square = {"kind": "select_square", "size": uitree.size((40, "px"), (40, "px"))}

highlight = True
