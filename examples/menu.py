"""Names used by menu.uit with `--override-field style`."""

import dataclasses

import uitree


@dataclasses.dataclass(frozen=True)
class Widget:
    kind: str
    style: uitree.Style = uitree.Style()


@dataclasses.dataclass(frozen=True)
class Label:
    text: str


column = Widget("column")
button = Widget("button", uitree.style(size=uitree.size((100, "pct"), "auto")))

saved_game = False
