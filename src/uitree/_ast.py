"""AST nodes for tree descriptions.

The parser builds these from source text and the emitter consumes them.
Nodes are immutable dataclasses. Source positions are carried on every
node for error reporting but never take part in comparisons, so two
descriptions that differ only in layout or trailing commas produce equal
trees.

Every node can `unparse()` itself back into description text.
"""

__all__ = [
    "SourcePosition",
    "AstNode",
    "Expr",
    "Override",
    "Marker",
    "Tree",
    "Arm",
    "Conditional",
    "Adopt",
    "EMPTY_PRESET",
]

import functools
from dataclasses import dataclass, field

from ._error import ParseError

# Base name that creates a node with no template.
EMPTY_PRESET = "entity"


@dataclass(frozen=True)
class SourcePosition:
    """Source code position information for AST nodes.

    Attributes:
        filename: Source file path, or None for inline text
        start_line: Starting line number (1-indexed)
        start_column: Starting column number (1-indexed)
        end_line: Ending line number (1-indexed)
        end_column: Ending column number (1-indexed)
    """
    filename: str | None = None
    start_line: int | None = None
    start_column: int | None = None
    end_line: int | None = None
    end_column: int | None = None

    def __str__(self) -> str:
        """Format position for error messages."""
        if not self.start_line:
            return ""
        if self.filename:
            return f"at {self.filename}:{self.start_line}:{self.start_column}"
        return f"on line {self.start_line}"


class AstNode:
    """Base class for all AST nodes.

    Subclasses are frozen dataclasses and must implement unparse().
    """

    def unparse(self) -> str:
        """Convert this node back to description text.

        The result parses back to an equal node.
        """
        raise NotImplementedError(f"{self.__class__.__name__}.unparse() not implemented")

    def find_all(self, node_type) -> list["AstNode"]:
        """Find all nodes of the given type, depth-first in source order."""
        results = []
        if isinstance(self, node_type):
            results.append(self)
        for value in self.__dict__.values():
            if isinstance(value, AstNode):
                results.extend(value.find_all(node_type))
            elif isinstance(value, tuple):
                for item in value:
                    if isinstance(item, AstNode):
                        results.extend(item.find_all(node_type))
        return results


@dataclass(frozen=True)
class Expr(AstNode):
    """Host expression, kept as Python source.

    Attributes:
        source: Python source with shorthand macros expanded
        text: The expression exactly as written in the description
        position: Where the expression was written
    """
    source: str
    text: str
    position: SourcePosition | None = field(default=None, compare=False, repr=False)

    @functools.cached_property
    def code(self):
        """Compiled code object, built on first use.

        Raises:
            ParseError: The text is not a valid Python expression
        """
        pos = self.position or SourcePosition()
        # Parens let the expression span lines like it does in the description
        try:
            return compile(f"({self.source})", pos.filename or "<uitree>", "eval")
        except SyntaxError as e:
            raise ParseError(
                f"Invalid expression {self.text!r}: {e.msg}",
                token=self.text,
                line=pos.start_line,
                column=pos.start_column,
                filename=pos.filename,
            ) from e

    def check(self):
        """Compile now so a malformed expression fails before any build."""
        return self.code

    def evaluate(self, namespace):
        """Evaluate against a namespace dict of globals.

        Expressions run with `eval`, so descriptions and namespaces must be
        trusted input. `render_python` produces source that can be reviewed
        and imported instead.
        """
        return eval(self.code, namespace)

    def unparse(self) -> str:
        return self.text


@dataclass(frozen=True)
class Override(AstNode):
    """Named field replaced on the node's base template."""
    field: str
    value: Expr

    def unparse(self) -> str:
        return f"{self.field}: {self.value.unparse()}"


@dataclass(frozen=True)
class Marker(AstNode):
    """Extra value attached to a node after it is created.

    Bundles are written before the `;` in a marker block and attach
    before plain markers.
    """
    value: Expr
    bundle: bool = False
    position: SourcePosition | None = field(default=None, compare=False, repr=False)

    def unparse(self) -> str:
        return self.value.unparse()


@dataclass(frozen=True)
class Tree(AstNode):
    """One node of the scene and its children.

    Attributes:
        base: Template name, or None for the empty `entity` preset
        overrides: Override fields in source order, duplicates kept
        markers: Bundles then markers, in source order
        children: Child items: Tree, Conditional or Adopt
        position: Where the node was written
    """
    base: str | None
    overrides: tuple = ()
    markers: tuple = ()
    children: tuple = ()
    position: SourcePosition | None = field(default=None, compare=False, repr=False)

    @property
    def bundles(self):
        return tuple(m for m in self.markers if m.bundle)

    @property
    def components(self):
        return tuple(m for m in self.markers if not m.bundle)

    def unparse(self) -> str:
        text = self.base if self.base is not None else EMPTY_PRESET
        if self.overrides:
            text += "{" + ", ".join(o.unparse() for o in self.overrides) + "}"
        if self.markers:
            components = ", ".join(m.unparse() for m in self.components)
            if self.bundles:
                bundles = ", ".join(m.unparse() for m in self.bundles)
                text += f"[{bundles}; {components}]"
            else:
                text += f"[{components}]"
        if self.children:
            text += "(" + _unparse_children(self.children) + ")"
        return text


@dataclass(frozen=True)
class Arm(AstNode):
    """Predicate and the children it contributes when true."""
    predicate: Expr
    children: tuple = ()
    position: SourcePosition | None = field(default=None, compare=False, repr=False)

    def unparse(self) -> str:
        return f"if ({self.predicate.unparse()}) {{{_unparse_children(self.children)}}}"


@dataclass(frozen=True)
class Conditional(AstNode):
    """Group of children chosen at build time.

    The first arm whose predicate is true contributes its children. When
    none match, `orelse` contributes instead, or nothing if it is None.
    """
    arms: tuple
    orelse: tuple | None = None
    position: SourcePosition | None = field(default=None, compare=False, repr=False)

    def unparse(self) -> str:
        text = " else ".join(arm.unparse() for arm in self.arms)
        if self.orelse is not None:
            text += f" else {{{_unparse_children(self.orelse)}}}"
        return text


@dataclass(frozen=True)
class Adopt(AstNode):
    """Existing host node inserted as a child, written `id(node)`."""
    node: Expr
    position: SourcePosition | None = field(default=None, compare=False, repr=False)

    def unparse(self) -> str:
        return f"id({self.node.unparse()})"


def _unparse_children(children):
    return ", ".join(child.unparse() for child in children)
