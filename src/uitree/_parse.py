"""Parse tree descriptions into AST nodes.

Parsing happens in two steps. Lark turns the text into its own parse tree
using the grammar in `lark/uitree.lark`, then the converter walks that tree
and builds the immutable nodes from `uitree._ast`. The lark tree is
considered too unstable to expose through the api; it is only used by the
`--lark` mode of the command line.

Host expressions are not understood by the grammar beyond balanced
brackets. Their source is sliced back out of the original text, with any
shorthand macros replaced by their expansion.
"""

__all__ = [
    "parse",
    "parse_expr",
    "parse_lark",
    "pos_from_lark",
]

import logging

import lark

from . import _ast, _shorthand
from ._error import ParseError

_log = logging.getLogger(__name__)


def parse(text, filename=None):
    """Parse a tree description.

    Args:
        text: (str) Description source
        filename: (str | None) Name used in positions and error messages

    Returns:
        (Tree) Root node

    Raises:
        ParseError: The text is not a valid description
    """
    tree = parse_lark(text, "start", filename)
    root = _Converter(text, filename).convert(tree.children[0])
    if isinstance(root, _ast.Adopt):
        raise _error_at(
            "id(...) inserts an existing node as a child and cannot be the root",
            tree.children[0], text, filename)
    return root


def parse_expr(text, filename=None):
    """Parse a standalone host expression, expanding shorthand macros.

    Args:
        text: (str) Expression source, such as `rect!(2 px, 4 px)`
        filename: (str | None) Name used in positions and error messages

    Returns:
        (Expr) Parsed expression
    """
    tree = parse_lark(text, "value", filename)
    return _Converter(text, filename).convert(tree.children[0])


def parse_lark(text, start="start", filename=None):
    """Run the lark parser and translate its errors.

    Args:
        text: (str) Source to parse
        start: (str) Grammar start rule, "start" or "value"
        filename: (str | None) Name used in error messages

    Returns:
        (lark.Tree) Raw lark parse tree
    """
    parser = _lark_parser("uitree")
    try:
        return parser.parse(text, start=start)
    except lark.UnexpectedInput as e:
        raise _translate_error(parser, e, text, filename) from e


def pos_from_lark(treetoken, filename=None):
    """Create the SourcePosition from a lark Tree or Token value."""
    if isinstance(treetoken, lark.Token):
        token = treetoken
        return _ast.SourcePosition(
            filename,
            token.line,
            token.column,
            token.end_line or token.line,
            token.end_column or token.column,
        )
    meta = treetoken.meta
    if getattr(meta, "empty", True):
        return _ast.SourcePosition(filename)
    return _ast.SourcePosition(
        filename,
        meta.line,
        meta.column,
        meta.end_line or meta.line,
        meta.end_column or meta.column,
    )


class _Converter:
    """Build AST nodes from a lark tree.

    Holds the source text so expressions can be sliced from it.
    """

    def __init__(self, text, filename):
        self.text = text
        self.filename = filename

    def convert(self, tree):
        """Convert a single lark tree to an AST node.

        This recurses into child nodes of the tree.

        Args:
            tree: (lark.Tree) Lark tree to convert

        Returns:
            (AstNode) converted node
        """
        kids = tree.children
        match tree.data:
            case "tree":
                name = kids[0].value
                base = None if name == _ast.EMPTY_PRESET else name
                overrides = markers = children = ()
                for kid in kids[1:]:
                    match kid.data:
                        case "overrides":
                            overrides = tuple(self.convert(k) for k in kid.children)
                        case "markers":
                            markers = self._markers(kid)
                        case "children":
                            children = self._children(kid)
                if base is None and overrides:
                    raise self.error(
                        f"'{_ast.EMPTY_PRESET}' has no template to override", kids[0])
                return _ast.Tree(
                    base, overrides, markers, children, position=self.pos(tree))

            case "override":
                return _ast.Override(kids[0].value, self.convert(kids[1]))

            case "cond":
                arms = [_ast.Arm(self.convert(kids[0]), self._children(kids[1]),
                                 position=self.pos(tree))]
                orelse = None
                for kid in kids[2:]:
                    if kid.data == "elif_arm":
                        arms.append(_ast.Arm(
                            self.convert(kid.children[0]),
                            self._children(kid.children[1]),
                            position=self.pos(kid)))
                    else:
                        orelse = self._children(kid.children[0])
                return _ast.Conditional(tuple(arms), orelse, position=self.pos(tree))

            case "adopt":
                return _ast.Adopt(self.convert(kids[0]), position=self.pos(tree))

            case "expr":
                start, end = _span(tree)
                return _ast.Expr(
                    self.render(kids),
                    self.text[start:end],
                    position=self.pos(tree),
                )

            case _:
                raise ValueError(f"Unhandled grammar rule: {tree.data}")

    def _children(self, tree):
        """Convert a `children` or `branch` node to a tuple of child items."""
        return tuple(self.convert(kid) for kid in tree.children)

    def _markers(self, tree):
        """Bundles before the `;` (if any), then markers."""
        groups = tree.children
        bundles = groups[0].children if len(groups) == 2 else []
        components = groups[-1].children
        return (
            tuple(self._marker(kid, True) for kid in bundles)
            + tuple(self._marker(kid, False) for kid in components)
        )

    def _marker(self, tree, bundle):
        return _ast.Marker(self.convert(tree), bundle, position=self.pos(tree))

    def render(self, items):
        """Python source covering a run of expression items.

        Text between items (spacing, newlines, comments) is kept as
        written; shorthand macros are replaced by their expansion.
        """
        pieces = []
        cursor = None
        for item in items:
            start, end = _span(item)
            if cursor is not None:
                pieces.append(self.text[cursor:start])
            if isinstance(item, lark.Token):
                pieces.append(item.value)
            elif item.data == "macro":
                pieces.append(_shorthand.expand(item, self))
            else:
                pieces.append(self.render(item.children))
            cursor = end
        return "".join(pieces)

    def pos(self, treetoken):
        return pos_from_lark(treetoken, self.filename)

    def error(self, message, treetoken, cls=ParseError):
        """Create a positioned error for a lark tree or token."""
        return _error_at(message, treetoken, self.text, self.filename, cls)


def _span(treetoken):
    """Start and end offsets of a lark token or of a tree's first and last tokens."""
    if isinstance(treetoken, lark.Token):
        return treetoken.start_pos, treetoken.end_pos
    start = _span(treetoken.children[0])[0]
    end = _span(treetoken.children[-1])[1]
    return start, end


def _error_at(message, treetoken, text, filename, cls=ParseError):
    """Positioned error for a converted lark tree or token."""
    if isinstance(treetoken, lark.Token):
        token = treetoken.value
    else:
        start, end = _span(treetoken)
        token = text[start:end]
    pos = pos_from_lark(treetoken, filename)
    return cls(message, token=token, line=pos.start_line,
               column=pos.start_column, filename=filename)


def _translate_error(parser, error, text, filename):
    """Convert a lark UnexpectedInput into a ParseError."""
    context = None
    if getattr(error, "pos_in_stream", None) is not None:
        context = error.get_context(text)
    if isinstance(error, lark.UnexpectedCharacters):
        return ParseError(
            f"Unexpected character {error.char!r}",
            token=error.char, line=error.line, column=error.column,
            filename=filename, context=context,
        )
    if isinstance(error, lark.UnexpectedToken):
        token = error.token
        expected = sorted(_describe_terminal(parser, name) for name in error.expected)
        if token.type == "$END":
            message = "Unexpected end of input"
        else:
            message = f"Unexpected {token.value!r}"
        if expected:
            message += f", expected {', '.join(expected)}"
        return ParseError(
            message, token=token.value, line=error.line, column=error.column,
            filename=filename, context=context,
        )
    return ParseError(
        str(error), line=getattr(error, "line", None),
        column=getattr(error, "column", None), filename=filename, context=context,
    )


def _describe_terminal(parser, name):
    """Readable form of a terminal name for error messages."""
    if name == "$END":
        return "end of input"
    try:
        pattern = parser.get_terminal(name).pattern
    except KeyError:
        return name
    if pattern.type == "str":
        return repr(pattern.value)
    return name


_parsers = {}


def _lark_parser(name):
    """Get globally shared lark parser.

    Args:
        name: (str) name of the grammar file (without .lark)

    Returns:
        (lark.Lark) Parser instance
    """
    parser = _parsers.get(name)
    if parser is not None:
        return parser

    path = f"lark/{name}.lark"
    parser = lark.Lark.open(
        path,
        rel_to=__file__,
        parser="lalr",
        propagate_positions=True,
        start=["start", "value"],
    )
    _log.debug("Loaded grammar %s", path)
    _parsers[name] = parser
    return parser
