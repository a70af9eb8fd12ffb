"""Render a compiled program as Python source.

The result is a module defining one function that performs the same host
calls the executor would:

    import uitree as _uitree


    def build_ui(_host):
        _n0 = _host.create_node(square)
        with _uitree.children(_host, _n0):
            _n1 = _host.create_node(select_square)
            if (selected):
                _n2 = _host.create_node(marker)
        return _n0

Template names and every name used in expressions are free names of the
generated function, resolved from the globals of the module the source is
executed in. The names `_host`, `_uitree` and `_n<number>` are reserved.
"""

__all__ = ["render_python"]

from ._ops import (
    AdoptNode,
    AttachMarker,
    BeginChildren,
    CreateNode,
    EndChildren,
    RuntimeIf,
)
from ._shorthand import RUNTIME_NAME

INDENT = "    "


def render_python(program, name="build_ui"):
    """Generate Python source for a program.

    Args:
        program: (Program) Compiled program
        name: (str) Name of the generated function

    Returns:
        (str) Module source
    """
    ctx = CodeGenContext()
    origin = program.filename or "inline text"
    ctx.emit(0, f"# Generated by uitree from {origin}. Do not edit.")
    ctx.emit(0, f"import uitree as {RUNTIME_NAME}")
    ctx.emit(0, "")
    ctx.emit(0, "")
    ctx.emit(0, f"def {name}(_host):")
    ctx.build_ops(program.operations, 1)
    ctx.emit(1, f"return {ctx.root or 'None'}")
    return "\n".join(ctx.lines) + "\n"


class CodeGenContext:
    """Source generation state for one program.

    Node variables are numbered in creation order. `current` is the
    variable of the node created last, `parents` the variables of the open
    children scopes.
    """

    def __init__(self):
        self.lines = []
        self.count = 0
        self.current = None
        self.parents = []
        self.root = None

    def emit(self, indent, text):
        self.lines.append(INDENT * indent + text if text else "")

    def build_ops(self, operations, indent):
        """Emit statements for an operation list at an indent level."""
        if not operations:
            self.emit(indent, "pass")
            return
        for op in operations:
            match op:
                case CreateNode():
                    var = f"_n{self.count}"
                    self.count += 1
                    self.emit(indent, f"{var} = _host.create_node({_template(op)})")
                    self.current = var
                    if self.root is None:
                        self.root = var
                case AttachMarker():
                    self.emit(indent, f"_host.attach({self.current}, "
                                      f"({op.value.source}), bundle={op.bundle})")
                case BeginChildren():
                    self.emit(indent, f"with {RUNTIME_NAME}.children(_host, {self.current}):")
                    self.parents.append(self.current)
                    indent += 1
                case EndChildren():
                    self.parents.pop()
                    indent -= 1
                case RuntimeIf():
                    self.build_if(op, indent, "if")
                case AdoptNode():
                    self.emit(indent, f"_host.adopt({self.parents[-1]}, ({op.value.source}))")
                case _:
                    raise TypeError(f"Cannot render operation {op!r}")

    def build_if(self, op, indent, keyword):
        """Emit an if statement; a lone nested RuntimeIf in else becomes elif."""
        self.emit(indent, f"{keyword} ({op.predicate.source}):")
        self.build_ops(op.then_ops, indent + 1)
        else_ops = op.else_ops
        if len(else_ops) == 1 and isinstance(else_ops[0], RuntimeIf):
            self.build_if(else_ops[0], indent, "elif")
        elif else_ops:
            self.emit(indent, "else:")
            self.build_ops(else_ops, indent + 1)


def _template(op):
    """Source for the value a CreateNode passes to the host."""
    if op.base is None:
        return "None"
    if not op.overrides:
        return op.base
    pairs = ", ".join(f"({name!r}, ({expr.source}))" for name, expr in op.overrides)
    if op.override_field:
        return f"{RUNTIME_NAME}.merge({op.base}, [{pairs}], field={op.override_field!r})"
    return f"{RUNTIME_NAME}.merge({op.base}, [{pairs}])"
