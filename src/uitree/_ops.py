"""Build operations and the executor that runs them against a host.

A compiled description is a flat list of operations that sits between the
AST and the host. Each operation:
- Keeps a reference to the AST node it came from for error reporting
- Holds host expressions compiled but never evaluated at compile time
- Executes against a BuildFrame which owns the host and the namespace

Conditionals are the only nesting: a RuntimeIf holds the operation lists
of both of its outcomes and picks one when the predicate is evaluated at
build time.
"""

__all__ = [
    "Operation",
    "CreateNode",
    "AttachMarker",
    "BeginChildren",
    "EndChildren",
    "RuntimeIf",
    "AdoptNode",
    "Program",
    "BuildFrame",
    "execute",
]

import logging
from dataclasses import dataclass, field

import uitree

from ._error import BuildError
from ._merge import merge
from ._shorthand import RUNTIME_NAME

_log = logging.getLogger(__name__)


class Operation:
    """Base class for build operations.

    Subclasses are frozen dataclasses with a trailing `node` field holding
    the originating AST node. The node is excluded from comparisons.
    """

    def execute(self, frame):
        """Apply this operation to the frame's host."""
        raise NotImplementedError(f"{self.__class__.__name__}.execute() not implemented")

    def expressions(self):
        """Host expressions used by this operation, nested ones included."""
        return []

    def format(self) -> str:
        """Single line description for listings."""
        return self.__class__.__name__

    @property
    def position(self):
        return getattr(self.node, "position", None)


@dataclass(frozen=True)
class CreateNode(Operation):
    """Create a node from the base template with overrides applied.

    Attributes:
        base: Template name looked up in the namespace, None for `entity`
        overrides: Tuple of (field, Expr) in source order
        override_field: Apply overrides to this field of the template
    """
    base: str | None
    overrides: tuple = ()
    override_field: str | None = None
    node: object = field(default=None, compare=False, repr=False)

    def execute(self, frame):
        template = frame.template(self.base, self)
        if self.overrides:
            values = [(name, expr.evaluate(frame.namespace))
                      for name, expr in self.overrides]
            template = merge(template, values, field=self.override_field)
        frame.current = frame.host.create_node(template)
        if frame.root is None:
            frame.root = frame.current

    def expressions(self):
        return [expr for _name, expr in self.overrides]

    def format(self):
        text = f"CreateNode {self.base or 'entity'}"
        if self.overrides:
            fields = ", ".join(f"{name}: {expr.text}" for name, expr in self.overrides)
            target = f".{self.override_field}" if self.override_field else ""
            text += f"{target} {{{fields}}}"
        return text


@dataclass(frozen=True)
class AttachMarker(Operation):
    """Attach a value to the node created last."""
    value: object
    bundle: bool = False
    node: object = field(default=None, compare=False, repr=False)

    def execute(self, frame):
        value = self.value.evaluate(frame.namespace)
        frame.host.attach(frame.current, value, bundle=self.bundle)

    def expressions(self):
        return [self.value]

    def format(self):
        kind = "bundle" if self.bundle else "marker"
        return f"AttachMarker {kind} {self.value.text}"


@dataclass(frozen=True)
class BeginChildren(Operation):
    """Open the children scope of the node created last."""
    node: object = field(default=None, compare=False, repr=False)

    def execute(self, frame):
        parent = frame.current
        frame.host.begin_children(parent)
        frame.scopes.append(parent)


@dataclass(frozen=True)
class EndChildren(Operation):
    """Close the innermost children scope."""
    node: object = field(default=None, compare=False, repr=False)

    def execute(self, frame):
        parent = frame.scopes.pop()
        frame.host.end_children(parent)


@dataclass(frozen=True)
class RuntimeIf(Operation):
    """Run one of two operation lists depending on a build time predicate.

    `else if` chains are nested RuntimeIf operations in `else_ops`.
    """
    predicate: object
    then_ops: tuple = ()
    else_ops: tuple = ()
    node: object = field(default=None, compare=False, repr=False)

    def execute(self, frame):
        taken = bool(self.predicate.evaluate(frame.namespace))
        _log.debug("if (%s) -> %s", self.predicate.text, taken)
        execute(self.then_ops if taken else self.else_ops, frame)

    def expressions(self):
        exprs = [self.predicate]
        for op in self.then_ops + self.else_ops:
            exprs.extend(op.expressions())
        return exprs

    def format(self):
        return f"RuntimeIf ({self.predicate.text})"


@dataclass(frozen=True)
class AdoptNode(Operation):
    """Insert an existing host node into the open children scope."""
    value: object
    node: object = field(default=None, compare=False, repr=False)

    def execute(self, frame):
        if not frame.scopes:
            raise BuildError("id(...) used outside of a children scope", self.position)
        frame.host.adopt(frame.scopes[-1], self.value.evaluate(frame.namespace))

    def expressions(self):
        return [self.value]

    def format(self):
        return f"AdoptNode {self.value.text}"


def execute(operations, frame):
    """Execute a sequence of operations in order."""
    for op in operations:
        op.execute(frame)


class BuildFrame:
    """Runtime state of one build.

    Attributes:
        host: The host receiving the calls
        namespace: Globals dict host expressions evaluate in
        current: Node created last
        scopes: Parents of the open children scopes, innermost last
        root: First node created
    """

    def __init__(self, host, namespace=None):
        self.host = host
        self.namespace = dict(namespace or {})
        self.namespace[RUNTIME_NAME] = uitree
        self.current = None
        self.scopes = []
        self.root = None

    def template(self, name, op):
        """Look up a base template by name; None is the empty preset."""
        if name is None:
            return None
        try:
            return self.namespace[name]
        except KeyError:
            raise BuildError(f"Base template '{name}' is not defined", op.position) from None

    def close(self):
        """End every children scope still open, innermost first."""
        while self.scopes:
            self.host.end_children(self.scopes.pop())


class Program:
    """Compiled tree description.

    Attributes:
        operations: Top level operation list
        source: (str | None) Description text it was compiled from
        filename: (str | None) Name of the source
    """

    def __init__(self, operations, source=None, filename=None):
        self.operations = tuple(operations)
        self.source = source
        self.filename = filename

    def __iter__(self):
        return iter(self.operations)

    def __len__(self):
        return len(self.operations)

    def __repr__(self):
        return f"Program<{self.filename or 'text'}, {len(self.operations)} ops>"

    def expressions(self):
        """Every host expression in the program, in source order."""
        exprs = []
        for op in self.operations:
            exprs.extend(op.expressions())
        return exprs

    def run(self, host, namespace=None):
        """Execute the program against a host.

        Children scopes left open by a failing operation are closed before
        the error propagates.

        Args:
            host: (Host) Receives the build calls
            namespace: (dict | None) Base templates and every name the
                host expressions use

        Returns:
            The root node returned by the host
        """
        frame = BuildFrame(host, namespace)
        try:
            execute(self.operations, frame)
        finally:
            frame.close()
        return frame.root

    def format(self) -> str:
        """Indented listing of the operations."""
        lines = []
        _format_ops(self.operations, lines, 0)
        return "\n".join(lines)


def _format_ops(operations, lines, indent):
    for op in operations:
        if isinstance(op, EndChildren):
            indent -= 1
        lines.append("  " * indent + op.format())
        if isinstance(op, BeginChildren):
            indent += 1
        elif isinstance(op, RuntimeIf):
            _format_ops(op.then_ops, lines, indent + 1)
            if op.else_ops:
                lines.append("  " * indent + "else")
                _format_ops(op.else_ops, lines, indent + 1)
