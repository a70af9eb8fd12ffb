"""Host interface driven by compiled programs.

The host owns the real scene: it creates nodes from template values,
attaches extra values to them and parents new nodes under the node whose
children scope is open. `Host` documents the calls; `RecordingHost` is a
complete implementation that builds plain `Node` objects, used by the
tests and the command line.
"""

__all__ = ["Host", "Node", "RecordingHost", "children"]

import contextlib

from ._error import BuildError


class Host:
    """Interface and base class for hosts.

    Subclasses must implement every method.
    """

    def create_node(self, template):
        """Create a node from a template value.

        When a children scope is open the new node becomes a child of that
        scope's parent. The template is None for the `entity` preset.

        Returns:
            Host node handle, passed back to the other calls
        """
        raise NotImplementedError(f"{self.__class__.__name__}.create_node() not implemented")

    def attach(self, node, value, bundle=False):
        """Attach an extra value to a node."""
        raise NotImplementedError(f"{self.__class__.__name__}.attach() not implemented")

    def begin_children(self, parent):
        """Open the children scope of a node."""
        raise NotImplementedError(f"{self.__class__.__name__}.begin_children() not implemented")

    def end_children(self, parent):
        """Close the children scope opened for the same node."""
        raise NotImplementedError(f"{self.__class__.__name__}.end_children() not implemented")

    def adopt(self, parent, node):
        """Make an existing node a child of parent."""
        raise NotImplementedError(f"{self.__class__.__name__}.adopt() not implemented")


@contextlib.contextmanager
def children(host, parent):
    """Children scope of parent, closed on exit even when the build fails."""
    host.begin_children(parent)
    try:
        yield parent
    finally:
        host.end_children(parent)


class Node:
    """Node built by RecordingHost.

    Attributes:
        template: Value the node was created from
        bundles: Values attached as bundles, in order
        markers: Values attached as markers, in order
        children: Child nodes, in order
        parent: Parent node or None
    """

    def __init__(self, template):
        self.template = template
        self.bundles = []
        self.markers = []
        self.children = []
        self.parent = None

    def __repr__(self):
        return f"Node({self.template!r})"

    def format(self, indent=0):
        """Indented outline of this node and its descendants."""
        text = "  " * indent + repr(self.template)
        extras = [repr(b) for b in self.bundles] + [repr(m) for m in self.markers]
        if extras:
            text += f" [{', '.join(extras)}]"
        lines = [text]
        for child in self.children:
            lines.append(child.format(indent + 1))
        return "\n".join(lines)


class RecordingHost(Host):
    """Host that builds Node objects and logs every call.

    Attributes:
        roots: Nodes created outside of any children scope
        calls: List of (call, value) tuples in call order. Calls are
            "create" (template), "attach" and "bundle" (value), "begin"
            and "end" (node), "adopt" (node)
    """

    def __init__(self):
        self.roots = []
        self.calls = []
        self._scopes = []

    def create_node(self, template):
        node = Node(template)
        if self._scopes:
            self._add_child(self._scopes[-1], node)
        else:
            self.roots.append(node)
        self.calls.append(("create", template))
        return node

    def attach(self, node, value, bundle=False):
        if bundle:
            node.bundles.append(value)
            self.calls.append(("bundle", value))
        else:
            node.markers.append(value)
            self.calls.append(("attach", value))

    def begin_children(self, parent):
        self._scopes.append(parent)
        self.calls.append(("begin", parent))

    def end_children(self, parent):
        if not self._scopes or self._scopes[-1] is not parent:
            raise BuildError(f"Children scope of {parent!r} is not the open scope")
        self._scopes.pop()
        self.calls.append(("end", parent))

    def adopt(self, parent, node):
        if not isinstance(node, Node):
            raise BuildError(f"Cannot adopt {node!r}, not a node of this host")
        if node.parent is not None:
            node.parent.children.remove(node)
        elif node in self.roots:
            self.roots.remove(node)
        self._add_child(parent, node)
        self.calls.append(("adopt", node))

    def _add_child(self, parent, node):
        node.parent = parent
        parent.children.append(node)
