"""Emit build operations from a parsed tree.

The emitter walks the tree depth-first in source order. For each node it
emits CreateNode, one AttachMarker per bundle and marker, and, when the
node has children, BeginChildren, the children, and EndChildren.

Conditional children become RuntimeIf operations. Only the shape of the
code changes: predicates are never evaluated here, and the position of a
conditional group among its unconditional siblings is kept exactly.
"""

__all__ = ["emit"]

from . import _ast
from ._ops import (
    AdoptNode,
    AttachMarker,
    BeginChildren,
    CreateNode,
    EndChildren,
    RuntimeIf,
)


def emit(tree, override_field=None):
    """Generate the operation sequence for a tree.

    Args:
        tree: (Tree) Root node
        override_field: (str | None) Apply node overrides to this field of
            the base template (for example "style") instead of the
            template itself

    Returns:
        (list[Operation]) Operations in build order
    """
    ops = []
    _emit_tree(tree, ops, override_field)
    return ops


def _emit_tree(tree, ops, override_field):
    overrides = tuple((o.field, o.value) for o in tree.overrides)
    ops.append(CreateNode(tree.base, overrides, override_field, node=tree))
    for marker in tree.markers:
        ops.append(AttachMarker(marker.value, marker.bundle, node=marker))
    if tree.children:
        ops.append(BeginChildren(node=tree))
        _emit_children(tree.children, ops, override_field)
        ops.append(EndChildren(node=tree))


def _emit_children(children, ops, override_field):
    for child in children:
        match child:
            case _ast.Tree():
                _emit_tree(child, ops, override_field)
            case _ast.Conditional():
                ops.append(_emit_arms(child.arms, child.orelse, override_field))
            case _ast.Adopt():
                ops.append(AdoptNode(child.node, node=child))
            case _:
                raise TypeError(f"Unexpected child item {child!r}")


def _emit_arms(arms, orelse, override_field):
    """RuntimeIf for the first arm, with the remaining arms nested in else."""
    arm, *rest = arms
    then_ops = []
    _emit_children(arm.children, then_ops, override_field)

    else_ops = []
    if rest:
        else_ops.append(_emit_arms(rest, orelse, override_field))
    elif orelse is not None:
        _emit_children(orelse, else_ops, override_field)

    return RuntimeIf(arm.predicate, tuple(then_ops), tuple(else_ops), node=arm)
