"""Override resolution by record update.

A node's overrides are applied to its base template by copying the
template and overwriting the named fields. Field names are not checked
here; a name the record type does not have fails in the record type
itself (dataclasses and named tuples raise TypeError or ValueError), and
that error propagates unchanged.
"""

__all__ = ["merge"]

import copy
import dataclasses
from collections.abc import Mapping, MutableMapping


def merge(base, overrides, field=None):
    """Copy a record and overwrite named fields.

    Duplicate names resolve last-write-wins. With no overrides the base is
    returned as is, not copied.

    Args:
        base: Record to start from: a dataclass instance, named tuple,
            mapping or plain object
        overrides: Iterable of (name, value) pairs, or a mapping
        field: (str | None) Apply the overrides to this field of the base
            instead, storing the updated sub-record on a copy of the base

    Returns:
        New record with the overrides applied
    """
    if isinstance(overrides, Mapping):
        overrides = overrides.items()
    updates = dict(overrides)
    if not updates:
        return base

    if field is not None:
        if isinstance(base, Mapping):
            inner = base[field]
        else:
            inner = getattr(base, field)
        return _update(base, {field: _update(inner, updates)})
    return _update(base, updates)


def _update(record, updates):
    """Copy-then-overwrite for a single record."""
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        return dataclasses.replace(record, **updates)
    if isinstance(record, tuple) and hasattr(record, "_replace"):
        return record._replace(**updates)
    if isinstance(record, MutableMapping):
        copied = copy.copy(record)
        copied.update(updates)
        return copied
    if isinstance(record, Mapping):
        return {**record, **updates}

    copied = copy.copy(record)
    for name, value in updates.items():
        setattr(copied, name, value)
    return copied
