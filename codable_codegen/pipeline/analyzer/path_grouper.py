"""
Grouping of nested fields by shared key-path prefix.
"""

from __future__ import annotations

from .ir_nodes import Field, PathGroup


def shares_group_prefix(a: tuple[str, ...], b: tuple[str, ...]) -> bool:
    """True if ``a`` and ``b`` agree on their first ``min(len(a), len(b)) - 1`` segments."""
    overlap = min(len(a), len(b)) - 1
    return a[:overlap] == b[:overlap]


def common_prefix(paths: list[tuple[str, ...]]) -> tuple[str, ...]:
    if not paths:
        return ()
    prefix = paths[0]
    for path in paths[1:]:
        length = 0
        for left, right in zip(prefix, path):
            if left != right:
                break
            length += 1
        prefix = prefix[:length]
    return prefix


class PathGrouper:
    """Partitions nested fields into container-sharing groups, preserving order."""

    def group(self, fields: list[Field]) -> list[PathGroup]:
        groups: list[list[Field]] = []
        for nested in fields:
            if nested.key_path is None:
                continue
            for members in groups:
                if shares_group_prefix(members[0].key_path, nested.key_path):
                    members.append(nested)
                    break
            else:
                groups.append([nested])

        return [
            PathGroup(fields=members, prefix=common_prefix([m.key_path[:-1] for m in members])) for members in groups
        ]
