from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel

from deploytree.file_tree import Directory, Leaf, TreeNode


def _default_serialize(record: Any) -> Any:
    if isinstance(record, BaseModel):
        return record.model_dump()
    if isinstance(record, Mapping):
        return dict(record)
    return record


def _unknown_node(node: object) -> TypeError:
    return TypeError(f"not a tree node: {type(node).__name__}")


# the walks below keep an explicit stack; deployment paths may nest deeper than
# the interpreter's recursion limit


def tree_to_dict(node: Directory | Leaf, *, serialize: Callable[[Any], Any] | None = None) -> dict[str, Any]:
    serialize = serialize or _default_serialize
    if isinstance(node, Leaf):
        return {"type": "file", "file": serialize(node.record)}
    if not isinstance(node, Directory):
        raise _unknown_node(node)

    out: dict[str, Any] = {"type": "directory", "children": {}}
    stack = [(node, out)]
    while stack:
        directory, target = stack.pop()
        for key in sorted(directory.children):
            child = directory.children[key]
            if isinstance(child, Directory):
                child_out: dict[str, Any] = {"type": "directory", "children": {}}
                stack.append((child, child_out))
            elif isinstance(child, Leaf):
                child_out = {"type": "file", "file": serialize(child.record)}
            else:
                raise _unknown_node(child)
            target["children"][key] = child_out
    return out


def render_tree_text(root: Directory, name: str = "/") -> str:
    if not isinstance(root, Directory):
        raise _unknown_node(root)
    lines = [name]

    def _entries(node: Directory, prefix: str) -> list[tuple[str, TreeNode, str, bool]]:
        keys = sorted(node.children)
        # reversed so that popping yields sorted order
        return [(key, node.children[key], prefix, idx == len(keys) - 1) for idx, key in reversed(list(enumerate(keys)))]

    stack = _entries(root, "")
    while stack:
        key, child, prefix, is_last = stack.pop()
        branch = "`-- " if is_last else "|-- "
        if isinstance(child, Directory):
            lines.append(f"{prefix}{branch}{key}/")
            stack.extend(_entries(child, f"{prefix}{'    ' if is_last else '|   '}"))
        elif isinstance(child, Leaf):
            lines.append(f"{prefix}{branch}{key}")
        else:
            raise _unknown_node(child)
    return "\n".join(lines)


def tree_stats(root: Directory) -> dict[str, int]:
    stats = {"file_count": 0, "directory_count": 0, "max_depth": 0}
    stack = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        for child in node.children.values():
            stats["max_depth"] = max(stats["max_depth"], depth + 1)
            if isinstance(child, Directory):
                stats["directory_count"] += 1
                stack.append((child, depth + 1))
            elif isinstance(child, Leaf):
                stats["file_count"] += 1
            else:
                raise _unknown_node(child)
    return stats
