from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Union


@dataclass
class Directory:
    children: dict[str, TreeNode] = field(default_factory=dict)


@dataclass
class Leaf:
    record: Any


TreeNode = Union[Directory, Leaf]


@dataclass(frozen=True)
class Collision:
    """An existing entry discarded while building a tree.

    `path` is the normalized location of the discarded node and `record` is the
    incoming record that took its place (or needed it as a directory).
    """

    path: str
    discarded: TreeNode
    record: Any


def record_path(record: Any) -> Any:
    if isinstance(record, Mapping):
        return record.get("path")
    return getattr(record, "path", None)


def split_path(path: Any) -> list[str]:
    if not isinstance(path, str):
        return []
    return [segment for segment in path.split("/") if segment]


def normalize_path(path: Any) -> str:
    return "/" + "/".join(split_path(path))


def build_tree(
    records: Iterable[Any] | None,
    on_collision: Callable[[Collision], object] | None = None,
) -> Directory:
    """Arrange path-annotated records into a directory tree.

    Records whose path has no non-empty segment are omitted. A later record
    always wins its key: a leaf standing where a directory is needed is replaced
    by an empty directory, and the final segment overwrites whatever was there.
    `on_collision` is told about every entry discarded that way.
    """
    root = Directory()
    if records is None:
        return root

    for record in records:
        segments = split_path(record_path(record))
        if not segments:
            continue

        leaf_name = segments[-1]
        current = root
        walked: list[str] = []
        for segment in segments[:-1]:
            walked.append(segment)
            child = current.children.get(segment)
            if isinstance(child, Directory):
                current = child
                continue
            directory = Directory()
            current.children[segment] = directory
            if child is not None and on_collision is not None:
                on_collision(Collision("/" + "/".join(walked), child, record))
            current = directory

        previous = current.children.get(leaf_name)
        current.children[leaf_name] = Leaf(record)
        if previous is not None and on_collision is not None:
            on_collision(Collision("/" + "/".join(segments), previous, record))

    return root


def iter_leaves(root: Directory, prefix: str = "") -> Iterator[tuple[str, Leaf]]:
    # explicit stack, paths can be nested deeper than the recursion limit
    stack: list[tuple[str, TreeNode]] = [
        (f"{prefix}/{name}", root.children[name]) for name in sorted(root.children, reverse=True)
    ]
    while stack:
        path, node = stack.pop()
        if isinstance(node, Leaf):
            yield path, node
        else:
            stack.extend((f"{path}/{name}", node.children[name]) for name in sorted(node.children, reverse=True))


def find_node(root: Directory, path: str) -> TreeNode | None:
    node: TreeNode = root
    for segment in split_path(path):
        if not isinstance(node, Directory):
            return None
        child = node.children.get(segment)
        if child is None:
            return None
        node = child
    return node
