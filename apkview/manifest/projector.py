#!/usr/bin/env python3
"""
Manifest Projector Module - lazy view model for the interactive manifest tree

A ``RenderNode`` resolves only its own tag name, attribute list and the
(tag, node) references of its direct children. Child RenderNodes are built
when they are asked for, so expanding one branch never walks the others.

Projection is pure: projecting the same decoded node twice gives structurally
identical trees. Expand/collapse state is not part of a RenderNode; it lives
in ``ExpansionState``, keyed by the node's structural path (child indices
from the root).

```python
root = project_root(manifest)
state = ExpansionState()
for child in root.children:
    print(child.tag_name, child.attributes, state.is_expanded(child.path))
```
"""

from collections.abc import Mapping, Sequence
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .classifier import ValueKind, kind_of, partition, prepare_root
from .exceptions import EmptyOrMissingRoot
from .mapping import ROOT_TAG


Path = Tuple[int, ...]


class RenderNode:
    """
    One element of the projected manifest tree

    Attributes:
        tag_name: XML tag name
        attributes: Ordered (name, value) pairs, values unescaped
        path: Child indices leading from the root to this node
    """

    __slots__ = ('tag_name', 'attributes', 'path', '_child_refs')

    def __init__(self, tag_name: str, node: Mapping, path: Path = ()):
        attributes, children = partition(node)
        self.tag_name = tag_name
        self.attributes: Tuple[Tuple[str, str], ...] = tuple(attributes)
        self.path = path
        self._child_refs: Tuple[Tuple[str, Mapping], ...] = tuple(children)

    @property
    def children(self) -> "RenderChildren":
        """Children as a lazy sequence of RenderNodes"""
        return RenderChildren(self)

    @property
    def has_children(self) -> bool:
        return bool(self._child_refs)

    @property
    def child_tags(self) -> List[str]:
        return [tag for tag, _ in self._child_refs]

    def child(self, index: int) -> "RenderNode":
        """Build the RenderNode of the child at ``index``"""
        tag, node = self._child_refs[index]
        return RenderNode(tag, node, self.path + (index,))

    def find(self, path: Path) -> "RenderNode":
        """Follow ``path`` (relative to this node) down the tree"""
        node = self
        for index in path:
            node = node.child(index)
        return node

    def to_dict(self) -> Dict[str, Any]:
        """Fully materialize this subtree (tests, JSON export)"""
        return {
            'tag': self.tag_name,
            'attributes': [list(attr) for attr in self.attributes],
            'children': [child.to_dict() for child in self.children],
        }

    def __repr__(self) -> str:
        return (
            f"RenderNode(tag_name={self.tag_name!r}, attributes={len(self.attributes)}, "
            f"children={len(self._child_refs)}, path={self.path!r})"
        )


class RenderChildren(Sequence):
    """Sequence view over a RenderNode's children, built on access"""

    __slots__ = ('_parent',)

    def __init__(self, parent: RenderNode):
        self._parent = parent

    def __len__(self) -> int:
        return len(self._parent._child_refs)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self._parent.child(i) for i in range(*index.indices(len(self)))]
        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            raise IndexError("child index out of range")
        return self._parent.child(index)


def project(node: Any, tag_name: str = ROOT_TAG, path: Path = ()) -> RenderNode:
    """
    Project a decoded node into a RenderNode

    Args:
        node: Decoded manifest node
        tag_name: Tag to give the node
        path: Structural path of the node

    Returns:
        RenderNode: Lazy view of the node

    Raises:
        EmptyOrMissingRoot: If ``node`` is not object-shaped
    """
    if kind_of(node) is not ValueKind.NODE:
        raise EmptyOrMissingRoot(node)
    return RenderNode(tag_name, node, path)


def project_root(manifest: Any) -> RenderNode:
    """Project a manifest root, with the android namespace declaration injected"""
    return RenderNode(ROOT_TAG, prepare_root(manifest))


def walk(root: RenderNode) -> Iterator[RenderNode]:
    """Pre-order traversal, materializing one node at a time"""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        for index in reversed(range(len(node.children))):
            stack.append(node.child(index))


def flatten(root: RenderNode) -> List[Tuple[str, List[str]]]:
    """Pre-order (tag name, attribute names) pairs of the whole tree"""
    return [(node.tag_name, [name for name, _ in node.attributes]) for node in walk(root)]


class ExpansionState:
    """
    Expand/collapse flags for the displayed tree, keyed by structural path

    The root is expanded unless told otherwise; every other node starts
    collapsed. The projection itself never reads or writes this.
    """

    def __init__(self, root_expanded: bool = True):
        self.root_expanded = root_expanded
        self._flags: Dict[Path, bool] = {}

    def is_expanded(self, path: Path) -> bool:
        if path in self._flags:
            return self._flags[path]
        return path == () and self.root_expanded

    def set_expanded(self, path: Path, expanded: bool = True) -> None:
        self._flags[tuple(path)] = expanded

    def toggle(self, path: Path) -> bool:
        """Flip a node's flag and return the new value"""
        expanded = not self.is_expanded(tuple(path))
        self._flags[tuple(path)] = expanded
        return expanded

    def expand_path(self, path: Path) -> None:
        """Expand a node and every ancestor leading to it"""
        for length in range(len(path) + 1):
            self._flags[tuple(path[:length])] = True

    def expand_to_depth(self, root: RenderNode, depth: int) -> None:
        """Expand every node whose depth is below ``depth`` (root is depth 0)"""
        if depth <= 0:
            self.root_expanded = False
            self._flags.pop(root.path, None)
            return
        pending = [root]
        while pending:
            node = pending.pop()
            if len(node.path) >= depth or not node.has_children:
                continue
            self._flags[node.path] = True
            pending.extend(node.children)

    def expand_all(self, root: RenderNode) -> None:
        for node in walk(root):
            if node.has_children:
                self._flags[node.path] = True

    def collapse_all(self) -> None:
        self._flags.clear()
        self.root_expanded = False

    def reset(self) -> None:
        self._flags.clear()
        self.root_expanded = True

    @staticmethod
    def parse_path(text: Optional[str]) -> Path:
        """Parse a dotted path such as ``"1.0"``; empty means the root"""
        if not text:
            return ()
        try:
            return tuple(int(part) for part in text.split("."))
        except ValueError:
            raise ValueError(f"Invalid tree path: {text!r}") from None
