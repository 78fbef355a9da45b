"""
Generic ordered tree used for expression trees.

A node carries a payload and either no children (a leaf) or a fixed-length
list of children ordered left to right. All traversals use an explicit stack
so that deeply nested expressions do not hit the recursion limit.
"""

from typing import Any, Callable, Generic, Iterator, List, Optional, TypeVar

P = TypeVar('P')


class Tree(Generic[P]):
    """
    A tree node.

    Examples:
        leaf = Tree(1)
        node = Tree("+", [Tree(1), Tree(2)])
        node.find_parent(lambda p: p == 2)   # => node
        node.find_path(lambda p: p == 2)     # => [1]
    """

    __slots__ = ('payload', 'children')

    def __init__(self, payload: P, children: Optional[List['Tree[P]']] = None):
        if children is not None:
            arity = getattr(payload, "arity", None)
            if arity is not None and len(children) != arity:
                raise ValueError(
                    f"Node {payload} expects {arity} children, got {len(children)}")
            children = list(children)
        self.payload = payload
        self.children = children

    @property
    def is_leaf(self) -> bool:
        return self.children is None

    def walk(self) -> Iterator['Tree[P]']:
        """Iterate over all nodes in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            if node.children:
                stack.extend(reversed(node.children))

    def walk_postorder(self) -> Iterator['Tree[P]']:
        """
        Iterate over all nodes, children before their parent.

        A node is yielded only after its whole subtree, so the caller may
        replace the yielded node's payload or drop its children.
        """
        stack = [(self, False)]
        while stack:
            node, expanded = stack.pop()
            if expanded or not node.children:
                yield node
                continue
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children))

    def find_parent(self, predicate: Callable[[P], bool]) -> Optional['Tree[P]']:
        """
        Find the parent of the first node (pre-order) whose payload matches.

        Returns None when no node matches, and also when the match is this
        root node, which has no parent.
        """
        stack: List[tuple] = [(self, None)]
        while stack:
            node, parent = stack.pop()
            if predicate(node.payload):
                return parent
            if node.children:
                for child in reversed(node.children):
                    stack.append((child, node))
        return None

    def find_path(self, predicate: Callable[[P], bool]) -> Optional[List[int]]:
        """
        Child-index path from this node to the first pre-order match.

        Returns [] if this node matches and None if nothing matches.
        """
        # Each entry links back to its parent's entry, so paths are only
        # materialized for the match
        stack: List[tuple] = [(self, None)]
        while stack:
            node, link = stack.pop()
            if predicate(node.payload):
                path = []
                while link is not None:
                    index, link = link
                    path.append(index)
                path.reverse()
                return path
            if node.children:
                for i in range(len(node.children) - 1, -1, -1):
                    stack.append((node.children[i], (i, link)))
        return None

    def contains(self, predicate: Callable[[P], bool]) -> bool:
        return any(predicate(node.payload) for node in self.walk())

    def depth(self) -> int:
        """Number of levels; a leaf has depth 1."""
        deepest = 0
        stack = [(self, 1)]
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            if node.children:
                stack.extend((child, level + 1) for child in node.children)
        return deepest

    def size(self) -> int:
        return sum(1 for _ in self.walk())

    def copy(self) -> 'Tree[P]':
        """Deep copy of the structure; payloads are copied if they support copy()."""
        def clone(payload: Any) -> Any:
            return payload.copy() if hasattr(payload, "copy") else payload

        root = Tree(clone(self.payload))
        stack = [(self, root)]
        while stack:
            src, dst = stack.pop()
            if src.children is not None:
                dst.children = [Tree(clone(c.payload)) for c in src.children]
                stack.extend(zip(src.children, dst.children))
        return root

    def __eq__(self, other):
        if not isinstance(other, Tree):
            return NotImplemented
        stack = [(self, other)]
        while stack:
            a, b = stack.pop()
            if a.payload != b.payload:
                return False
            if (a.children is None) != (b.children is None):
                return False
            if a.children is not None:
                if len(a.children) != len(b.children):
                    return False
                stack.extend(zip(a.children, b.children))
        return True

    __hash__ = None

    def __repr__(self) -> str:
        if self.children is None:
            return f"Tree({self.payload!r})"
        return f"Tree({self.payload!r}, {self.children!r})"

    def __str__(self) -> str:
        return "NULL" if self.payload is None else str(self.payload)
