"""
The traversal driver and the engine entry point.

L{traverse()} dispatches the root node. Children are only visited when the
handler selected for their parent calls L{Walker.descend()}, which dispatches
each child in declared order, depth first. Handlers that don't descend prune
their subtree; siblings are unaffected.

The walker keeps no record of visited nodes. Cyclic structures recurse until
Python raises L{RecursionError}, unless the visitor sets C{max_depth}.
"""
import logging
from typing import Any, Iterable, List, Optional, TypeVar

from nodewalk.visitable import type_tag
from nodewalk.visitor import Visitor

__all__ = ('Walker', 'TraversalDepthError', 'traverse', 'walk')

S = TypeVar('S')

logger = logging.getLogger(__name__)

class TraversalDepthError(RecursionError):
    """
    Raised when a traversal nests deeper than the visitor's C{max_depth}.
    """

    def __init__(self, max_depth: int, path: List[Any]) -> None:
        super().__init__(
            f"traversal exceeded the maximum depth of {max_depth} "
            f"(below {' > '.join(type(n).__name__ for n in path[-5:])})")
        self.max_depth = max_depth
        self.path = path

class Walker:
    """
    Drives one traversal of a visitor.

    Handlers receive the walker and use it to continue the traversal:

        - C{walker.descend(node)} visits all children of C{node},
        - C{walker.descend(node, children)} visits the given children instead,
        - C{walker.dispatch(child)} visits one child, so a handler can iterate
          C{walker.children(node)} itself and stop early.
    """

    def __init__(self, visitor: Visitor[Any]) -> None:
        self.visitor = visitor
        self.path: List[Any] = []
        """
        Nodes being dispatched, from the root to the current node.
        Only used for diagnostics.
        """

    @property
    def depth(self) -> int:
        """
        Nesting level of the current node, the root is at depth 0.
        """
        return len(self.path) - 1

    @property
    def current(self) -> Optional[Any]:
        return self.path[-1] if self.path else None

    def children(self, node: Any) -> Iterable[Any]:
        """
        Return the children of C{node}, as seen by the visitor.
        """
        return self.visitor.children(node)

    def dispatch(self, node: Any) -> None:
        """
        Run the visitor's most specific handler for C{node}, or its default handler.
        """
        visitor = self.visitor
        if visitor.max_depth is not None and len(self.path) > visitor.max_depth:
            raise TraversalDepthError(visitor.max_depth, list(self.path))

        handler, fallback = visitor.table.select(type_tag(node))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%svisiting %s%s", '  ' * len(self.path), type(node).__name__,
                         ' (default handler)' if fallback else '')

        self.path.append(node)
        try:
            for ext in visitor.extensions.before_visit:
                ext.visit(self, node)
            handler(self, node)
            for ext in visitor.extensions.after_visit:
                ext.visit(self, node)
        finally:
            self.path.pop()

    def descend(self, node: Any, children: Optional[Iterable[Any]] = None) -> None:
        """
        Dispatch each child of C{node} in order.

        @param children: Visit these nodes instead of all children,
            typically a filtered subset of C{self.children(node)}.
        """
        if children is None:
            children = self.children(node)
        for child in children:
            self.dispatch(child)

def traverse(visitor: Visitor[Any], root: Any) -> None:
    """
    Visit C{root} and, as far as the handlers descend, its descendants.

    Results are read from the visitor's state once this returns.
    """
    Walker(visitor).dispatch(root)

def walk(visitor: Visitor[S], root: Any) -> S:
    """
    Like L{traverse()}, but return the visitor's state.
    """
    traverse(visitor, root)
    return visitor.state
