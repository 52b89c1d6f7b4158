"""
The visitable capability: how the engine reads a node's type tag and children.

Nodes don't have to inherit from anything. A node is visitable as long as
L{type_tag()} and L{get_children()} can make sense of it.
"""
import ast
from typing import Any, Hashable, Iterable, Iterator, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Protocol
else:
    Protocol = object

__all__ = ('Visitable', 'type_tag', 'get_children', 'iter_ast_children')

class Visitable(Protocol):
    """
    Structural description of a node the engine can walk.

    Both methods are optional at runtime: without C{type_tag()} the node's class
    is its tag, without C{children()} the node is a leaf.
    """

    def type_tag(self) -> Hashable:
        ...

    def children(self) -> Sequence[Any]:
        ...

def type_tag(node: Any) -> Hashable:
    """
    Return the identity tag of C{node}.

    This is C{node.type_tag()} when the node defines it, else the runtime class.
    """
    get_tag = getattr(node, 'type_tag', None)
    if callable(get_tag):
        return get_tag() # type:ignore[no-any-return]
    return type(node)

def get_children(node: Any) -> Iterable[Any]:
    """
    Return the ordered children of C{node}.

    A callable C{children} attribute is called, a plain sequence is used as is.
    Anything else is a leaf.
    """
    children = getattr(node, 'children', None)
    if children is None:
        return ()
    if callable(children):
        return children() # type:ignore[no-any-return]
    if isinstance(children, (str, bytes)):
        return ()
    if isinstance(children, Iterable):
        return children
    return ()

def iter_ast_children(node: ast.AST) -> Iterator[ast.AST]:
    """
    Children adapter for standard library syntax trees.

    Yields child nodes in field order, flattening list fields.
    """
    for _, value in ast.iter_fields(node):
        if isinstance(value, list):
            for item in value:
                if isinstance(item, ast.AST):
                    yield item
        elif isinstance(value, ast.AST):
            yield value
