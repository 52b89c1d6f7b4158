"""
Dispatch resolution: find the most specific handler for a node's type tag.

A L{DispatchTable} maps type tags to handlers and holds exactly one default
handler. Looking a tag up walks the tag's linearization, most specific first,
and returns the first registered handler. When nothing matches the default
handler is returned; an unknown tag is never an error.

Class tags are linearized with their C{__mro__}. Other tags (strings, enum
members...) only match exactly, unless a L{TagHierarchy} declares their bases.
"""
from typing import (Any, Callable, Dict, Hashable, Iterable, List, Mapping,
                    Optional, Sequence, Tuple, TYPE_CHECKING)

from nodewalk.mro import mro
from nodewalk.visitable import type_tag

if TYPE_CHECKING:
    from nodewalk.visitor import Visitor
    from nodewalk.walker import Walker

Handler = Callable[['Walker', Any], None]
"""
A handler is called with the walker driving the traversal and the current node.
Returning without calling C{walker.descend(node)} prunes the node's subtree.
"""

__all__ = ('Handler', 'TagHierarchy', 'DispatchTable', 'resolve')

class TagHierarchy:
    """
    Declared subtyping between tags that are not Python classes.

    >>> h = TagHierarchy()
    >>> h.declare('circle', 'shape')
    >>> h.linearize('circle')
    ['circle', 'shape']
    """

    def __init__(self, bases: Optional[Mapping[Hashable, Sequence[Hashable]]] = None) -> None:
        self._bases: Dict[Hashable, Tuple[Hashable, ...]] = {}
        for tag, tagbases in (bases or {}).items():
            self.declare(tag, *tagbases)

    def declare(self, tag: Hashable, *bases: Hashable) -> None:
        """
        Declare the direct bases of C{tag}, in precedence order.

        @raises ValueError: If C{tag} already has declared bases.
        """
        if tag in self._bases:
            raise ValueError(f"bases of tag {tag!r} are already declared")
        self._bases[tag] = bases

    def bases(self, tag: Hashable) -> Tuple[Hashable, ...]:
        return self._bases.get(tag, ())

    def linearize(self, tag: Hashable) -> List[Hashable]:
        """
        Return C{tag} and its declared ancestors, most specific first.

        @raises ValueError: If the declared hierarchy is inconsistent.
        """
        return mro(tag, self.bases)

    def __contains__(self, tag: Hashable) -> bool:
        return tag in self._bases

    def copy(self) -> 'TagHierarchy':
        return TagHierarchy(self._bases)

def _identity(tag: Hashable) -> Hashable:
    return tag

class DispatchTable:
    """
    Type tag to handler mapping, with one mandatory default handler.

    Resolved handlers are memoised per tag, never per node.
    """

    def __init__(self,
                 handlers: Mapping[Hashable, Handler],
                 default: Handler,
                 hierarchy: Optional[TagHierarchy] = None,
                 key: Callable[[Hashable], Hashable] = _identity) -> None:
        """
        @param handlers: The type specific handlers.
        @param default: The handler used when no specific handler applies.
        @param hierarchy: Declared bases of non-class tags. The table keeps a copy,
            later declarations don't affect it.
        @param key: Converts a candidate tag into the key used in C{handlers}.
            L{nodewalk.visitor.Visitor.from_methods} uses it to key handlers by class name.
        """
        if not callable(default):
            raise TypeError(f"default handler must be callable, got {default!r}")
        self._handlers: Dict[Hashable, Handler] = dict(handlers)
        self.default = default
        self.hierarchy = None if hierarchy is None else hierarchy.copy()
        self.key = key
        self._resolved: Dict[Hashable, Optional[Handler]] = {}

    @property
    def tags(self) -> Iterable[Hashable]:
        """The tags having a specific handler."""
        return self._handlers.keys()

    def __contains__(self, tag: Hashable) -> bool:
        return tag in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def candidates(self, tag: Hashable) -> Sequence[Hashable]:
        """
        Return the tags a handler may be registered for, most specific first.
        """
        if isinstance(tag, type):
            return tag.__mro__
        if self.hierarchy is not None and tag in self.hierarchy:
            return self.hierarchy.linearize(tag)
        return (tag,)

    def lookup(self, tag: Hashable) -> Optional[Handler]:
        """
        Return the most specific handler registered for C{tag} or one of its
        ancestors, or C{None}.
        """
        try:
            return self._resolved[tag]
        except KeyError:
            pass
        found: Optional[Handler] = None
        for candidate in self.candidates(tag):
            handler = self._handlers.get(self.key(candidate))
            if handler is not None:
                found = handler
                break
        self._resolved[tag] = found
        return found

    def select(self, tag: Hashable) -> Tuple[Handler, bool]:
        """
        Return the handler for C{tag} and whether it is the default handler
        used because nothing more specific is registered.
        """
        handler = self.lookup(tag)
        if handler is None:
            return self.default, True
        return handler, False

    def resolve(self, tag: Hashable) -> Handler:
        """
        Like L{lookup()} but falls back to the default handler.
        """
        return self.select(tag)[0]

    def replace_default(self, default: Handler) -> 'DispatchTable':
        """
        Return a copy of this table with another default handler.
        Specific handlers are shared untouched.
        """
        return DispatchTable(self._handlers, default, self.hierarchy, self.key)

def resolve(visitor: 'Visitor', node: Any) -> Handler:
    """
    Select the single handler C{visitor} uses for C{node}.

    Never fails for unregistered types: the visitor's default handler is
    returned instead.
    """
    return visitor.table.resolve(type_tag(node))
