"""
Visitors: per-type handlers plus one default handler, and the state they accumulate.

A L{Visitor} is a plain record built with a L{VisitorBuilder}::

    counter = Counter()

    def count_circle(walker: Walker, node: Circle) -> None:
        walker.visitor.state['circle'] += 1
        walker.descend(node)

    visitor = (VisitorBuilder()
                .on(Circle, count_circle)
                .default(descend)
                .state(counter)
                .build())
    traverse(visitor, root)

Handlers are called with the L{Walker} and the current node. Descent into a
node's children is always explicit: a handler calls C{walker.descend(node)} or
the subtree is pruned.

Secondary visitors, called extensions, can observe each dispatched node
before or after the main handler, see L{VisitorExt}.
"""
import enum
import logging
from collections import defaultdict
from typing import (Any, Callable, Dict, Generic, Hashable, Iterable, List,
                    Optional, Type, TypeVar, Union, TYPE_CHECKING)

import attr

from nodewalk.dispatch import DispatchTable, Handler, TagHierarchy
from nodewalk.visitable import get_children

if TYPE_CHECKING:
    from nodewalk.walker import Walker

__docformat__ = 'epytext'

__all__ = ('Visitor', 'VisitorBuilder', 'VisitorExt', 'ExtList', 'When',
           'descend', 'prune', 'log_and_descend')

S = TypeVar('S')

logger = logging.getLogger(__name__)

# STOCK DEFAULT HANDLERS

def descend(walker: 'Walker', node: Any) -> None:
    """
    The base default handler: visit the children of nodes nobody handles.
    """
    walker.descend(node)

def prune(walker: 'Walker', node: Any) -> None:
    """
    Default handler that silently skips the subtree of unhandled nodes.
    """

def log_and_descend(log: Optional[logging.Logger] = None, level: int = logging.INFO) -> Handler:
    """
    Create a default handler that records unhandled nodes, then visits their children.

    @param log: Logger to use, this module's logger by default.
    @param level: Logging level of the record.
    """
    log = log or logger
    def handler(walker: 'Walker', node: Any) -> None:
        log.log(level, "no handler for %s at depth %d",
                type(node).__name__, walker.depth)
        walker.descend(node)
    return handler

# EXTENSIONS

class When(enum.Enum):
    """
    When an extension sees a node, relative to the main handler.
    """

    BEFORE = enum.auto()
    """
    Call the extension before the main handler.
    """

    AFTER = enum.auto()
    """
    Call the extension once the main handler returned, so after the
    node's subtree when the handler descended into it.
    """

class VisitorExt:
    """
    Base class for visitor extensions.

    Subclasses must set the C{when} class variable and define
    C{visit_<ClassName>(walker, node)} methods for the node types they observe.
    Other nodes go to C{unknown_visit()}, which does nothing.

    Extensions only observe: whatever they do, descent is decided by
    the main visitor's handlers.
    """

    when: When = NotImplemented
    When = When

    def visit(self, walker: 'Walker', node: Any) -> None:
        for cls in type(node).__mro__:
            method = getattr(self, 'visit_' + cls.__name__, None)
            if method is not None:
                method(walker, node)
                return
        self.unknown_visit(walker, node)

    def unknown_visit(self, walker: 'Walker', node: Any) -> None:
        pass

class ExtList:
    """
    Visitor extensions, grouped by the time they run.

    Any object with a C{when} attribute and a C{visit(walker, node)} method
    is accepted, L{VisitorExt} is a convenient base class.
    """

    def __init__(self, *extensions: Union[VisitorExt, Type[VisitorExt]]) -> None:
        self._visitors: Dict[When, List[VisitorExt]] = defaultdict(list)
        self.add(*extensions)

    def add(self, *extensions: Union[VisitorExt, Type[VisitorExt]]) -> None:
        """
        Add extensions, given as instances or as classes to instantiate.
        """
        for extension in extensions:
            if isinstance(extension, type):
                extension = extension()
            if not callable(getattr(extension, 'visit', None)):
                raise TypeError(f"Visitor extension must have a visit() method, got {extension!r}")
            if getattr(extension, 'when', None) not in (When.BEFORE, When.AFTER):
                raise ValueError(f'Class variable "when" must be set on visitor extension {type(extension).__name__}')
            self._visitors[extension.when].append(extension)

    @property
    def before_visit(self) -> List[VisitorExt]:
        return self._visitors[When.BEFORE]

    @property
    def after_visit(self) -> List[VisitorExt]:
        return self._visitors[When.AFTER]

    def __bool__(self) -> bool:
        return any(self._visitors.values())

    def __len__(self) -> int:
        return sum(len(v) for v in self._visitors.values())

    def copy(self) -> 'ExtList':
        return ExtList(*self.before_visit, *self.after_visit)

# VISITOR RECORD

ChildrenGetter = Callable[[Any], Iterable[Any]]

@attr.s(frozen=True)
class Visitor(Generic[S]):
    """
    The handlers of one algorithm, plus the state it accumulates.

    Build instances with L{VisitorBuilder} or L{Visitor.from_methods()}.
    The state belongs to this instance: reusing it for another traversal
    keeps accumulating into the same object.
    """

    table:      DispatchTable           = attr.ib()
    state:      S                       = attr.ib(default=None)
    children:   ChildrenGetter          = attr.ib(default=get_children)
    extensions: ExtList                 = attr.ib(factory=ExtList)
    max_depth:  Optional[int]           = attr.ib(default=None)

    @max_depth.validator
    def _check_max_depth(self, attribute: 'attr.Attribute[Optional[int]]', value: Optional[int]) -> None:
        if value is not None and value < 0:
            raise ValueError(f"max_depth must be a non-negative integer or None, got {value}")

    @property
    def default(self) -> Handler:
        return self.table.default

    def with_default(self, handler: Handler) -> 'Visitor[S]':
        """
        Return a copy of this visitor using another default handler.
        The specific handlers are not touched.
        """
        return attr.evolve(self, table=self.table.replace_default(handler))

    def with_state(self, state: Any) -> 'Visitor[Any]':
        """
        Return a copy of this visitor accumulating into C{state}.
        """
        return attr.evolve(self, state=state)

    @classmethod
    def from_methods(cls, obj: S, **kwargs: Any) -> 'Visitor[S]':
        """
        Build a visitor out of C{obj}'s C{visit_<ClassName>(walker, node)} methods.

        The class names of a node's C{__mro__} are tried in order, so
        C{visit_Shape} handles a C{Circle} unless C{visit_Circle} is defined.
        C{obj.unknown_visit} is the default handler when it exists, else L{descend}.
        C{obj} becomes the visitor's state.

        @param kwargs: Other L{Visitor} attributes.
        """
        handlers: Dict[Hashable, Handler] = {}
        for name in dir(obj):
            if name.startswith('visit_'):
                method = getattr(obj, name)
                if callable(method):
                    handlers[name[len('visit_'):]] = method
        default = getattr(obj, 'unknown_visit', descend)
        table = DispatchTable(handlers, default, key=_class_name)
        return cls(table, obj, **kwargs)

def _class_name(tag: Hashable) -> Hashable:
    return tag.__name__ if isinstance(tag, type) else tag

# BUILDER

class VisitorBuilder:
    """
    Assemble a L{Visitor} step by step.

    Every method returns the builder, so calls can be chained.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Hashable, Handler] = {}
        self._default: Handler = descend
        self._state: Any = None
        self._children: ChildrenGetter = get_children
        self._hierarchy: Optional[TagHierarchy] = None
        self._extensions = ExtList()
        self._max_depth: Optional[int] = None

    def on(self, tag: Hashable, handler: Handler) -> 'VisitorBuilder':
        """
        Handle nodes tagged C{tag}, and nodes of its subtypes having no closer handler.

        @raises ValueError: If C{tag} already has a handler.
        @raises TypeError: If C{handler} is not callable.
        """
        if not callable(handler):
            raise TypeError(f"handler for {tag!r} must be callable, got {handler!r}")
        if tag in self._handlers:
            raise ValueError(f"tag {tag!r} already has a handler: {self._handlers[tag]!r}")
        self._handlers[tag] = handler
        return self

    def handles(self, *tags: Hashable) -> Callable[[Handler], Handler]:
        """
        Decorator flavor of L{on()}, the function is registered for all C{tags}.
        """
        def decorator(handler: Handler) -> Handler:
            for tag in tags:
                self.on(tag, handler)
            return handler
        return decorator

    def default(self, handler: Handler) -> 'VisitorBuilder':
        """
        Set the handler of nodes without specific handler, L{descend} if never called.
        """
        if not callable(handler):
            raise TypeError(f"default handler must be callable, got {handler!r}")
        self._default = handler
        return self

    def state(self, state: Any) -> 'VisitorBuilder':
        self._state = state
        return self

    def children(self, getter: ChildrenGetter) -> 'VisitorBuilder':
        """
        Use C{getter} instead of L{get_children} to list the children of every node.
        """
        self._children = getter
        return self

    def hierarchy(self, hierarchy: TagHierarchy) -> 'VisitorBuilder':
        self._hierarchy = hierarchy
        return self

    def extend(self, *extensions: Union[VisitorExt, Type[VisitorExt]]) -> 'VisitorBuilder':
        self._extensions.add(*extensions)
        return self

    def max_depth(self, depth: Optional[int]) -> 'VisitorBuilder':
        """
        Fail with L{nodewalk.walker.TraversalDepthError} when nesting gets deeper than C{depth}.
        """
        self._max_depth = depth
        return self

    def build(self) -> Visitor[Any]:
        table = DispatchTable(self._handlers, self._default, self._hierarchy)
        return Visitor(table,
                       state=self._state,
                       children=self._children,
                       extensions=self._extensions.copy(),
                       max_depth=self._max_depth)
