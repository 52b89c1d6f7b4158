"""nodewalk's test suite."""

from logging import LogRecord
from typing import Any, Hashable, List, Sequence, TYPE_CHECKING

import attr

# Because pytest does not export every fixture type, we define
# approximations that are good enough for our test cases:

if TYPE_CHECKING:
    from typing import Protocol

    class CapLog(Protocol):
        records: Sequence[LogRecord]
        text: str

    class CaptureResult(Protocol):
        out: str
        err: str

    class CapSys(Protocol):
        def readouterr(self) -> CaptureResult: ...

    from _pytest.monkeypatch import MonkeyPatch
else:
    CapLog = CaptureResult = CapSys = object
    MonkeyPatch = object

# Node types used across the tests. None of them knows about nodewalk.

@attr.s(eq=False, repr=False)
class Shape:
    name: str = attr.ib()

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.name!r})'

@attr.s(eq=False, repr=False)
class Circle(Shape):
    radius: float = attr.ib(default=1.0)

@attr.s(eq=False, repr=False)
class Rect(Shape):
    width: float = attr.ib(default=1.0)
    height: float = attr.ib(default=1.0)

@attr.s(eq=False, repr=False)
class Square(Rect):
    pass

@attr.s(eq=False, repr=False)
class Group(Shape):
    """A composite shape, its members are its children."""
    members: List[Shape] = attr.ib(factory=list)

    def children(self) -> List[Shape]:
        return self.members

class TreeNode:
    """Tree node exposing its children as a plain attribute."""

    def __init__(self, name: str, *children: 'TreeNode') -> None:
        self.name = name
        self.children = list(children)

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.name!r})'

class A(TreeNode):
    pass

class B(TreeNode):
    pass

class TaggedNode:
    """Node whose type tag is not its class."""

    def __init__(self, tag: Hashable, name: str, *children: Any) -> None:
        self.tag = tag
        self.name = name
        self._children = children

    def type_tag(self) -> Hashable:
        return self.tag

    def children(self) -> Sequence[Any]:
        return self._children

    def __repr__(self) -> str:
        return f'{self.tag}({self.name!r})'

def names(nodes: Sequence[Any]) -> List[str]:
    return [n.name for n in nodes]
