# MIT License

# Copyright (c) 2019 Vitaly R. Samigullin

# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:

# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.

# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""
C3 linearization of declared tag hierarchies.

Python classes already carry their linearization in C{__mro__}, this module is
used for tags that are not classes (strings, enum members...) and whose bases
are declared with a L{nodewalk.dispatch.TagHierarchy}.
"""

from collections import deque
from itertools import islice
from typing import Callable, Generic, Hashable, Iterator, List, Sequence, TypeVar

T = TypeVar('T', bound=Hashable)

class _Linearization(deque): # type:ignore[type-arg]

    @property
    def head(self) -> T:
        return self[0]

    @property
    def tail(self) -> Iterator[T]:
        return islice(self, 1, len(self))

class _LinearizationList(Generic[T]):
    """
    The linearizations of every base, plus the list of bases itself,
    which must come last so the merge keeps the local precedence order.
    """

    def __init__(self, lists: Sequence[Sequence[T]]) -> None:
        self._lists: List[_Linearization] = [_Linearization(l) for l in lists]

    def in_tails(self, item: T) -> bool:
        return any(item in l.tail for l in self._lists)

    @property
    def heads(self) -> List[T]:
        return [l.head for l in self._lists if l]

    @property
    def exhausted(self) -> bool:
        return all(len(l) == 0 for l in self._lists)

    def remove(self, item: T) -> None:
        """
        Pop C{item} from every list it heads, promoting the next elements.
        """
        for l in self._lists:
            if l and l.head == item:
                l.popleft()

def _merge(lists: Sequence[Sequence[T]]) -> List[T]:
    result: List[T] = []
    linearizations = _LinearizationList(lists)

    while not linearizations.exhausted:
        for head in linearizations.heads:
            if not linearizations.in_tails(head):
                result.append(head)
                linearizations.remove(head)
                # restart from the first list
                break
        else:
            raise ValueError('Cannot compute linearization')
    return result

def mro(tag: T, getbases: Callable[[T], Sequence[T]]) -> List[T]:
    """
    Return C{tag} followed by its ancestors, most specific first.

    @param getbases: Returns the direct bases of a tag, in precedence order.
    @raises ValueError: If the hierarchy has no consistent linearization,
        or if a tag is declared as its own ancestor.
    """
    return _mro(tag, getbases, ())

def _mro(tag: T, getbases: Callable[[T], Sequence[T]], descendants: Sequence[T]) -> List[T]:
    if tag in descendants:
        raise ValueError(f'Cannot compute linearization: {tag!r} inherits from itself')
    bases = list(getbases(tag))
    if not bases:
        return [tag]
    descendants = (*descendants, tag)
    return [tag] + _merge([_mro(base, getbases, descendants) for base in bases] + [bases])
