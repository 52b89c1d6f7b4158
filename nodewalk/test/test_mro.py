from typing import Callable, Dict, List, Sequence

import pytest

from nodewalk.mro import mro

BOATS: Dict[str, List[str]] = {
    'DayBoat': ['Boat'],
    'WheelBoat': ['Boat'],
    'EngineLess': ['DayBoat'],
    'SmallMultihull': ['DayBoat'],
    'PedalWheelBoat': ['EngineLess', 'WheelBoat'],
    'SmallCatamaran': ['SmallMultihull'],
    'Pedalo': ['PedalWheelBoat', 'SmallCatamaran'],
}

def bases_of(hierarchy: Dict[str, List[str]]) -> Callable[[str], Sequence[str]]:
    return lambda tag: hierarchy.get(tag, [])

def test_no_bases() -> None:
    assert mro('Boat', bases_of(BOATS)) == ['Boat']

def test_single_inheritance() -> None:
    assert mro('EngineLess', bases_of(BOATS)) == ['EngineLess', 'DayBoat', 'Boat']

def test_multiple_inheritance() -> None:
    assert mro('PedalWheelBoat', bases_of(BOATS)) == [
        'PedalWheelBoat', 'EngineLess', 'DayBoat', 'WheelBoat', 'Boat']
    assert mro('Pedalo', bases_of(BOATS)) == [
        'Pedalo',
        'PedalWheelBoat',
        'EngineLess',
        'SmallCatamaran',
        'SmallMultihull',
        'DayBoat',
        'WheelBoat',
        'Boat']

def test_matches_python_mro() -> None:
    class A1: pass
    class B1(A1): pass
    class C1(A1): pass
    class D1(B1, C1): pass

    assert mro(D1, lambda c: [b for b in c.__bases__ if b is not object]) == [D1, B1, C1, A1]

def test_falsy_tags() -> None:
    assert mro(1, lambda t: [0] if t else []) == [1, 0]

def test_inconsistent_hierarchy() -> None:
    hierarchy = {
        'B1': ['A1'], 'C1': ['A1'],
        'D1': ['B1', 'C1'], 'E1': ['C1', 'B1'],
        'F1': ['D1', 'E1'],
        'Duplicates': ['C1', 'C1'],
    }
    with pytest.raises(ValueError, match="Cannot compute linearization"):
        mro('F1', bases_of(hierarchy))
    with pytest.raises(ValueError, match="Cannot compute linearization"):
        mro('Duplicates', bases_of(hierarchy))

def test_self_inheritance() -> None:
    with pytest.raises(ValueError, match="inherits from itself"):
        mro('a', bases_of({'a': ['b'], 'b': ['a']}))
