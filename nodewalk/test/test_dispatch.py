from typing import Any, List

import pytest

from nodewalk.dispatch import DispatchTable, TagHierarchy, resolve
from nodewalk.visitor import VisitorBuilder, descend
from nodewalk.walker import Walker

from . import Circle, Group, Rect, Shape, Square, TaggedNode

def shape_handler(walker: Walker, node: Any) -> None: ...
def rect_handler(walker: Walker, node: Any) -> None: ...
def default_handler(walker: Walker, node: Any) -> None: ...

def test_exact_match() -> None:
    table = DispatchTable({Rect: rect_handler}, default_handler)
    assert table.resolve(Rect) is rect_handler
    assert table.lookup(Rect) is rect_handler

def test_unregistered_falls_back_to_default() -> None:
    table = DispatchTable({Rect: rect_handler}, default_handler)
    assert table.lookup(Circle) is None
    assert table.resolve(Circle) is default_handler
    assert table.resolve('not even a class') is default_handler

def test_most_specific_wins() -> None:
    table = DispatchTable({Shape: shape_handler, Rect: rect_handler}, default_handler)
    # Square extends Rect extends Shape
    assert table.resolve(Square) is rect_handler
    assert table.resolve(Rect) is rect_handler
    assert table.resolve(Circle) is shape_handler
    assert table.resolve(Shape) is shape_handler

def test_registration_order_does_not_matter() -> None:
    table = DispatchTable({Rect: rect_handler, Shape: shape_handler}, default_handler)
    assert table.resolve(Square) is rect_handler

def test_multiple_inheritance_follows_mro() -> None:
    class Labeled: pass
    class LabeledCircle(Labeled, Circle): pass

    def labeled_handler(walker: Walker, node: Any) -> None: ...

    table = DispatchTable({Shape: shape_handler, Labeled: labeled_handler}, default_handler)
    assert table.resolve(LabeledCircle) is labeled_handler

def test_object_handler_catches_everything() -> None:
    table = DispatchTable({object: shape_handler}, default_handler)
    assert table.resolve(int) is shape_handler
    assert table.resolve(Square) is shape_handler

def test_non_class_tags_match_exactly() -> None:
    table = DispatchTable({'shape': shape_handler}, default_handler)
    assert table.resolve('shape') is shape_handler
    assert table.resolve('circle') is default_handler

def test_tag_hierarchy() -> None:
    hierarchy = TagHierarchy({'rect': ['shape'], 'square': ['rect'], 'circle': ['shape']})
    assert hierarchy.linearize('square') == ['square', 'rect', 'shape']
    assert 'square' in hierarchy
    assert 'shape' not in hierarchy
    assert hierarchy.bases('shape') == ()

    table = DispatchTable({'shape': shape_handler, 'rect': rect_handler}, default_handler, hierarchy)
    assert table.resolve('square') is rect_handler
    assert table.resolve('circle') is shape_handler
    assert table.resolve('triangle') is default_handler

def test_tag_hierarchy_declared_twice() -> None:
    hierarchy = TagHierarchy()
    hierarchy.declare('rect', 'shape')
    with pytest.raises(ValueError, match="already declared"):
        hierarchy.declare('rect', 'polygon')

def test_inconsistent_tag_hierarchy() -> None:
    hierarchy = TagHierarchy({'b': ['a'], 'c': ['a'], 'd': ['b', 'c'], 'e': ['c', 'b'], 'f': ['d', 'e']})
    table = DispatchTable({'a': shape_handler}, default_handler, hierarchy)
    with pytest.raises(ValueError, match="Cannot compute linearization"):
        table.resolve('f')

def test_resolution_is_memoised_per_tag() -> None:
    calls: List[Any] = []
    class CountingTable(DispatchTable):
        def candidates(self, tag: Any) -> Any:
            calls.append(tag)
            return super().candidates(tag)

    table = CountingTable({Shape: shape_handler}, default_handler)
    for _ in range(3):
        assert table.resolve(Square) is shape_handler
        assert table.resolve(int) is default_handler
    assert calls == [Square, int]

def test_default_must_be_callable() -> None:
    with pytest.raises(TypeError):
        DispatchTable({}, None) # type:ignore[arg-type]

def test_replace_default_keeps_handlers() -> None:
    table = DispatchTable({Rect: rect_handler}, default_handler)
    other = table.replace_default(descend)
    assert other.default is descend
    assert other.resolve(Square) is rect_handler
    assert table.default is default_handler
    assert list(other.tags) == [Rect]
    assert Rect in other and len(other) == 1

def test_resolve_node() -> None:
    visitor = VisitorBuilder().on(Rect, rect_handler).on('circle', shape_handler).build()
    assert resolve(visitor, Square('s')) is rect_handler
    assert resolve(visitor, Group('g')) is descend
    # type tags from the node's own type_tag() method
    assert resolve(visitor, TaggedNode('circle', 'c')) is shape_handler
    assert resolve(visitor, TaggedNode('rect', 'r')) is descend

def test_select_reports_fallback() -> None:
    table = DispatchTable({Rect: descend}, descend)
    assert table.select(Square) == (descend, False)
    assert table.select(Circle) == (descend, True)

def test_later_declarations_do_not_affect_table() -> None:
    hierarchy = TagHierarchy({'rect': ['shape']})
    table = DispatchTable({'shape': shape_handler, 'polygon': rect_handler}, default_handler, hierarchy)
    assert table.resolve('square') is default_handler
    hierarchy.declare('square', 'polygon')
    assert hierarchy.linearize('square') == ['square', 'polygon']
    assert table.resolve('square') is default_handler
    assert 'square' not in table.hierarchy # type:ignore[operator]
