"""nodewalk, a traversal and dispatch engine for heterogeneous node trees.

Visitors pick the most specific handler for each node's type, fall back to a
default handler for the rest, and decide themselves whether to descend into
a node's children.
"""

import importlib.metadata as importlib_metadata

from nodewalk.dispatch import DispatchTable, TagHierarchy, resolve
from nodewalk.visitable import Visitable, get_children, type_tag
from nodewalk.visitor import (ExtList, Visitor, VisitorBuilder, VisitorExt, When,
                              descend, log_and_descend, prune)
from nodewalk.walker import TraversalDepthError, Walker, traverse, walk

__version__ = importlib_metadata.version('nodewalk')

__all__ = ["__version__",
           "traverse", "walk", "Walker", "TraversalDepthError",
           "Visitor", "VisitorBuilder", "VisitorExt", "ExtList", "When",
           "descend", "prune", "log_and_descend",
           "DispatchTable", "TagHierarchy", "resolve",
           "Visitable", "type_tag", "get_children"]
