"""The entry point."""

import ast
import logging
import sys
from collections import Counter
from pathlib import Path
from typing import Any, Iterator, List, Sequence, Type

from nodewalk.options import Options
from nodewalk.utils import error, setup_logging
from nodewalk.visitable import iter_ast_children
from nodewalk.visitor import Visitor, VisitorBuilder, descend
from nodewalk.walker import TraversalDepthError, Walker, walk

logger = logging.getLogger(__name__)

def get_visitor(options: Options) -> 'Visitor[Counter[str]]':
    """
    Create the visitor counting syntax tree nodes by class name, as configured.
    """
    counts: 'Counter[str]' = Counter()
    counted: List[Type[ast.AST]] = options.count or [ast.AST]

    def is_counted(node: ast.AST) -> bool:
        return isinstance(node, tuple(counted))

    def count(walker: Walker, node: ast.AST) -> None:
        counts[type(node).__name__] += 1
        walker.descend(node)

    def count_and_prune(walker: Walker, node: ast.AST) -> None:
        if is_counted(node):
            counts[type(node).__name__] += 1

    builder = (VisitorBuilder()
               .children(iter_ast_children)
               .state(counts)
               .default(descend)
               .max_depth(options.max_depth))
    pruned = tuple(options.prune)
    for cls in dict.fromkeys(options.prune):
        builder.on(cls, count_and_prune)
    for cls in dict.fromkeys(counted):
        if cls in options.prune:
            continue
        # subclasses of a pruned class stay pruned
        builder.on(cls, count_and_prune if issubclass(cls, pruned) else count)
    return builder.build()

def iter_sources(paths: Sequence[Path]) -> Iterator[Path]:
    """
    Yield the python files of C{paths}, directories are searched recursively.
    """
    for path in paths:
        if path.is_dir():
            yield from sorted(path.rglob('*.py'))
        else:
            yield path

def main(args: Sequence[str] = sys.argv[1:]) -> int:
    """
    This is the console_scripts entry point for nodewalk CLI.

    @param args: Command line arguments to run the CLI.
    """
    options = Options.from_args(args)
    setup_logging(options.verbosity)

    if not options.sourcepath:
        error("No source paths given.")

    visitor = get_visitor(options)
    exitcode = 0

    for path in iter_sources(options.sourcepath):
        try:
            source = path.read_bytes()
        except OSError as e:
            error(f"Cannot read {path}: {e}")
        try:
            tree = ast.parse(source, filename=str(path))
        except (SyntaxError, ValueError) as e:
            # ValueError: undecodable source or null bytes
            logger.error("%s: cannot parse: %s", path, e)
            exitcode = 2
            continue

        logger.info("walking %s", path)
        try:
            walk(visitor, tree)
        except TraversalDepthError as e:
            error(f"{path}: {e}")

    counts: 'Counter[Any]' = visitor.state
    for name in sorted(counts):
        print(f"{name} {counts[name]}")

    return exitcode
