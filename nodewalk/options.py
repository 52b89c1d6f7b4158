"""
The command-line parsing.
"""
import ast
import functools
from argparse import Namespace
from pathlib import Path
from typing import List, Optional, Sequence, Type

from configargparse import ArgumentParser
import attr

from nodewalk import __version__
from nodewalk.utils import parse_path, error
from nodewalk._configparser import CompositeConfigParser, IniConfigParser, TomlConfigParser, ValidatorParser

DEFAULT_CONFIG_FILES = ['./pyproject.toml', './setup.cfg', './nodewalk.ini']
CONFIG_SECTIONS = ['tool.nodewalk', 'tool:nodewalk', 'nodewalk']

__all__ = ("Options", )

# CONFIGURATION PARSING

NodewalkConfigParser = CompositeConfigParser(
                [TomlConfigParser(CONFIG_SECTIONS),
                 IniConfigParser(CONFIG_SECTIONS)])

# ARGUMENTS PARSING

def get_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog='nodewalk',
        description="Count the syntax tree nodes of python source files.",
        usage="nodewalk [options] SOURCEPATH...",
        default_config_files=DEFAULT_CONFIG_FILES,
        config_file_parser_class=NodewalkConfigParser)

    # Add the validator to the config file parser, this is arguably a hack.
    parser._config_file_parser = ValidatorParser(parser._config_file_parser, parser)

    parser.add_argument(
        '-c', '--config', is_config_file=True,
        help=("Load config from this file (any command line "
              "options override settings from the file)."), metavar="PATH",)
    parser.add_argument(
        '--count', action='append', dest='count', default=[], metavar='NODETYPE',
        help=("Only count nodes of this ast class, subclasses included "
              "(for instance 'expr' or 'FunctionDef'). Can be repeated. "
              "Counts every node type by default."))
    parser.add_argument(
        '--prune', action='append', dest='prune', default=[], metavar='NODETYPE',
        help=("Count nodes of this ast class but don't look inside them. Can be repeated."))
    parser.add_argument(
        '--max-depth', dest='max_depth', type=int, default=None, metavar='INT',
        help=("Fail when the syntax trees are nested deeper than this."))
    parser.add_argument(
        '--verbose', '-v', action='count', dest='verbosity',
        default=0,
        help=("Be noisier.  Can be repeated for more noise."))
    parser.add_argument(
        '--quiet', '-q', action='count', dest='quietness',
        default=0,
        help=("Be quieter."))

    parser.add_argument('-V', '--version', action='version', version=f'%(prog)s {__version__}')

    parser.add_argument(
        'sourcepath', metavar='SOURCEPATH',
        help=("Path to python modules to walk."),
        nargs="*", default=[],
    )
    return parser

def parse_args(args: Sequence[str]) -> Namespace:
    parser = get_parser()
    options = parser.parse_args(args)
    assert isinstance(options, Namespace)
    options.verbosity -= options.quietness
    return options

# CONVERTERS

def _convert_sourcepath(l: List[str]) -> List[Path]:
    return list(map(functools.partial(parse_path, opt='SOURCEPATH'), l))

def parse_node_type(value: str, opt: str) -> Type[ast.AST]:
    """
    Parse the name of an L{ast} node class, like C{'FunctionDef'}.

    Watch out, prints a message and SystemExits on error!
    """
    cls = getattr(ast, value.strip(), None)
    if not (isinstance(cls, type) and issubclass(cls, ast.AST)):
        error(f"{opt}: unknown node type {value!r}.")
    return cls

def _convert_count(l: List[str]) -> List[Type[ast.AST]]:
    return list(map(functools.partial(parse_node_type, opt='--count'), l))
def _convert_prune(l: List[str]) -> List[Type[ast.AST]]:
    return list(map(functools.partial(parse_node_type, opt='--prune'), l))

# TYPED OPTIONS CONTAINER

@attr.s
class Options:
    """
    Container for all possible nodewalk options.

    See C{nodewalk --help} for more informations.
    """

    sourcepath:     List[Path]              = attr.ib(converter=_convert_sourcepath)
    count:          List[Type[ast.AST]]     = attr.ib(converter=_convert_count)
    prune:          List[Type[ast.AST]]     = attr.ib(converter=_convert_prune)
    max_depth:      Optional[int]           = attr.ib()
    verbosity:      int                     = attr.ib()
    quietness:      int                     = attr.ib()

    def __attrs_post_init__(self) -> None:
        if self.max_depth is not None and self.max_depth < 0:
            error("Invalid --max-depth value. The value should be greater or equal to 0.")

    # HIGH LEVEL FACTORY METHODS

    @classmethod
    def defaults(cls,) -> 'Options':
        return cls.from_args([])

    @classmethod
    def from_args(cls, args: Sequence[str]) -> 'Options':
        return cls.from_namespace(parse_args(args))

    @classmethod
    def from_namespace(cls, args: Namespace) -> 'Options':
        argsdict = vars(args)

        # remove the config argument
        argsdict.pop('config')

        return cls(**argsdict)
