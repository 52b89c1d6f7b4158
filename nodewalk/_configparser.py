"""
Config file parsers for L{configargparse}, with mandatory sections.

They let C{nodewalk} read its settings from C{pyproject.toml} (L{TomlConfigParser}),
C{setup.cfg} or an INI file (L{IniConfigParser}). L{CompositeConfigParser} tries
several formats in turn:

>>> sections = ['tool.nodewalk', 'tool:nodewalk', 'nodewalk']
>>> parser = ArgumentParser(..., default_config_files=['./pyproject.toml', './setup.cfg'],
...     config_file_parser_class=CompositeConfigParser([TomlConfigParser(sections),
...                                                     IniConfigParser(sections)]))
"""
from __future__ import annotations

import argparse
import configparser
import warnings
from ast import literal_eval
from collections import OrderedDict
from typing import Any, Callable, Dict, List, Optional, Sequence, TextIO, Union

from configargparse import ArgumentParser, ConfigFileParser, ConfigFileParserException
import toml

def get_toml_section(data: Dict[str, Any], section: Union[Sequence[str], str]) -> Optional[Dict[str, Any]]:
    """
    Return the table at dotted path C{section} of loaded TOML C{data}, or C{None}.

    >>> get_toml_section({'tool': {'nodewalk': {'max-depth': 3}}}, 'tool.nodewalk')
    {'max-depth': 3}
    """
    keys = [k.strip().strip('"\'') for k in section.split('.')] if isinstance(section, str) else list(section)
    item: Any = data
    for key in keys:
        if not isinstance(item, dict):
            return None
        item = item.get(key)
    return item if isinstance(item, dict) else None

class TomlConfigParser(ConfigFileParser):
    """
    TOML parser reading the first of C{sections} found in the file::

        [tool.nodewalk]
        max-depth = 50
        prune = ["FunctionDef", "ClassDef"]
        verbose = 1
    """

    def __init__(self, sections: List[str]) -> None:
        super().__init__()
        self.sections = sections

    def __call__(self) -> ConfigFileParser:
        return self

    def parse(self, stream: TextIO) -> Dict[str, Any]:
        try:
            config = toml.load(stream)
        except Exception as e:
            raise ConfigFileParserException("Couldn't parse TOML file: %s" % e)

        result: Dict[str, Any] = OrderedDict()
        for section in self.sections:
            data = get_toml_section(config, section)
            if data:
                # argparse converts the strings back to their types
                for key, value in data.items():
                    if isinstance(value, list):
                        result[key] = [str(i) for i in value]
                    elif isinstance(value, bool):
                        result[key] = str(value).lower()
                    elif value is not None:
                        result[key] = str(value)
                break
        return result

    def get_syntax_description(self) -> str:
        return ("Config file syntax is Tom's Obvious, Minimal Language. "
                "See https://toml.io for details.")

class IniConfigParser(ConfigFileParser):
    """
    INI parser reading the C{sections} of the file::

        [tool:nodewalk]
        max-depth = 50
        # python list syntax or one item per line
        prune = ["FunctionDef", "ClassDef"]
        count =
            Name
            Call
    """

    def __init__(self, sections: List[str]) -> None:
        super().__init__()
        self.sections = sections

    def __call__(self) -> ConfigFileParser:
        return self

    def parse(self, stream: TextIO) -> Dict[str, Any]:
        config = configparser.ConfigParser()
        try:
            config.read_string(stream.read())
        except Exception as e:
            raise ConfigFileParserException("Couldn't parse INI file: %s" % e)

        result: Dict[str, Union[str, List[str]]] = OrderedDict()
        for section in config.sections():
            if section not in self.sections:
                continue
            for key, value in config[section].items():
                if value.startswith('[') and value.endswith(']'):
                    try:
                        items = literal_eval(value)
                    except Exception as e:
                        raise ConfigFileParserException(f"Error evaluating list {key!r}: {e}") from e
                    if not isinstance(items, list):
                        raise ConfigFileParserException(f"Error evaluating list {key!r}: not a list")
                    result[key] = [str(i) for i in items]
                elif '\n' in value:
                    result[key] = [line for line in value.split('\n') if line]
                else:
                    result[key] = value
        return result

    def get_syntax_description(self) -> str:
        return ("Uses configparser module to parse an INI file. "
                "Lists are written with python list syntax or one item per line.")

class CompositeConfigParser(ConfigFileParser):
    """
    Try each parser in turn until one succeeds, else fail with all error messages.
    """

    def __init__(self, config_parser_types: List[Callable[[], ConfigFileParser]]) -> None:
        super().__init__()
        self.parsers = [p() for p in config_parser_types]

    def __call__(self) -> ConfigFileParser:
        return self

    def parse(self, stream: TextIO) -> Dict[str, Any]:
        errors = []
        for p in self.parsers:
            try:
                return p.parse(stream) # type: ignore[no-any-return]
            except Exception as e:
                stream.seek(0)
                errors.append(e)
        raise ConfigFileParserException(
                f"Error parsing config: {', '.join(repr(str(e)) for e in errors)}")

    def get_syntax_description(self) -> str:
        msg = "Uses multiple config parser settings (in order): \n"
        for i, parser in enumerate(self.parsers):
            msg += f"[{i+1}] {parser.__class__.__name__}: {parser.get_syntax_description()} \n"
        return msg

class ValidatorParser(ConfigFileParser):
    """
    Wraps a config parser and drops unknown options with a warning.

    Install it after creating the argument parser::

        parser._config_file_parser = ValidatorParser(parser._config_file_parser, parser)
    """

    def __init__(self, config_parser: ConfigFileParser, argument_parser: ArgumentParser) -> None:
        super().__init__()
        self.config_parser = config_parser
        self.argument_parser = argument_parser

    def get_syntax_description(self) -> str:
        return self.config_parser.get_syntax_description() #type:ignore[no-any-return]

    def parse(self, stream: TextIO) -> Dict[str, Any]:
        data: Dict[str, Any] = self.config_parser.parse(stream)

        known_config_keys: Dict[str, argparse.Action] = {config_key: action for action in self.argument_parser._actions
            for config_key in self.argument_parser.get_possible_config_keys(action)}

        new_data = {}
        for key, value in data.items():
            if key not in known_config_keys:
                warnings.warn(f"No such config option: {key!r}")
            else:
                new_data[key] = value
        return new_data
