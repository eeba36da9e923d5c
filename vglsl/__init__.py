import logging

from .config import Config, default_config
from .core import Preprocessor
from .exceptions import ParseError
from .filesystem import FileReader
from .registry import (VirtualPathRegistry, add_virtual_include_path,
                       clear_virtual_include_paths, default_registry,
                       remove_virtual_include_path)
from .result import ParseResult, free_result

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Config",
    "ParseResult",
    "Preprocessor",
    "VirtualPathRegistry",
    "add_virtual_include_path",
    "clear_virtual_include_paths",
    "default_config",
    "default_registry",
    "free_result",
    "parse_file",
    "parse_file_ex",
    "parse_memory",
    "parse_memory_ex",
    "remove_virtual_include_path",
]


def parse_memory_ex(source_text, logical_filename, config, reader=None):
    """
    Preprocess ``source_text``; ``logical_filename`` only names it in errors.

    Never raises for malformed input, every failure is reported through
    the returned :class:`ParseResult`.
    """
    filename = logical_filename if logical_filename is not None else ""
    if source_text is None:
        return ParseResult.failure("No source text provided", 0, filename)
    preprocessor = Preprocessor(config, reader=reader)
    try:
        output = preprocessor.preprocess(source_text, filename)
    except ParseError:
        return ParseResult.from_errors(preprocessor.errors)
    return ParseResult.ok(output)


def parse_memory(source_text, logical_filename):
    return parse_memory_ex(source_text, logical_filename, default_config())


def parse_file_ex(filename, config, reader=None):
    reader = reader or FileReader()
    source = reader.read(filename)
    if source is None:
        return ParseResult.failure(f"Failed to read file: {filename}", 0,
                                   filename)
    return parse_memory_ex(source, filename, config, reader=reader)


def parse_file(filename, base_path):
    return parse_file_ex(filename, default_config().replace(
        base_path=base_path))
