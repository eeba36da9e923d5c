import logging
import re

from .conditionals import ConditionalStack, Tag
from .config import Config
from .exceptions import (CapacityExceeded, DepthExceeded,
                         DirectiveSyntaxError, ParseError)
from .filesystem import IncludeResolver, parse_include_target
from .macros import MacroExpander, MacroTable
from .output import ErrorContext, OutputAccumulator
from .registry import default_registry
from .tokens import is_identifier, scan_lines, strip_comments

logger = logging.getLogger(__name__)

DIRECTIVE_RE = re.compile(r"^\s*#\s*(\w*)(.*)$")
MACRO_NAME_RE = re.compile(r"[^\s(]*")
CONDITIONAL_DIRECTIVES = frozenset(("ifdef", "ifndef", "else", "endif"))
DIRECTIVES = CONDITIONAL_DIRECTIVES | {"define", "undef", "include"}


def _first_word(text):
    words = text.split(None, 1)
    return words[0] if words else None


class Preprocessor:
    """
    Processing context for a single top-level parse.

    Owns the macro table, the conditional stack, the output buffer, the
    error record and the include depth. Included files run through the
    same line pipeline and share all of that state.
    """

    def __init__(self, config=None, reader=None):
        self.config = config if config is not None else Config()
        registry = self.config.virtual_paths
        if registry is None:
            registry = default_registry
        self.macros = MacroTable(self.config.max_macros)
        self.conditionals = ConditionalStack(
            self.config.max_conditional_depth
        )
        self.output = OutputAccumulator(self.config.max_output_size)
        self.errors = ErrorContext()
        self.expander = MacroExpander(self.macros,
                                      self.config.max_name_length,
                                      self.config.max_line_length,
                                      self.config.max_argument_nesting)
        self.includes = IncludeResolver(self.config.base_path,
                                        registry.snapshot(),
                                        reader)
        self.include_depth = 0

    def preprocess(self, source, filename=""):
        """
        Return the preprocessed text of ``source``.

        The first :class:`ParseError` is recorded in ``self.errors`` and
        re-raised; nothing accumulated so far is returned in that case.
        """
        logger.debug("Preprocessing %s", filename or "<memory>")
        try:
            self.feed_source(source, filename)
            self.conditionals.check_closed()
        except ParseError as error:
            self.errors.record(error)
            logger.debug("Preprocessing %s failed: %s",
                         filename or "<memory>", error)
            raise
        return self.output.take()

    def feed_source(self, source, filename):
        lines = scan_lines(source, self.config.max_line_length, filename)
        for line_no, line in lines:
            try:
                self.feed_line(line, line_no, filename)
            except ParseError as error:
                raise error.locate(line_no, filename)

    def feed_line(self, line, line_no, filename):
        if self.config.remove_comments:
            line = strip_comments(line)
        line = line.rstrip()
        match = DIRECTIVE_RE.match(line)
        if match is not None:
            keyword, remainder = match.groups()
            self.process_directive(keyword, remainder.strip(), line=line,
                                   line_no=line_no, filename=filename)
        elif self.conditionals.live:
            self.output.append_line(self.expander.expand(line, line_no))

    def process_directive(self, keyword, remainder, **kwargs):
        if (keyword not in CONDITIONAL_DIRECTIVES
                and not self.conditionals.live):
            return
        if keyword not in DIRECTIVES:
            self.output.append_line(kwargs["line"])
            return
        method = getattr(self, "process_%s" % keyword)
        method(remainder, **kwargs)

    def _macro_name(self, remainder):
        name = MACRO_NAME_RE.match(remainder).group()
        if not name:
            raise DirectiveSyntaxError("Invalid define directive")
        if len(name) > self.config.max_name_length:
            raise CapacityExceeded("Define name too long")
        if not is_identifier(name):
            raise DirectiveSyntaxError(f"Invalid macro name: {name}")
        return name

    def _parse_parameters(self, text):
        close = text.find(")")
        if close == -1:
            raise DirectiveSyntaxError("Unterminated macro parameter list")
        params = []
        for param in text[1:close].split(","):
            param = param.strip()
            if not param:
                continue
            if not is_identifier(param):
                raise DirectiveSyntaxError(
                    f"Invalid macro parameter: {param}"
                )
            params.append(param)
        return params, text[close + 1:].strip()

    def process_define(self, remainder, **kwargs):
        name = self._macro_name(remainder)
        rest = remainder[len(name):]
        if rest.startswith("("):
            params, value = self._parse_parameters(rest)
            self.macros.define(name, value, params)
        else:
            self.macros.define(name, rest.strip())

    def process_undef(self, remainder, **kwargs):
        name = _first_word(remainder)
        if name is not None:
            self.macros.undef(name)

    def _push_conditional(self, tag, remainder, line_no, filename):
        name = _first_word(remainder)
        if name is None:
            raise DirectiveSyntaxError(f"Missing macro name in {tag.value}")
        defined = name in self.macros
        active = defined if tag is Tag.IFDEF else not defined
        self.conditionals.push(tag, name, active, line_no, filename)

    def process_ifdef(self, remainder, line_no, filename, **kwargs):
        self._push_conditional(Tag.IFDEF, remainder, line_no, filename)

    def process_ifndef(self, remainder, line_no, filename, **kwargs):
        self._push_conditional(Tag.IFNDEF, remainder, line_no, filename)

    def process_else(self, remainder, **kwargs):
        self.conditionals.flip()

    def process_endif(self, remainder, **kwargs):
        self.conditionals.pop()

    def process_include(self, remainder, line_no, filename, **kwargs):
        if self.include_depth >= self.config.max_include_depth:
            raise DepthExceeded("Maximum include depth exceeded")
        name, angled = parse_include_target(remainder)
        path = self.includes.resolve(name, angled)
        text = self.includes.read(path)
        logger.debug("Including %s from %s:%s (depth %d)",
                     path, filename, line_no, self.include_depth + 1)
        self.include_depth += 1
        try:
            if self.config.preserve_lines:
                self.output.append_line(f'#line 1 "{path}"')
            self.feed_source(text, path)
        finally:
            self.include_depth -= 1
        if self.config.preserve_lines:
            self.output.append_line(f'#line {line_no + 1} "{filename}"')
