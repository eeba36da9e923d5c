import logging

from .exceptions import CapacityExceeded, ExpansionError
from .tokens import Tokenizer, TokenType

logger = logging.getLogger(__name__)


class Macro:
    __slots__ = ["name", "value", "params", "function_like", "body_tokens"]

    def __init__(self, name, value="", params=None):
        self.name = name
        self.value = value
        self.function_like = params is not None
        self.params = tuple(params) if params is not None else ()
        self.body_tokens = None

    def __repr__(self):
        if self.function_like:
            return f"Macro({self.name}({', '.join(self.params)}) {self.value!r})"
        return f"Macro({self.name} {self.value!r})"


class MacroTable:
    """Name to :class:`Macro` mapping with an upper bound on its size."""

    def __init__(self, max_macros=None):
        self.max_macros = max_macros
        self.macros = {}

    def define(self, name, value="", params=None):
        if (
            name not in self.macros
            and self.max_macros is not None
            and len(self.macros) >= self.max_macros
        ):
            raise CapacityExceeded("Too many defines")
        macro = Macro(name, value, params)
        self.macros[name] = macro
        logger.debug("Defined %r", macro)
        return macro

    def undef(self, name):
        if self.macros.pop(name, None) is not None:
            logger.debug("Undefined %s", name)

    def get(self, name, default=None):
        return self.macros.get(name, default)

    def __getitem__(self, name):
        return self.macros[name]

    def __delitem__(self, name):
        self.undef(name)

    def __contains__(self, name):
        return name in self.macros

    def __len__(self):
        return len(self.macros)

    def __iter__(self):
        return iter(self.macros)


class MacroExpander:
    """
    Single pass identifier substitution over one live line.

    Substituted text is never rescanned, so a macro whose value names
    another macro is emitted literally. Arguments of a function-like
    macro call are expanded before they are substituted into the body.
    """

    def __init__(self, macros, max_name_length=None, max_line_length=None,
                 max_nesting=None):
        self.macros = macros
        self.max_name_length = max_name_length
        self.max_line_length = max_line_length
        self.max_nesting = max_nesting
        self.nesting = 0
        self.tokenizer = Tokenizer()

    def expand(self, line, line_no=None):
        tokens = self.tokenizer.tokenize(line, line_no)
        expanded = "".join(self.expand_tokens(tokens))
        if (
            self.max_line_length is not None
            and len(expanded) > self.max_line_length
        ):
            raise ExpansionError(
                "Macro expansion failed: expanded line too long"
            )
        return expanded

    def expand_tokens(self, tokens):
        pos = 0
        while pos < len(tokens):
            token = tokens[pos]
            pos += 1
            if token.type is not TokenType.IDENTIFIER:
                yield token.value
                continue
            if (
                self.max_name_length is not None
                and len(token.value) > self.max_name_length
            ):
                raise ExpansionError(
                    f"Identifier too long: {token.value[:32]}..."
                )
            macro = self.macros.get(token.value)
            if macro is None:
                yield token.value
            elif not macro.function_like:
                yield macro.value
            else:
                call = self._collect_arguments(tokens, pos)
                if call is None:
                    yield token.value
                else:
                    args, pos = call
                    yield self._substitute(macro, args)

    def _collect_arguments(self, tokens, pos):
        while pos < len(tokens) and tokens[pos].type is TokenType.WHITESPACE:
            pos += 1
        if pos >= len(tokens) or tokens[pos].value != "(":
            return None
        depth = 0
        args = [[]]
        for index in range(pos, len(tokens)):
            token = tokens[index]
            if token.value == "(":
                depth += 1
                if depth == 1:
                    continue
            elif token.value == ")":
                depth -= 1
                if depth == 0:
                    return [self._expand_argument(arg) for arg in args], index + 1
            elif token.value == "," and depth == 1:
                args.append([])
                continue
            args[-1].append(token)
        return None

    def _expand_argument(self, arg_tokens):
        if self.max_nesting is not None and self.nesting >= self.max_nesting:
            raise ExpansionError(
                "Macro expansion failed: arguments nested too deeply"
            )
        self.nesting += 1
        try:
            return "".join(self.expand_tokens(arg_tokens)).strip()
        finally:
            self.nesting -= 1

    def _body_tokens(self, macro):
        if macro.body_tokens is None:
            macro.body_tokens = self.tokenizer.tokenize(macro.value)
        return macro.body_tokens

    def _substitute(self, macro, args):
        positions = {param: index for index, param in enumerate(macro.params)}
        pieces = []
        for token in self._body_tokens(macro):
            index = positions.get(token.value)
            if token.type is TokenType.IDENTIFIER and index is not None:
                pieces.append(args[index] if index < len(args) else "")
            else:
                pieces.append(token.value)
        return "".join(pieces)
