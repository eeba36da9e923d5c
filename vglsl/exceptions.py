class ParseError(Exception):
    """Base class for every failure raised while preprocessing a shader.

    ``line_no`` and ``filename`` may be filled in later by the
    preprocessor when the raising component does not know where in the
    source it is.
    """

    def __init__(self, message, line_no=0, filename=None):
        super().__init__(message)
        self.message = message
        self.line_no = line_no
        self.filename = filename

    @property
    def located(self):
        return self.filename is not None

    def locate(self, line_no, filename):
        if not self.located:
            self.line_no = line_no
            self.filename = filename
        return self

    def __str__(self):
        if self.filename:
            return f"{self.filename}:{self.line_no}: {self.message}"
        if self.line_no:
            return f"line {self.line_no}: {self.message}"
        return self.message


class SourceReadError(ParseError):
    pass


class DirectiveSyntaxError(ParseError):
    pass


class DepthExceeded(ParseError):
    pass


class CapacityExceeded(ParseError):
    pass


class UnbalancedConditional(ParseError):
    pass


class ExpansionError(ParseError):
    pass
