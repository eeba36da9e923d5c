class ParseResult:
    """
    Outcome of a parse.

    On success ``output`` holds the preprocessed text and the error fields
    are empty. On failure ``output`` is ``None`` and ``error_message``,
    ``error_line`` and ``error_file`` describe the first error.
    """

    __slots__ = ["success", "output", "error_message", "error_line",
                 "error_file"]

    def __init__(self, success=False, output=None, error_message=None,
                 error_line=0, error_file=None):
        self.success = success
        self.output = output
        self.error_message = error_message
        self.error_line = error_line
        self.error_file = error_file

    @classmethod
    def ok(cls, output):
        return cls(success=True, output=output)

    @classmethod
    def failure(cls, message, line_no=0, filename=""):
        return cls(error_message=message, error_line=line_no,
                   error_file=filename if filename is not None else "")

    @classmethod
    def from_errors(cls, errors):
        return cls.failure(errors.message, errors.line_no, errors.filename)

    def free(self):
        self.success = False
        self.output = None
        self.error_message = None
        self.error_line = 0
        self.error_file = None

    def __bool__(self):
        return self.success

    def __repr__(self):
        if self.success:
            return f"ParseResult(success, {len(self.output)} chars)"
        if self.error_message is None:
            return "ParseResult(empty)"
        return (
            f"ParseResult(failed, {self.error_file}:{self.error_line}:"
            f" {self.error_message})"
        )


def free_result(result):
    if result is not None:
        result.free()
