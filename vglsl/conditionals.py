import enum

from .exceptions import DepthExceeded, DirectiveSyntaxError, UnbalancedConditional


class Tag(enum.Enum):
    IFDEF = "#ifdef"
    IFNDEF = "#ifndef"
    ELSE = "#else"


class ConditionalFrame:
    __slots__ = ["tag", "name", "branch_active", "branch_taken",
                 "line_no", "filename"]

    def __init__(self, tag, name, branch_active, line_no=0, filename=None):
        self.tag = tag
        self.name = name
        self.branch_active = branch_active
        self.branch_taken = branch_active
        self.line_no = line_no
        self.filename = filename

    def __repr__(self):
        return (
            f"{self.tag.value} {self.name} from line {self.line_no}"
            f" ({'active' if self.branch_active else 'inactive'})"
        )  # pragma: no cover


class ConditionalStack:
    """Nested ``#ifdef``/``#ifndef``/``#else``/``#endif`` state."""

    def __init__(self, max_depth=None):
        self.max_depth = max_depth
        self.frames = []

    def __len__(self):
        return len(self.frames)

    @property
    def live(self):
        return all(frame.branch_active for frame in self.frames)

    def push(self, tag, name, active, line_no=0, filename=None):
        if self.max_depth is not None and len(self.frames) >= self.max_depth:
            raise DepthExceeded("Too many nested conditionals")
        frame = ConditionalFrame(tag, name, active, line_no, filename)
        self.frames.append(frame)
        return frame

    def flip(self):
        if not self.frames:
            raise DirectiveSyntaxError("#else without #ifdef/#ifndef")
        frame = self.frames[-1]
        frame.branch_active = not frame.branch_taken
        frame.tag = Tag.ELSE
        return frame

    def pop(self):
        if not self.frames:
            raise DirectiveSyntaxError("#endif without #ifdef/#ifndef")
        return self.frames.pop()

    def check_closed(self):
        if self.frames:
            frame = self.frames[-1]
            raise UnbalancedConditional(
                "Unclosed conditional directive: "
                f"{frame.tag.value} {frame.name} from line {frame.line_no}"
                " left open",
                frame.line_no, frame.filename,
            )
