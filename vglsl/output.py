from .exceptions import CapacityExceeded

INITIAL_CAPACITY = 4096


class OutputAccumulator:
    """
    Append-only text buffer with a hard ceiling on its size.

    Capacity is tracked the way a growable buffer would grow it: at least
    doubling, clamped to ``max_size``. An append that does not fit even
    after clamping raises :class:`CapacityExceeded`.
    """

    def __init__(self, max_size, initial_capacity=INITIAL_CAPACITY):
        self.max_size = max_size
        self.capacity = min(initial_capacity, max_size)
        self.size = 0
        self._chunks = []

    def append(self, text):
        if not text:
            return
        needed = self.size + len(text)
        if needed > self.capacity:
            capacity = max(self.capacity * 2, needed * 2)
            capacity = min(capacity, self.max_size)
            if needed > capacity:
                raise CapacityExceeded("Output size exceeded maximum limit")
            self.capacity = capacity
        self._chunks.append(text)
        self.size = needed

    def append_line(self, text):
        self.append(text + "\n")

    def take(self):
        """Return the accumulated text and leave the buffer empty."""
        text = "".join(self._chunks)
        self._chunks = []
        self.size = 0
        return text

    def __len__(self):
        return self.size


class ErrorContext:
    """Keeps the first error reported during a parse."""

    def __init__(self):
        self.error = None

    def __bool__(self):
        return self.error is not None

    def record(self, error):
        if self.error is None:
            self.error = error
        return self.error

    @property
    def message(self):
        return self.error.message if self.error is not None else None

    @property
    def line_no(self):
        return self.error.line_no if self.error is not None else 0

    @property
    def filename(self):
        if self.error is None:
            return None
        return self.error.filename or ""
