import dataclasses

DEFAULT_BASE_PATH = "./"
DEFAULT_MAX_INCLUDE_DEPTH = 32
DEFAULT_MAX_OUTPUT_SIZE = 1024 * 1024
DEFAULT_MAX_LINE_LENGTH = 4096
DEFAULT_MAX_NAME_LENGTH = 255
DEFAULT_MAX_MACROS = 256
DEFAULT_MAX_CONDITIONAL_DEPTH = 64
DEFAULT_MAX_ARGUMENT_NESTING = 64

_LIMITS = (
    "max_include_depth",
    "max_output_size",
    "max_line_length",
    "max_name_length",
    "max_macros",
    "max_conditional_depth",
    "max_argument_nesting",
)


@dataclasses.dataclass(frozen=True)
class Config:
    """Immutable settings for one parse.

    ``virtual_paths`` is the registry consulted for angle-bracket
    includes; ``None`` selects the process-wide default registry.
    """

    base_path: str = DEFAULT_BASE_PATH
    preserve_lines: bool = False
    remove_comments: bool = True
    max_include_depth: int = DEFAULT_MAX_INCLUDE_DEPTH
    max_output_size: int = DEFAULT_MAX_OUTPUT_SIZE
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH
    max_name_length: int = DEFAULT_MAX_NAME_LENGTH
    max_macros: int = DEFAULT_MAX_MACROS
    max_conditional_depth: int = DEFAULT_MAX_CONDITIONAL_DEPTH
    max_argument_nesting: int = DEFAULT_MAX_ARGUMENT_NESTING
    virtual_paths: object = None

    def __post_init__(self):
        for name in _LIMITS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

    def replace(self, **changes):
        return dataclasses.replace(self, **changes)


def default_config():
    return Config()
