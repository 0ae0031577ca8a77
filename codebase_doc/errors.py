"""Exception hierarchy for documentation builds."""


class DocError(Exception):
    """Base class for every fatal documentation build error."""


class ConfigError(DocError):
    """Invalid or unreadable configuration."""


class ConflictingDirectoryError(DocError):
    """The output path exists but is not a directory."""

    def __init__(self, op_dir: str):
        self.op_dir = op_dir
        super().__init__(f"'{op_dir}' exists, and is not a directory")


class UnrecognizedDirectoryError(DocError):
    """The output directory exists but carries no readable marker file."""

    def __init__(self, op_dir: str):
        self.op_dir = op_dir
        super().__init__(
            f"Directory {op_dir} already exists, but it does not look like a "
            "documentation output directory. To avoid overwriting existing "
            "files, specify a different output directory (using --op <dir>)."
        )


class UnsupportedFileTypeError(DocError):
    """A discovered path is neither a regular file nor a directory."""

    def __init__(self, path: str, kind: str):
        self.path = path
        self.kind = kind
        super().__init__(f"Cannot handle {kind} {path}")


class ParseFailureError(DocError):
    """A worker failed while reading or scanning a file."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Failed to parse {path}: {reason}")


class GeneratorFailureError(DocError):
    """The selected output generator failed."""


class UnknownGeneratorError(DocError):
    """No generator is registered under the requested name."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        super().__init__(
            f"Unknown generator '{name}' (available: {', '.join(available)})"
        )
