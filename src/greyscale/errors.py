"""Error types raised while converting an image.

Every failure in the conversion pipeline is a ``GreyscaleError``. Each error
renders its own one-line diagnostic and carries the process exit code, so the
CLI can report it and exit without knowing which stage failed.
"""

from pathlib import Path

USAGE = "usage: greyscale input_file output_file"


class GreyscaleError(Exception):
    """Base class for conversion failures."""

    exit_code = 1

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.path = path


class ArgumentCountError(GreyscaleError):
    """Wrong number of command line arguments."""

    def __init__(self) -> None:
        super().__init__(USAGE)


class HelpRequested(GreyscaleError):
    """``-h``/``--help`` was given. Not a failure."""

    exit_code = 0

    def __init__(self) -> None:
        super().__init__(USAGE)


class InputNotFoundError(GreyscaleError):
    def __init__(self, path: Path | str) -> None:
        super().__init__(f"File at '{path}' does not exist.", path)


class InputNotReadableError(GreyscaleError):
    def __init__(self, path: Path | str) -> None:
        super().__init__(f"File at '{path}' cannot be read.", path)


class DecodeError(GreyscaleError):
    """The input could not be turned into an image."""


class DecodeParseError(DecodeError):
    """The input bytes are not an image any codec back end understands."""

    def __init__(self, reason: str, path: Path | str | None = None) -> None:
        if path is None:
            message = f"Image data can't be parsed: {reason}"
        else:
            message = f"The file '{path}' can't be parsed. Try a different image format."
        super().__init__(message, path)
        self.reason = reason

    def with_path(self, path: Path | str) -> "DecodeParseError":
        """Return a copy of this error that names the input file."""
        return DecodeParseError(self.reason, path)


class DecodeIOError(DecodeError):
    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"An I/O error occurred while reading '{path}': {reason}", path)
        self.reason = reason


class UnsupportedFormatError(GreyscaleError):
    def __init__(self, path: Path | str, suffix: str) -> None:
        shown = suffix or "(no extension)"
        super().__init__(
            f"The format '{shown}' of '{path}' is not supported. Try a different format.",
            path,
        )
        self.suffix = suffix


class EncodeError(GreyscaleError):
    """A codec back end failed to produce bytes for the requested format."""

    def __init__(self, format_name: str, reason: str, path: Path | str | None = None) -> None:
        target = f" for '{path}'" if path is not None else ""
        super().__init__(f"Failed to encode the image as {format_name}{target}: {reason}", path)
        self.format_name = format_name
        self.reason = reason

    def with_path(self, path: Path | str) -> "EncodeError":
        """Return a copy of this error that names the output file."""
        return EncodeError(self.format_name, self.reason, path)


class OutputExistsError(GreyscaleError):
    def __init__(self, path: Path | str) -> None:
        super().__init__(f"A file already exists at '{path}'.", path)


class OutputIOError(GreyscaleError):
    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(
            f"An I/O error occurred while writing the image to '{path}': {reason}", path
        )
        self.reason = reason


class ConfigError(GreyscaleError):
    """The configuration file or environment is invalid."""
