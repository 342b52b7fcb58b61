#!/usr/bin/env python3
"""Greyscale converter CLI.

Usage:
  greyscale input_file output_file

Reads ``input_file``, replaces each pixel's red, green and blue values with
their average and writes the result to ``output_file`` in the format given by
its extension. Existing output files are never overwritten.

Environment:
  GREYSCALE_CONFIG  YAML file selecting the codec (read only when set)
  GREYSCALE_CODEC   codec name: auto (default), pillow, opencv or wand
"""

import os
import sys

import numpy as np

from .codec import ImageCodec, get_codec
from .config import GreyscaleConfig, load_config
from .errors import (
    ArgumentCountError,
    DecodeIOError,
    DecodeParseError,
    EncodeError,
    GreyscaleError,
    HelpRequested,
    InputNotFoundError,
    InputNotReadableError,
    OutputExistsError,
    OutputIOError,
)
from .formats import resolve_format
from .transform import to_greyscale

HELP_FLAGS = ("-h", "--help")
SUCCESS_MESSAGE = "Converted to greyscale!"


def parse_args(argv: list[str]) -> tuple[str, str]:
    """Split the command line into input and output paths.

    Raises:
        HelpRequested: If the only argument is ``-h`` or ``--help``.
        ArgumentCountError: If there are not exactly two arguments.
    """
    if len(argv) == 1 and argv[0] in HELP_FLAGS:
        raise HelpRequested()
    if len(argv) != 2:
        raise ArgumentCountError()
    return argv[0], argv[1]


def validate_input(path: str) -> None:
    """Check that the input file exists and is readable."""
    if not os.path.exists(path):
        raise InputNotFoundError(path)
    if not os.access(path, os.R_OK):
        raise InputNotReadableError(path)


def read_image(path: str, codec: ImageCodec) -> np.ndarray:
    """Read and decode the input file."""
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise DecodeIOError(path, e.strerror or str(e)) from e

    try:
        return codec.decode(data)
    except DecodeParseError as e:
        raise e.with_path(path) from e


def write_output(path: str, data: bytes) -> None:
    """Write encoded bytes to a new file.

    Raises:
        OutputExistsError: If anything already exists at ``path``.
        OutputIOError: If the file cannot be created or written.
    """
    if os.path.lexists(path):
        raise OutputExistsError(path)
    try:
        # "x" so a file created after the check above is still not clobbered
        with open(path, "xb") as f:
            f.write(data)
    except FileExistsError as e:
        raise OutputExistsError(path) from e
    except OSError as e:
        raise OutputIOError(path, e.strerror or str(e)) from e


def convert(input_path: str, output_path: str, config: GreyscaleConfig | None = None) -> None:
    """Run one conversion from ``input_path`` to ``output_path``.

    The configuration is loaded with ``load_config`` unless given.

    Raises:
        GreyscaleError: On the first failing stage.
    """
    validate_input(input_path)
    if config is None:
        config = load_config()
    codec = get_codec(config.codec)

    image = read_image(input_path, codec)
    to_greyscale(image)

    fmt = resolve_format(output_path)
    try:
        encoded = codec.encode(image, fmt, {})
    except EncodeError as e:
        raise e.with_path(output_path) from e

    write_output(output_path, encoded)


def main(argv: list[str] | None = None) -> int:
    """Run the converter and return the process exit code."""
    if argv is None:
        argv = sys.argv[1:]

    try:
        input_path, output_path = parse_args(argv)
        convert(input_path, output_path)
    except GreyscaleError as e:
        print(e, file=sys.stderr)
        return e.exit_code

    print(SUCCESS_MESSAGE)
    return 0


if __name__ == "__main__":
    sys.exit(main())
