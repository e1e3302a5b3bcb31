"""funcframe CLI — load a function from a source file and serve it.

Entry point registered as ``funcframe`` in ``pyproject.toml``::

    [project.scripts]
    funcframe = "funcframe.cli:main"

Every flag falls back to the matching environment variable
(``FUNCTION_TARGET``, ``FUNCTION_SOURCE``, ``FUNCTION_SIGNATURE_TYPE``,
``HOST``, ``PORT``, ...), then to the ``FunctionConfig`` default.
"""

import argparse
import sys

from funcframe.signature import SignatureType


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="funcframe",
        description="Serve an HTTP, event, or CloudEvent function.",
    )
    parser.add_argument("--target", default=None, help="Name of the function to serve")
    parser.add_argument("--source", default=None, help="Path to the file defining the function")
    parser.add_argument(
        "--signature-type",
        default=None,
        choices=[member.value for member in SignatureType],
        help="Calling convention of the function (default: http)",
    )
    parser.add_argument("--host", default=None, help="Bind host address")
    parser.add_argument("--port", type=int, default=None, help="Bind port number")
    parser.add_argument("--debug", action="store_true", help="Include tracebacks in 500 responses")
    parser.add_argument(
        "--no-execution-time",
        action="store_true",
        help="Do not log execution start and duration",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["text", "json"],
        help="Log output format",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``funcframe`` command."""
    args = build_parser().parse_args(argv)

    from funcframe.cli._run import run_function
    from funcframe.errors import ConfigurationError

    try:
        run_function(args)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
