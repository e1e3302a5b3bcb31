"""Running the target function from CLI arguments."""

import argparse
import logging
from dataclasses import replace

from funcframe.app import FunctionApp
from funcframe.cli._resolve import load_function
from funcframe.config import FunctionConfig
from funcframe.log import configure_logging
from funcframe.signature import SignatureType

logger = logging.getLogger("funcframe.server")


def resolve_config(args: argparse.Namespace) -> FunctionConfig:
    """Environment config with CLI flags applied on top."""
    config = FunctionConfig.from_env()
    overrides: dict[str, object] = {}
    if args.target is not None:
        overrides["target"] = args.target
    if args.source is not None:
        overrides["source"] = args.source
    if args.signature_type is not None:
        overrides["signature_type"] = SignatureType.parse(args.signature_type)
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if args.debug:
        overrides["debug"] = True
    if args.no_execution_time:
        overrides["log_execution_time"] = False
    if args.log_format is not None:
        overrides["log_format"] = args.log_format
    return replace(config, **overrides)


def build_app(config: FunctionConfig) -> FunctionApp:
    """Load the configured target and register its routes."""
    user_function = load_function(config.source, config.target)
    return FunctionApp.for_function(user_function, config.signature_type, config)


def run_function(args: argparse.Namespace) -> None:
    """Resolve configuration, load the function, and serve it."""
    config = resolve_config(args)
    configure_logging(config.log_level, config.log_format)
    app = build_app(config)
    logger.info(
        "Serving %s function %r from %s on %s:%d",
        config.signature_type.value,
        config.target,
        config.source,
        config.host,
        config.port,
    )
    app.run()
