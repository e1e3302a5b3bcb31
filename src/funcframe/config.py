"""Function configuration.

FunctionConfig is a frozen dataclass: immutable after creation,
IDE-autocompletable, no string-key dict lookups. ``from_env()`` builds
one from the process environment for the CLI and container entrypoints.

Execution timing is an explicit switch (``log_execution_time``). The
managed-runtime rule, which skips timing when the request's host is the
platform's own because that platform already reports durations, is one
timing-policy provider layered on top of it.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from funcframe._internal.types import TimingPolicy
from funcframe.errors import ConfigurationError
from funcframe.http.request import Request
from funcframe.signature import SignatureType

# Host of the managed serverless runtime that records its own timings
MANAGED_RUNTIME_HOST = "cloudfunctions.net"

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})


@dataclass(frozen=True, slots=True)
class FunctionConfig:
    """Function configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = FunctionConfig(target="hello", port=3000, log_execution_time=False)
    """

    # Target function
    target: str = "function"
    source: str = "main.py"
    signature_type: SignatureType = SignatureType.HTTP

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = False

    # Execution timing
    log_execution_time: bool = True
    timing_suppressed_hosts: tuple[str, ...] = (MANAGED_RUNTIME_HOST,)

    # Logging
    log_level: str = "info"
    log_format: str = "text"  # "text" or "json"

    # Limits
    max_content_length: int = 32 * 1024 * 1024  # 32 MB

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "FunctionConfig":
        """Build a config from environment variables.

        Reads ``FUNCTION_TARGET``, ``FUNCTION_SOURCE``,
        ``FUNCTION_SIGNATURE_TYPE``, ``HOST``, ``PORT``, ``DEBUG``,
        ``LOG_EXECUTION_TIME``, ``LOG_LEVEL`` and ``LOG_FORMAT``; anything
        unset keeps its default.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            target=env.get("FUNCTION_TARGET", defaults.target),
            source=env.get("FUNCTION_SOURCE", defaults.source),
            signature_type=SignatureType.parse(
                env.get("FUNCTION_SIGNATURE_TYPE", defaults.signature_type.value)
            ),
            host=env.get("HOST", defaults.host),
            port=_parse_int("PORT", env.get("PORT"), defaults.port),
            debug=_parse_bool("DEBUG", env.get("DEBUG"), defaults.debug),
            log_execution_time=_parse_bool(
                "LOG_EXECUTION_TIME", env.get("LOG_EXECUTION_TIME"), defaults.log_execution_time
            ),
            log_level=env.get("LOG_LEVEL", defaults.log_level).lower(),
            log_format=env.get("LOG_FORMAT", defaults.log_format).lower(),
        )


def _parse_bool(name: str, raw: str | None, default: bool) -> bool:
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    msg = f"{name}={raw!r} is not a boolean (use true/false)."
    raise ConfigurationError(msg)


def _parse_int(name: str, raw: str | None, default: int) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        msg = f"{name}={raw!r} is not an integer."
        raise ConfigurationError(msg) from None


# -- Timing policies --


def always_time(request: Request) -> bool:  # noqa: ARG001
    """Log execution timing for every request."""
    return True


def never_time(request: Request) -> bool:  # noqa: ARG001
    """Never log execution timing."""
    return False


@dataclass(frozen=True, slots=True)
class HostTimingPolicy:
    """Skip timing when the request's ``Host`` is one of *suppressed_hosts*.

    The comparison is exact; a missing or empty host keeps timing on.
    """

    suppressed_hosts: frozenset[str] = frozenset({MANAGED_RUNTIME_HOST})

    def __call__(self, request: Request) -> bool:
        return request.host not in self.suppressed_hosts


def timing_policy(config: FunctionConfig) -> TimingPolicy:
    """Return the timing policy *config* asks for."""
    if not config.log_execution_time:
        return never_time
    return HostTimingPolicy(frozenset(config.timing_suppressed_hosts))
