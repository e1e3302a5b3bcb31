"""Tests for funcframe.config — FunctionConfig and timing policies."""

import dataclasses

import pytest

from funcframe.config import (
    MANAGED_RUNTIME_HOST,
    FunctionConfig,
    HostTimingPolicy,
    always_time,
    never_time,
    timing_policy,
)
from funcframe.errors import ConfigurationError
from funcframe.signature import SignatureType


class TestFunctionConfig:
    def test_defaults(self) -> None:
        config = FunctionConfig()
        assert config.target == "function"
        assert config.signature_type is SignatureType.HTTP
        assert config.port == 8080
        assert config.log_execution_time is True
        assert config.timing_suppressed_hosts == (MANAGED_RUNTIME_HOST,)

    def test_frozen(self) -> None:
        config = FunctionConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.port = 9000  # type: ignore[misc]

    def test_from_env_empty(self) -> None:
        assert FunctionConfig.from_env({}) == FunctionConfig()

    def test_from_env_values(self) -> None:
        config = FunctionConfig.from_env(
            {
                "FUNCTION_TARGET": "hello",
                "FUNCTION_SOURCE": "fn/main.py",
                "FUNCTION_SIGNATURE_TYPE": "cloudevent",
                "PORT": "3000",
                "DEBUG": "true",
                "LOG_EXECUTION_TIME": "0",
                "LOG_FORMAT": "JSON",
            }
        )
        assert config.target == "hello"
        assert config.source == "fn/main.py"
        assert config.signature_type is SignatureType.CLOUD_EVENT
        assert config.port == 3000
        assert config.debug is True
        assert config.log_execution_time is False
        assert config.log_format == "json"

    def test_from_env_reads_process_environment(self, monkeypatch) -> None:
        for name in ("PORT", "DEBUG", "LOG_EXECUTION_TIME", "FUNCTION_SIGNATURE_TYPE"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("FUNCTION_TARGET", "from_process")
        assert FunctionConfig.from_env().target == "from_process"

    @pytest.mark.parametrize(
        ("name", "value"),
        [("PORT", "eighty"), ("DEBUG", "maybe"), ("FUNCTION_SIGNATURE_TYPE", "rpc")],
    )
    def test_from_env_invalid(self, name, value) -> None:
        with pytest.raises(ConfigurationError):
            FunctionConfig.from_env({name: value})


class TestTimingPolicy:
    def test_disabled_never_times(self) -> None:
        assert timing_policy(FunctionConfig(log_execution_time=False)) is never_time

    def test_enabled_uses_host_policy(self, make_request) -> None:
        policy = timing_policy(FunctionConfig(timing_suppressed_hosts=("internal.example",)))
        assert isinstance(policy, HostTimingPolicy)
        assert policy(make_request(headers={"Host": "internal.example"})) is False
        assert policy(make_request(headers={"Host": MANAGED_RUNTIME_HOST})) is True

    def test_always_and_never(self, make_request) -> None:
        request = make_request(headers={"Host": MANAGED_RUNTIME_HOST})
        assert always_time(request) is True
        assert never_time(request) is False
