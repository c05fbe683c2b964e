"""Tests for cmdwatch.options."""

from __future__ import annotations

import pytest

from cmdwatch.options import (
    DEFAULT_INTERVAL,
    MAX_INTERVAL,
    OptionError,
    RunConfig,
    parse_args,
)

# ── Happy paths ────────────────────────────────────────────────────────────


class TestParseArgs:
    def test_separate_value(self) -> None:
        cfg = parse_args(["-n", "5", "echo", "hi"])
        assert cfg.interval_seconds == 5
        assert cfg.command == ("echo", "hi")

    def test_combined_value(self) -> None:
        cfg = parse_args(["-n10", "date"])
        assert cfg.interval_seconds == 10
        # -n10 consumed exactly one token
        assert cfg.command == ("date",)

    def test_default_interval(self) -> None:
        cfg = parse_args(["uptime"])
        assert cfg.interval_seconds == DEFAULT_INTERVAL == 2
        assert cfg.command == ("uptime",)

    def test_configured_default_interval(self) -> None:
        cfg = parse_args(["uptime"], default_interval=7)
        assert cfg.interval_seconds == 7

    def test_flag_overrides_configured_default(self) -> None:
        cfg = parse_args(["-n", "3", "uptime"], default_interval=7)
        assert cfg.interval_seconds == 3

    def test_last_interval_wins(self) -> None:
        cfg = parse_args(["-n", "3", "-n4", "ls"])
        assert cfg.interval_seconds == 4

    def test_command_options_untouched(self) -> None:
        cfg = parse_args(["ls", "-l", "-n", "1"])
        assert cfg.interval_seconds == DEFAULT_INTERVAL
        assert cfg.command == ("ls", "-l", "-n", "1")

    def test_command_line_joined(self) -> None:
        cfg = parse_args(["-n", "1", "echo", "hello", "world"])
        assert cfg.command_line == "echo hello world"

    def test_time_format_passed_through(self) -> None:
        cfg = parse_args(["ls"], time_format="%H:%M")
        assert cfg.time_format == "%H:%M"

    def test_config_is_frozen(self) -> None:
        cfg = parse_args(["ls"])
        with pytest.raises(AttributeError):
            cfg.interval_seconds = 9  # type: ignore[misc]

    def test_returns_run_config(self) -> None:
        assert isinstance(parse_args(["ls"]), RunConfig)


# ── Errors ─────────────────────────────────────────────────────────────────


class TestParseArgsErrors:
    def test_missing_option_value(self) -> None:
        with pytest.raises(OptionError, match="missing option value"):
            parse_args(["-n"])

    def test_unknown_option(self) -> None:
        with pytest.raises(OptionError, match="z: unknown option"):
            parse_args(["-z", "ls"])

    def test_unknown_combined_option(self) -> None:
        with pytest.raises(OptionError, match="d: unknown option"):
            parse_args(["-d1", "ls"])

    @pytest.mark.parametrize(
        "value", ["abc", "1.5", "", "5s", " 5 ", "1_0", "+3", "-1", "٣"]
    )
    def test_non_numeric_interval(self, value: str) -> None:
        with pytest.raises(OptionError, match="not a whole number"):
            parse_args(["-n", value, "ls"])

    @pytest.mark.parametrize("value", ["0", "00"])
    def test_non_positive_interval(self, value: str) -> None:
        with pytest.raises(OptionError, match="at least 1 second"):
            parse_args(["-n", value, "ls"])

    @pytest.mark.parametrize("value", [str(MAX_INTERVAL + 1), "3000000"])
    def test_interval_too_large(self, value: str) -> None:
        with pytest.raises(OptionError, match="too large"):
            parse_args(["-n", value, "ls"])

    def test_largest_interval_accepted(self) -> None:
        cfg = parse_args([f"-n{MAX_INTERVAL}", "ls"])
        assert cfg.interval_seconds == MAX_INTERVAL
        assert cfg.interval_seconds * 1000 <= 2**31 - 1

    def test_missing_command(self) -> None:
        with pytest.raises(OptionError, match="missing command"):
            parse_args(["-n", "5"])

    def test_empty_argv(self) -> None:
        with pytest.raises(OptionError, match="missing command"):
            parse_args([])
