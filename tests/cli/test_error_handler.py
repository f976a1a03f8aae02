"""Tests for CLI error mapping and the JSON envelope."""

from __future__ import annotations

import json

import pytest

from anirec.cli.common.error_handler import handle_cli_error
from anirec.cli.json_formatter import format_json_output, format_success_output
from anirec.shared.errors import (
    ErrorCode,
    NetworkError,
    ParseError,
    create_cli_error,
    create_config_error,
)
from tests.conftest import make_media


class TestHandleCliError:
    @pytest.mark.parametrize(
        ("error", "prefix"),
        [
            (create_config_error("bad config"), "Application error: bad config"),
            (NetworkError(ErrorCode.NETWORK_ERROR, "offline"), "Upstream error: offline"),
            (ParseError(ErrorCode.INVALID_RESPONSE, "odd payload"), "Unexpected response: odd payload"),
            (RuntimeError("boom"), "Unexpected error: boom"),
        ],
    )
    def test_message_on_stderr(self, capsys, error, prefix):
        exit_code = handle_cli_error(error, "trending")

        assert exit_code == 1
        assert f"Error: {prefix}\n" in capsys.readouterr().err

    def test_cli_error_keeps_exit_code(self, capsys):
        error = create_cli_error("stop", command="quiz", exit_code=3)

        assert handle_cli_error(error, "quiz") == 3

    def test_keyboard_interrupt(self, capsys):
        assert handle_cli_error(KeyboardInterrupt(), "seeds") == 130
        assert "interrupted" in capsys.readouterr().err

    def test_json_envelope_on_stdout(self, capsys):
        exit_code = handle_cli_error(
            NetworkError(ErrorCode.API_TIMEOUT, "slow"),
            "search",
            json_output=True,
        )

        envelope = json.loads(capsys.readouterr().out)
        assert exit_code == 1
        assert envelope["success"] is False
        assert envelope["command"] == "search"
        assert envelope["errors"] == ["Upstream error: slow"]
        assert envelope["data"]["error_code"] == "API_TIMEOUT"
        assert envelope["data"]["error_type"] == "NetworkError"


class TestJsonFormatter:
    def test_envelope_shape(self):
        envelope = json.loads(format_json_output(success=True, command="trending", data={"n": 1}))

        assert set(envelope) == {"success", "timestamp", "command", "data", "errors", "warnings"}
        assert envelope["success"] is True

    def test_errors_force_failure(self):
        envelope = json.loads(format_json_output(success=True, command="x", errors=["bad"]))

        assert envelope["success"] is False

    def test_models_are_serialized(self):
        media = make_media(1, "Naruto", meanScore=79)

        envelope = json.loads(format_success_output("search", {"results": [media]}, ["note"]))

        assert envelope["data"]["results"][0]["mean_score"] == 79
        assert envelope["warnings"] == ["note"]
