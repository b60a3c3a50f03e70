"""Unit tests for error classification and envelopes."""

import json

import httpx
import pytest
from pydantic import ValidationError

from fpl_query.config import Settings
from fpl_query.errors import (
    ErrorCode,
    FPLError,
    classify,
    internal_error,
    is_retryable,
    gameweek_not_found,
    player_not_found,
    team_not_found,
)
from fpl_query.models import Player
from fpl_query.responses import Failure, Success, render

REQUEST = httpx.Request("GET", "https://fantasy.premierleague.com/api/bootstrap-static/")


def status_error(status: int) -> httpx.HTTPStatusError:
    response = httpx.Response(status, request=REQUEST)
    return httpx.HTTPStatusError(f"HTTP {status}", request=REQUEST, response=response)


class TestClassify:
    def test_rate_limited(self):
        failure = classify(status_error(429))
        assert failure.code == ErrorCode.API_RATE_LIMITED
        assert failure.details == {"status": 429}

    def test_connection_refused(self):
        assert classify(httpx.ConnectError("Connection refused", request=REQUEST)).code == ErrorCode.NETWORK_ERROR

    def test_timeout(self):
        assert classify(httpx.ReadTimeout("timed out", request=REQUEST)).code == ErrorCode.API_TIMEOUT

    def test_connect_timeout_is_a_timeout(self):
        assert classify(httpx.ConnectTimeout("timed out", request=REQUEST)).code == ErrorCode.API_TIMEOUT

    @pytest.mark.parametrize("status", [500, 502, 503])
    def test_server_errors(self, status):
        failure = classify(status_error(status))
        assert failure.code == ErrorCode.API_UNAVAILABLE
        assert failure.details == {"status": status}

    @pytest.mark.parametrize("status", [400, 403, 404])
    def test_other_status_is_invalid_response(self, status):
        assert classify(status_error(status)).code == ErrorCode.API_INVALID_RESPONSE

    def test_bad_json_is_invalid_response(self):
        exc = json.JSONDecodeError("Expecting value", "<html>", 0)
        assert classify(exc).code == ErrorCode.API_INVALID_RESPONSE

    def test_bad_payload_is_invalid_response(self):
        with pytest.raises(ValidationError) as info:
            Player.model_validate({"id": "abc"})
        failure = classify(info.value)
        assert failure.code == ErrorCode.API_INVALID_RESPONSE
        assert "error" in failure.details

    def test_domain_error_passes_through(self):
        exc = FPLError(ErrorCode.TEAM_NOT_FOUND, "Team with ID 7 not found.", {"teamId": 7})
        failure = classify(exc)
        assert failure == Failure(ErrorCode.TEAM_NOT_FOUND, "Team with ID 7 not found.", {"teamId": 7})


class TestRetryable:
    @pytest.mark.parametrize("code", [ErrorCode.API_TIMEOUT, ErrorCode.NETWORK_ERROR, ErrorCode.API_UNAVAILABLE])
    def test_retryable(self, code):
        assert is_retryable(code)

    def test_everything_else_not_retryable(self):
        retryable = {ErrorCode.API_TIMEOUT, ErrorCode.NETWORK_ERROR, ErrorCode.API_UNAVAILABLE}
        for code in ErrorCode:
            if code not in retryable:
                assert not is_retryable(code), code


def test_taxonomy_is_closed():
    assert len(ErrorCode) == 14


class TestInternalError:
    def test_details_in_development(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            failure = internal_error(e, Settings(environment="development"))
        assert failure.code == ErrorCode.INTERNAL_ERROR
        assert failure.details["error"] == "boom"
        assert "RuntimeError" in failure.details["stack"]

    def test_no_details_in_production(self):
        failure = internal_error(RuntimeError("boom"), Settings(environment="production"))
        assert failure.details is None
        assert "details" not in failure.to_envelope()


class TestEnvelopes:
    def test_not_found_helpers(self):
        assert player_not_found(7).to_envelope() == {
            "error": True,
            "message": "Player with ID 7 not found.",
            "code": "PLAYER_NOT_FOUND",
            "details": {"playerId": 7},
        }
        assert team_not_found(3).code == ErrorCode.TEAM_NOT_FOUND
        assert gameweek_not_found(40).to_envelope() == {
            "error": True,
            "message": "Gameweek 40 not found or no data available.",
            "code": "GAMEWEEK_NOT_FOUND",
            "details": {"gameweek": 40},
        }

    def test_gameweek_not_found_without_a_number(self):
        failure = gameweek_not_found(message="Unable to determine current or next gameweek")
        assert failure.code == ErrorCode.GAMEWEEK_NOT_FOUND
        assert failure.details is None
        assert gameweek_not_found(message="No current gameweek", managerId=7).details == {"managerId": 7}

    def test_success_envelope(self):
        assert Success({"a": 1}).to_envelope() == {"success": True, "data": {"a": 1}}

    def test_render_is_single_text_content(self):
        contents = render(Success({"name": "Ødegaard"}))
        assert len(contents) == 1
        assert contents[0].type == "text"
        assert "Ødegaard" in contents[0].text
        assert json.loads(contents[0].text) == {"success": True, "data": {"name": "Ødegaard"}}
