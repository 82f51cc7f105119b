"""Unit tests for the transmission gate, logging gate and serving state threading."""

from __future__ import annotations

import json
import logging

import pytest

from classifier import RequestClass
from dispatcher import RequestDispatcher, dispatch, should_log, should_transmit

HEALTH_CHECK = "User-Agent: GoogleHC/1.0"
UPTIME_CHECK = "User-Agent: UptimeChecks/2.0"


class _Connection:
    def __init__(self, *, fail: bool = False) -> None:
        self.payloads: list[bytes] = []
        self.fail = fail

    def write(self, payload: bytes) -> None:
        if self.fail:
            raise BrokenPipeError("peer went away")
        self.payloads.append(payload)


def _dispatch_records(caplog: pytest.LogCaptureFixture) -> list[logging.LogRecord]:
    return [record for record in caplog.records if record.name == "dispatcher"]


def test_should_transmit_gates_only_uptime_checks() -> None:
    assert should_transmit(RequestClass.UPTIME_CHECK, True) is True
    assert should_transmit(RequestClass.UPTIME_CHECK, False) is False
    for request_class in (RequestClass.ORDINARY, RequestClass.HEALTH_CHECK):
        assert should_transmit(request_class, True) is True
        assert should_transmit(request_class, False) is True


def test_should_log_skips_empty_and_probe_requests() -> None:
    assert should_log(["GET / HTTP/1.1"]) is True
    assert should_log([]) is False
    assert should_log(["GET / HTTP/1.1", HEALTH_CHECK]) is False
    assert should_log(["GET / HTTP/1.1", UPTIME_CHECK]) is False


def test_ordinary_request_is_written_in_wire_format() -> None:
    connection = _Connection()
    dispatcher = RequestDispatcher("gamma")

    outcome = dispatcher.handle(["GET / HTTP/1.1", "Host: localhost"], True, connection.write)

    expected_body = "Hi there! I'm a server. My name is: gamma\n"
    assert connection.payloads == [
        (
            f"HTTP/1.1 200 OK\r\nContent-Length: {len(expected_body)}\r\n\r\n{expected_body}"
        ).encode("utf-8")
    ]
    assert outcome.transmitted is True
    assert outcome.request_class is RequestClass.ORDINARY
    assert outcome.serving is True


@pytest.mark.parametrize("serving", [True, False])
def test_on_and_off_set_serving_regardless_of_prior_state(serving: bool) -> None:
    connection = _Connection()

    assert dispatch(["GET /on HTTP/1.1"], "gamma", serving, connection.write) is True
    assert dispatch(["GET /off HTTP/1.1"], "gamma", serving, connection.write) is False
    assert len(connection.payloads) == 2


def test_health_check_is_always_transmitted_and_never_logged(
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO, logger="dispatcher")
    connection = _Connection()
    dispatcher = RequestDispatcher("gamma")

    outcome = dispatcher.handle(["GET / HTTP/1.1", HEALTH_CHECK], False, connection.write)

    assert outcome.request_class is RequestClass.HEALTH_CHECK
    assert outcome.transmitted is True
    assert connection.payloads[0].startswith(b"HTTP/1.1 200 OK\r\n")
    assert _dispatch_records(caplog) == []


def test_uptime_check_while_off_is_computed_but_not_transmitted(
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO, logger="dispatcher")
    connection = _Connection()
    dispatcher = RequestDispatcher("gamma")

    outcome = dispatcher.handle(["GET / HTTP/1.1", UPTIME_CHECK], False, connection.write)

    assert outcome.request_class is RequestClass.UPTIME_CHECK
    assert outcome.response.status_line == "HTTP/1.1 200 OK"
    assert outcome.transmitted is False
    assert outcome.serving is False
    assert connection.payloads == []
    assert _dispatch_records(caplog) == []


def test_uptime_check_while_on_is_transmitted() -> None:
    connection = _Connection()

    new_serving = dispatch(["GET / HTTP/1.1", UPTIME_CHECK], "gamma", True, connection.write)

    assert new_serving is True
    assert len(connection.payloads) == 1


def test_uptime_check_gate_uses_state_after_command() -> None:
    connection = _Connection()

    assert dispatch(["GET /on HTTP/1.1", UPTIME_CHECK], "gamma", False, connection.write) is True
    assert len(connection.payloads) == 1

    assert dispatch(["GET /off HTTP/1.1", UPTIME_CHECK], "gamma", True, connection.write) is False
    assert len(connection.payloads) == 1


def test_empty_request_gets_500_but_is_not_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="dispatcher")
    connection = _Connection()

    new_serving = dispatch([], "gamma", False, connection.write)

    assert new_serving is False
    assert connection.payloads == [
        b"HTTP/1.1 500 Error\r\nContent-Length: 37\r\n\r\nEmpty request, don't know what to do\n"
    ]
    assert _dispatch_records(caplog) == []


def test_unknown_target_keeps_serving_and_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="dispatcher")
    connection = _Connection()

    new_serving = dispatch(["GET /nope HTTP/1.1"], "gamma", False, connection.write)

    assert new_serving is False
    assert connection.payloads[0].startswith(b"HTTP/1.1 500 Error\r\n")
    messages = [record.getMessage() for record in _dispatch_records(caplog)]
    assert len(messages) == 2
    assert messages[0].startswith("Request received at ")
    assert messages[0].endswith("\n  GET /nope HTTP/1.1")
    assert messages[1] == (
        "Response sent:\n  HTTP/1.1 500 Error\n  Content-Length: 22\n  invalid target: /nope\n"
    )


def test_write_failure_is_logged_and_swallowed(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="dispatcher")
    connection = _Connection(fail=True)
    dispatcher = RequestDispatcher("gamma")

    outcome = dispatcher.handle(["GET /off HTTP/1.1"], True, connection.write)

    assert outcome.serving is False
    assert outcome.transmitted is False
    warnings = [r for r in _dispatch_records(caplog) if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "Error writing response" in warnings[0].getMessage()


def test_json_log_format_emits_single_event(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="dispatcher")
    connection = _Connection()
    dispatcher = RequestDispatcher("gamma", log_format="json")

    dispatcher.handle(["GET /on HTTP/1.1", "Host: localhost"], False, connection.write)

    records = _dispatch_records(caplog)
    assert len(records) == 1
    event = json.loads(records[0].getMessage())
    assert event["request"] == ["GET /on HTTP/1.1", "Host: localhost"]
    assert event["status"] == "HTTP/1.1 200 OK"
    assert event["content_length"] == len(event["body"].encode("utf-8"))
    assert event["body"].startswith("Server spinning back up")
    assert "timestamp" in event


def test_serving_is_threaded_across_sequential_requests() -> None:
    connection = _Connection()
    dispatcher = RequestDispatcher("gamma")
    uptime_check = ["GET / HTTP/1.1", UPTIME_CHECK]

    serving = True
    for raw_request in (["GET /off HTTP/1.1"], uptime_check, ["GET / HTTP/1.1"], uptime_check):
        serving = dispatcher.handle(raw_request, serving, connection.write).serving
    assert serving is False
    assert len(connection.payloads) == 2

    for raw_request in (["GET /on HTTP/1.1"], uptime_check):
        serving = dispatcher.handle(raw_request, serving, connection.write).serving
    assert serving is True
    assert len(connection.payloads) == 4
