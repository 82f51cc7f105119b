"""Caller classification from request header lines."""

from collections.abc import Callable, Iterable
from enum import Enum

from request import RawRequest

LinePredicate = Callable[[str], bool]

USER_AGENT_PREFIX = "user-agent:"
HEALTH_CHECK_MARKER = "googlehc"
UPTIME_CHECK_MARKER = "uptimechecks"


class RequestClass(Enum):
    ORDINARY = "ordinary"
    HEALTH_CHECK = "health_check"
    UPTIME_CHECK = "uptime_check"


def is_google_health_check(line: str) -> bool:
    lower = line.lower()
    return lower.startswith(USER_AGENT_PREFIX) and HEALTH_CHECK_MARKER in lower


def is_google_uptime_check(line: str) -> bool:
    lower = line.lower()
    return lower.startswith(USER_AGENT_PREFIX) and UPTIME_CHECK_MARKER in lower


# Evaluated in order for each line; the first match wins.
CLASSIFICATION_RULES: tuple[tuple[LinePredicate, RequestClass], ...] = (
    (is_google_health_check, RequestClass.HEALTH_CHECK),
    (is_google_uptime_check, RequestClass.UPTIME_CHECK),
)


def classify(
    raw_request: RawRequest,
    rules: Iterable[tuple[LinePredicate, RequestClass]] = CLASSIFICATION_RULES,
) -> RequestClass:
    """Return the class of the first line matching a rule, scanning in line order."""
    rules = tuple(rules)
    for line in raw_request:
        for predicate, request_class in rules:
            if predicate(line):
                return request_class
    return RequestClass.ORDINARY


def is_probe(raw_request: RawRequest) -> bool:
    return any(
        is_google_health_check(line) or is_google_uptime_check(line) for line in raw_request
    )
