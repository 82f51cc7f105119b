"""Raw request model, start-line parser and request error types."""

import re
from dataclasses import dataclass

RawRequest = list[str]

# Unicode White_Space; str.split() would also split on U+001C..U+001F.
_WHITESPACE_CODEPOINTS = (
    0x09, 0x0A, 0x0B, 0x0C, 0x0D, 0x20, 0x85, 0xA0, 0x1680,
    *range(0x2000, 0x200B),
    0x2028, 0x2029, 0x202F, 0x205F, 0x3000,
)
_WHITESPACE = re.compile("[" + re.escape("".join(map(chr, _WHITESPACE_CODEPOINTS))) + "]+")

_ESCAPES = {
    "\0": "\\0",
    "\t": "\\t",
    "\n": "\\n",
    "\r": "\\r",
    "\\": "\\\\",
    '"': '\\"',
}


class RequestContentError(ValueError):
    """A request that cannot be answered with content.

    ``str(exc)`` is the literal response body, newline included.
    """


class EmptyRequestError(RequestContentError):
    def __init__(self) -> None:
        super().__init__("Empty request, don't know what to do\n")


class MalformedStartLineError(RequestContentError):
    def __init__(self, line: str) -> None:
        super().__init__(f"Invalid HTTP start line: {_quote(line)}\n")
        self.line = line


class UnknownTargetError(RequestContentError):
    def __init__(self, target: str) -> None:
        super().__init__(f"invalid target: {target}\n")
        self.target = target


@dataclass(frozen=True, slots=True)
class StartLine:
    method: str
    target: str
    version: str


def parse_start_line(line: str) -> StartLine:
    """Split a start line on whitespace into method, target and version."""
    tokens = [token for token in _WHITESPACE.split(line) if token]
    if len(tokens) != 3:
        raise MalformedStartLineError(line)

    method, target, version = tokens
    return StartLine(method=method, target=target, version=version)


def _quote(line: str) -> str:
    """Double-quote a line, escaping quotes, backslashes and unprintable characters.

    Unprintable characters without a short escape render as ``\\u{hex}``.
    """
    escaped = []
    for char in line:
        if char in _ESCAPES:
            escaped.append(_ESCAPES[char])
        elif char.isprintable():
            escaped.append(char)
        else:
            escaped.append(f"\\u{{{ord(char):x}}}")
    return '"' + "".join(escaped) + '"'
