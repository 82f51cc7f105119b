"""Configuration constants for the toggle server."""

HOST: str = "127.0.0.1"
BUFFER_SIZE: int = 1024
LISTEN_BACKLOG: int = 128
ACCEPT_POLL_SECS: float = 0.2
SOCKET_TIMEOUT_SECS: float | None = None
LOG_FORMAT: str = "plain"
LOG_LEVEL: str = "INFO"
INITIAL_SERVING: bool = True

# chrono-style "%B %d, %Y at %H:%M:%S%.f UTC%z"
TIMESTAMP_FORMAT: str = "%B %d, %Y at %H:%M:%S.%f UTC%z"
READ_ERROR_PLACEHOLDER: str = "Error parsing result: {error!r}"
