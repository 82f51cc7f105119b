"""Handlers for the identity and availability command targets."""


def home(server_name: str, serving: bool) -> tuple[str, bool]:
    return f"Hi there! I'm a server. My name is: {server_name}\n", serving


def switch_on(server_name: str, serving: bool) -> tuple[str, bool]:
    _ = serving
    return f"Server spinning back up, beep-boop. Hi! My name is: {server_name}\n", True


def switch_off(server_name: str, serving: bool) -> tuple[str, bool]:
    _ = server_name, serving
    return "Server shutting down, BEEEeeep... spin back up with /on\n", False
