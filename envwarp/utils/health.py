"""Minimal liveness/readiness probe for container orchestrators.

Plain HTTP is checked with a raw ``HEAD`` request, a Unix socket by connecting
to it. HTTPS is deliberately unsupported.
"""
import socket
import time
from typing import Tuple
from envwarp.utils.logging import logger

DEFAULT_TIMEOUT = 5.0
DEFAULT_HTTP_PORT = 80
MAX_STATUS_LINE = 8192

_logger = logger.bind(module='HealthProber')


def split_http_address(address: str) -> Tuple[str, str]:
    """Split ``http://authority/path`` into ``(authority, path)``; path defaults to ``/``."""
    target = address[len("http://"):]
    host, sep, path = target.partition("/")
    return host, sep + path if sep else "/"


def _dial_target(authority: str) -> Tuple[str, int]:
    if authority.startswith("["):
        host, _, rest = authority[1:].partition("]")
        port = rest[1:] if rest.startswith(":") else ""
    else:
        host, _, port = authority.rpartition(":") if ":" in authority else (authority, "", "")
    return host, int(port) if port else DEFAULT_HTTP_PORT


def parse_status_line(line: str) -> int:
    """Return the status code of an ``HTTP/<version> <code> ...`` line.

    Raises:
        ValueError: if the line is not a status line.
    """
    parts = line.strip().split(" ", 2)
    if len(parts) < 2 or not parts[0].startswith("HTTP/"):
        raise ValueError(f"invalid status line: {line!r}")
    if not parts[1].isdigit():
        raise ValueError(f"invalid status code: {parts[1]!r}")
    return int(parts[1])


def _remaining(deadline: float) -> float:
    remaining = deadline - time.monotonic()
    if remaining <= 0:
        raise TimeoutError("health check timed out")
    return remaining


def _read_status_line(conn: socket.socket, deadline: float) -> bytes:
    """Read up to and including the first newline, within ``deadline`` and ``MAX_STATUS_LINE`` bytes."""
    buffer = b""
    while b"\n" not in buffer:
        if len(buffer) >= MAX_STATUS_LINE:
            raise ValueError(f"status line longer than {MAX_STATUS_LINE} bytes")
        conn.settimeout(_remaining(deadline))
        chunk = conn.recv(1024)
        if not chunk:
            raise ConnectionError(f"connection closed before a status line ({buffer!r})")
        buffer += chunk
    return buffer[:buffer.index(b"\n") + 1]


def check_http(address: str, timeout: float = DEFAULT_TIMEOUT) -> bool:
    """HEAD ``address``; the whole exchange must finish within ``timeout`` seconds."""
    deadline = time.monotonic() + timeout
    authority, path = split_http_address(address)
    try:
        target = _dial_target(authority)
    except ValueError as e:
        _logger.error(f"❌ HTTP check failed, invalid address {address!r}: {e}")
        return False

    try:
        with socket.create_connection(target, timeout=_remaining(deadline)) as conn:
            request = f"HEAD {path} HTTP/1.1\r\nHost: {authority}\r\nConnection: close\r\n\r\n"
            conn.settimeout(_remaining(deadline))
            conn.sendall(request.encode("latin-1"))
            raw = _read_status_line(conn, deadline)
    except (OSError, UnicodeEncodeError, ValueError) as e:
        _logger.error(f"❌ HTTP check failed: {e}")
        return False

    try:
        code = parse_status_line(raw.decode("latin-1"))
    except ValueError as e:
        _logger.error(f"❌ HTTP check failed, {e}")
        return False

    if code < 500:
        _logger.success(f"✅ HTTP check successful, service is online. Status code: {code}")
        return True
    _logger.error(f"❌ HTTP check failed, server error. Status code: {code}")
    return False


def check_unix(address: str, timeout: float = DEFAULT_TIMEOUT) -> bool:
    socket_path = address
    if socket_path.startswith("unix://"):
        socket_path = socket_path[len("unix://"):]
    if socket_path.startswith("unix/"):
        socket_path = socket_path[len("unix/"):]

    try:
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as conn:
            conn.settimeout(timeout)
            conn.connect(socket_path)
    except OSError as e:
        _logger.error(f"❌ UNIX socket check failed: {e}")
        return False
    _logger.success("✅ UNIX socket check successful.")
    return True


def check_health(address: str, timeout: float = DEFAULT_TIMEOUT) -> bool:
    """Probe ``address`` once; True means healthy."""
    _logger.info(f"🩺 Starting health check for: {address}")
    if address.startswith("https://"):
        _logger.error("❌ HTTPS health checks are not supported.")
        return False
    if address.startswith("http://"):
        return check_http(address, timeout)
    if address.startswith(("unix://", "unix/")):
        return check_unix(address, timeout)
    _logger.error(f"❌ Unsupported address format for check: {address}")
    return False
