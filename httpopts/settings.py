"""Command line settings of the HTTP server front.

Arguments look like ``--key`` or ``--key=value``. They are parsed once into a
read-only mapping, and the typed getters below read from it. Only
:meth:`Settings.socket` touches the outside world.
"""

import logging
import math
import os
import re
import socket
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping

from .errors import BindFailure, MalformedArgument, MalformedNumber, MissingRequiredOption
from .portfile import load_port, write_port

logger = logging.getLogger(__name__)

UNBOUNDED = math.inf

MAX_PORT = 65535
BACKLOG = 50

_KEY = re.compile(r"[a-z-]+")
_NUMBER = re.compile(r"[+-]?[0-9]+")
_DIGITS = re.compile(r"[0-9]+")


def build_arguments(args: Iterable[str]) -> Mapping[str, str]:
    """Convert ``--key[=value]`` tokens into a read-only mapping.

    A flag without a value maps to an empty string. When a key is repeated the
    last occurrence wins. The first token that doesn't fit the grammar raises
    MalformedArgument and nothing is returned.
    """
    arguments: dict[str, str] = {}
    for arg in args:
        key, value = _split_argument(arg)
        arguments[key] = value
    return MappingProxyType(arguments)


def _split_argument(arg: str) -> tuple[str, str]:
    if not arg.startswith("--"):
        raise MalformedArgument(arg, "expected a leading '--'")

    key, _, value = arg[2:].partition("=")
    if not key:
        raise MalformedArgument(arg, "the key is empty")
    if not _KEY.fullmatch(key):
        raise MalformedArgument(arg, "the key may only contain lowercase letters and hyphens")

    return key, value


def parse_number(key: str, value: str) -> int:
    if not _NUMBER.fullmatch(value):
        raise MalformedNumber(key, value)
    return int(value)


def listen(port: int, backlog: int = BACKLOG) -> socket.socket:
    """Open a TCP socket listening on all interfaces."""
    if not 0 <= port <= MAX_PORT:
        raise BindFailure(port, f"port must be in range 0-{MAX_PORT}")

    try:
        return socket.create_server(("", port), backlog=backlog)
    except OSError as e:
        raise BindFailure(port, e.strerror or str(e)) from e


class Settings:
    """Immutable view over the command line arguments.

    Safe to share between threads; nothing here changes after construction.
    """

    def __init__(self, args: Iterable[str] = ()):
        self._arguments = build_arguments(args)

    @property
    def arguments(self) -> Mapping[str, str]:
        return self._arguments

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Settings):
            return NotImplemented
        return dict(self._arguments) == dict(other._arguments)

    def __hash__(self) -> int:
        return hash(frozenset(self._arguments.items()))

    def __repr__(self) -> str:
        return f"Settings({dict(self._arguments)!r})"

    def is_daemon(self) -> bool:
        return "daemon" in self._arguments

    def hit_refresh(self) -> bool:
        return "hit-refresh" in self._arguments

    def lifetime(self) -> int | float:
        """Lifetime in milliseconds, UNBOUNDED when not given."""
        return self._number("lifetime", UNBOUNDED)

    def threads(self) -> int:
        return self._number("threads", (os.cpu_count() or 1) << 2)

    def max_latency(self) -> int | float:
        """Max latency in milliseconds, UNBOUNDED when not given."""
        return self._number("max-latency", UNBOUNDED)

    def _number(self, key: str, default: int | float) -> int | float:
        value = self._arguments.get(key)
        if value is None:
            return default
        return parse_number(key, value)

    def socket(self) -> socket.socket:
        """Get the socket to listen on.

        ``--port`` is either a port number or the path of a port file. An
        existing port file holds the port to bind. A missing one is created
        after binding an ephemeral port, so another process can read it.

        The caller owns the returned socket.
        """
        port = self._arguments.get("port")
        if port is None:
            raise MissingRequiredOption("port")

        if _DIGITS.fullmatch(port):
            sock = listen(int(port))
            logger.info(f"Listening on port {port}")
            return sock

        path = Path(port)
        if path.exists():
            number = load_port(path)
            sock = listen(number)
            logger.info(f"Listening on port {number} from port file {path}")
            return sock

        sock = listen(0)
        number = sock.getsockname()[1]
        try:
            write_port(path, number)
        except OSError:
            sock.close()
            raise
        logger.info(f"Listening on ephemeral port {number}, written to {path}")
        return sock
