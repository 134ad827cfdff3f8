import logging
import os
import re
import subprocess
import sys
import time
from pathlib import Path

from .errors import MalformedNumber

logger = logging.getLogger(__name__)

PORT_FILE_CHARS = 8

_PORT = re.compile(r"[0-9]+")


def load_port(port_path: Path) -> int:
    """Read the port number stored in a port file.

    At most PORT_FILE_CHARS characters are read. Raises MalformedNumber when
    the file is empty or holds something other than a number.
    """
    with open(port_path, encoding="utf-8") as f:
        text = f.read(PORT_FILE_CHARS).strip()

    if not _PORT.fullmatch(text):
        raise MalformedNumber("port", text)

    logger.debug(f"Read port {text} from {port_path}")
    return int(text)


def read_port(port_path: Path) -> int | None:
    if not port_path.exists():
        return None

    try:
        return load_port(port_path)
    except (MalformedNumber, OSError):
        return None


def write_port(port_path: Path, port: int) -> None:
    port_path.parent.mkdir(parents=True, exist_ok=True)
    with open(port_path, "w", encoding="utf-8") as f:
        f.write(str(port))
    logger.debug(f"Wrote port {port} to {port_path}")


def remove_port(port_path: Path) -> None:
    try:
        port_path.unlink()
    except FileNotFoundError:
        pass


def wait_for_port(port_path: Path, timeout: float = 5.0, interval: float = 0.1) -> int:
    """Wait until another process has written its port to port_path."""
    deadline = time.monotonic() + timeout
    while True:
        port = read_port(port_path)
        if port is not None:
            return port
        if time.monotonic() >= deadline:
            raise TimeoutError(f"No port written to {port_path} within {timeout}s")
        time.sleep(interval)


def spawn_listener(port_path: Path, *args: str) -> subprocess.Popen:
    """Start a listener daemon that reports its port through port_path."""
    cmd = [sys.executable, "-m", "httpopts.daemon_cli", f"--port={port_path}", *args]
    logger.info(f"Spawning listener: {' '.join(cmd)}")
    return subprocess.Popen(
        cmd,
        start_new_session=True,
        env=os.environ.copy(),
    )
