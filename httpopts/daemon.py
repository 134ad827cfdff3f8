import asyncio
import logging
import signal
import socket

from .models import SettingsInfo
from .settings import UNBOUNDED, Settings
from .utils.config import get_log_dir, get_log_path

logger = logging.getLogger(__name__)


class ListenerDaemon:
    """Startup sequence of a server front.

    Resolves the listening socket and keeps it open until the lifetime runs
    out or the process is told to stop. Accepting connections is left to
    whoever serves on the socket.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.sock: socket.socket | None = None
        self._shutdown_event = asyncio.Event()

    @property
    def port(self) -> int | None:
        if self.sock is None:
            return None
        return self.sock.getsockname()[1]

    async def start(self) -> None:
        # numeric options must be valid before the socket is bound
        info = SettingsInfo.from_settings(self.settings)
        self.sock = self.settings.socket()

        loop = asyncio.get_running_loop()
        lifetime = self.settings.lifetime()
        timeout = None if lifetime == UNBOUNDED else max(lifetime, 0) / 1000
        try:
            for sig in (signal.SIGTERM, signal.SIGINT):
                loop.add_signal_handler(sig, self.shutdown)

            logger.info(
                f"Daemon started on port {self.port} "
                f"(threads={info.threads}, lifetime={info.lifetime}, max_latency={info.max_latency}, "
                f"daemon={info.daemon}, hit_refresh={info.hit_refresh})"
            )
            await asyncio.wait_for(self._shutdown_event.wait(), timeout)
        except asyncio.TimeoutError:
            logger.info(f"Lifetime of {lifetime} ms elapsed")
        finally:
            for sig in (signal.SIGTERM, signal.SIGINT):
                loop.remove_signal_handler(sig)
            self._close()

    def shutdown(self) -> None:
        logger.info("Shutting down daemon")
        self._shutdown_event.set()

    def _close(self) -> None:
        if self.sock is not None:
            self.sock.close()


def configure_logging(settings: Settings) -> None:
    if settings.is_daemon():
        log_dir = get_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(get_log_path())
    else:
        handler = logging.StreamHandler()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[handler],
    )


async def run_daemon(settings: Settings) -> None:
    """Run the listener daemon until its lifetime ends or it is stopped."""
    configure_logging(settings)

    daemon = ListenerDaemon(settings)
    await daemon.start()
