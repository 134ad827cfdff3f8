"""Entry point for the httpopts listener daemon."""

import asyncio
import sys


def main():
    """Run the listener daemon with settings taken from the command line."""
    from .daemon import run_daemon
    from .errors import SettingsError
    from .settings import Settings

    try:
        settings = Settings(sys.argv[1:])
        asyncio.run(run_daemon(settings))
    except (SettingsError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
