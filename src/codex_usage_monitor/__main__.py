"""Entry point for `python -m codex_usage_monitor`."""

import sys


def main():
    from codex_usage_monitor.app import run
    sys.exit(run())


if __name__ == "__main__":
    main()
