"""Entry point for `python -m agent_session_stats`."""

import sys


def main():
    from agent_session_stats.app import run
    sys.exit(run())


if __name__ == "__main__":
    main()
