"""Protean Engine runner for the academy domain.

In production (event_processing = "async") the Engine delivers order events
to the cart and enrollment handlers:
- OrderPlaced → clear purchased courses from the cart
- OrderPaid   → provision one enrollment per purchased course

Usage:
    python src/server.py
    python src/server.py --test-mode   # drain pending messages and exit
"""

import argparse
import asyncio

from protean.server.engine import Engine


def main():
    parser = argparse.ArgumentParser(description="Academy Engine runner")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Process pending messages once and exit",
    )
    args = parser.parse_args()

    from academy.domain import academy

    academy.init()
    engine = Engine(academy, test_mode=args.test_mode)
    asyncio.run(engine.run())


if __name__ == "__main__":
    main()
