"""Entry point for: python -m xiaoi [--user ID] QUESTION... (ask questions from the command line).

Credentials and pool settings come from the environment / .env (XIAOI_APP_KEY, XIAOI_APP_SECRET, ...).
"""
import argparse
import logging
import os
import sys
import threading

from xiaoi.config import get_parameters
from xiaoi.dispatcher import Xiaoi
from xiaoi.errors import XiaoiError
from xiaoi.queue.schemas import Message


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="python -m xiaoi", description="Ask the xiaoi NLP API one or more questions.")
    parser.add_argument("questions", nargs="+", help="Question text (one request per argument)")
    parser.add_argument("--user", default="cli", help="userId sent with every question")
    parser.add_argument("--wait", type=float, default=None, help="Seconds to wait for answers (default: per-call timeout + 5)")
    args = parser.parse_args(argv)

    pending = threading.Semaphore(0)

    def on_answer(msg: Message) -> None:
        if msg.error is not None:
            print(f"[{msg.id}] <no answer: {msg.error.value}>")
        else:
            print(f"[{msg.id}] {msg.answer}")
        pending.release()

    try:
        params = get_parameters()
    except XiaoiError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
        format="%(asctime)s [xiaoi] %(levelname)s %(name)s %(message)s",
    )

    try:
        dispatcher = Xiaoi(params, on_answer)
    except XiaoiError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    posted = 0
    with dispatcher:
        for q in args.questions:
            try:
                dispatcher.post(args.user, q)
                posted += 1
            except XiaoiError as e:
                print(f"Not sent ({e}): {q}", file=sys.stderr)
        wait = args.wait if args.wait is not None else params.timeout + 5
        for _ in range(posted):
            if not pending.acquire(timeout=wait):
                print("Timed out waiting for answers", file=sys.stderr)
                return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
