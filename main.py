"""
Command-line entry point.

Runs one assistant session against a PNG on disk and writes the generated,
wrapped script to a file for the editor to run.

Run: python main.py "draw a red mushroom" --image sprite.png --output out.lua
"""

import argparse
import logging
import sys
import time

from config import Config
from infra import InfraBootstrap, InfraConfig
from services.document import FileDocumentHost, SelectionRect
from services.script import FileScriptExecutor

logger = logging.getLogger(__name__)


def _parse_selection(value: str) -> SelectionRect:
    try:
        x, y, w, h = (int(part) for part in value.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError("selection must be x,y,width,height")
    return SelectionRect(x=x, y=y, width=w, height=h)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate an Aseprite Lua script from a request.")
    parser.add_argument("prompt", help="What to draw")
    parser.add_argument("--image", required=True, help="PNG snapshot of the active sprite (indexed PNGs also supply the palette)")
    parser.add_argument("--output", default="autopaint.lua", help="Where to write the script")
    parser.add_argument("--selection", type=_parse_selection, default=None,
                        help="Active selection as x,y,width,height")
    parser.add_argument("--timeout", type=float, default=None,
                        help="Give up waiting after this many seconds")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # Setup logging
    logging.basicConfig(
        level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if not Config.validate():
        return 2

    bootstrap = InfraBootstrap.get_instance(InfraConfig.from_settings())
    logger.info(f"Starting session: {bootstrap!r}")

    session = bootstrap.create_session(
        document=FileDocumentHost(args.image, selection=args.selection),
        executor=FileScriptExecutor(args.output),
    )

    if not session.submit(args.prompt):
        print(f"System: {session.status}")
        return 1

    deadline = time.monotonic() + args.timeout if args.timeout else None
    result = None
    try:
        while result is None:
            if deadline is not None and time.monotonic() > deadline:
                print("System: Timed out waiting for a reply.")
                return 1
            time.sleep(bootstrap.config.poll_interval_s)
            result = session.poll()
    except KeyboardInterrupt:
        session.cancel()
        return 130
    finally:
        session.close()

    for message in session.history:
        print(f"{message.role}: {message.text}")

    return 0 if result.status == "completed" else 1


if __name__ == "__main__":
    sys.exit(main())
