#!/usr/bin/env python3
"""List the character names stored in the ten slots of a save file."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import Sequence

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ersave.parser import read_slot_names  # noqa: E402


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Show the character name held by each save slot."
    )
    parser.add_argument("save", type=Path, help="Path to the .sl2 save file")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log decoding details"
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        data = args.save.read_bytes()
    except OSError as err:
        print(f"error: cannot read save file: {err}", file=sys.stderr)
        return 2

    result = read_slot_names(data)
    if not result.ok:
        print(f"error: {result.error}", file=sys.stderr)
        return 1

    for index, name in enumerate(result.names):
        print(f"{index}  {name if name else '(empty)'}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
