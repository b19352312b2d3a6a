# lockstep/cli.py
"""
Verify a replay from the command line.

Usage:
  lockstep-verify levels/map1.txt 8r
  lockstep-verify my_level.txt "6d2r" --quiet

Exit status: 0 cleared, 1 not cleared, 2 malformed input.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from lockstep.replay import ReplayError, verify_replay


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Replay a move sequence against a level and print the verdict.")
    parser.add_argument("level", help="Path to the level text file")
    parser.add_argument("replay", help="Replay string, e.g. 6d2r")
    parser.add_argument("--quiet", action="store_true", help="Only set the exit status")
    args = parser.parse_args(argv)

    try:
        level_text = Path(args.level).read_text(encoding="utf-8")
    except OSError as exc:
        print(f"cannot read level: {exc}", file=sys.stderr)
        return 2

    try:
        verdict = verify_replay(level_text, args.replay)
    except ReplayError as exc:
        print(f"rejected: {exc}", file=sys.stderr)
        return 2

    if not args.quiet:
        print(json.dumps({**verdict.to_dict(), "outcome": verdict.outcome.value}))
    return 0 if verdict.ok else 1


if __name__ == "__main__":
    sys.exit(main())
