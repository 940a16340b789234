from __future__ import annotations

import sys
from typing import Sequence

from nfa_builder.cli import run as run_cli


def main(argv: Sequence[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    return run_cli(argv)


if __name__ == "__main__":
    raise SystemExit(main())
