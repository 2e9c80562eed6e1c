"""Allow ``python -m hc05_scan`` to run a scan."""

from __future__ import annotations

import sys


def main() -> None:
    from hc05_scan import run
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
