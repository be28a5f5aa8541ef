from __future__ import annotations

from .diff import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
