"""Allow ``python -m stork_launcher generate ...`` as an alias of the console script."""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":  # pragma: no cover - exercised via python -m
    raise SystemExit(main())
