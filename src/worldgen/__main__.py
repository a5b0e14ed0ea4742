"""Entry point for ``python -m worldgen``."""

from .cli import main

raise SystemExit(main())
