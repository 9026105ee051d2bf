"""Entry point for ``python -m denylog``."""

from denylog.cli import main

if __name__ == "__main__":
    main()
