"""Allow running the CLI with ``python -m parallel_cli``."""

from parallel_cli.cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
