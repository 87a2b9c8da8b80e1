# File: stormgen/__main__.py
"""
stormgen: Module entry point.

    python -m stormgen -d entities.yaml

Delegates to ``stormgen.cli``.
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from stormgen.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()
