# File: csvx/__main__.py
"""
csvx — Module entry point.

Allows running the checker directly via::

    python -m csvx check SCHEMA INPUT...

This module simply delegates to the CLI entry point defined in ``csvx.cli``.
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from csvx.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()
