"""
copyplane CLI - command-line access to key sanitation, transfer strategy
selection and secret resolution.

Install:
    pip install copyplane[cli]

This creates the 'copyplane' command via entry point in pyproject.toml.
"""

import sys

# Check for optional CLI dependencies
try:
    import click  # noqa: F401
    import rich  # noqa: F401

    HAS_CLI_DEPS = True
except ImportError:
    HAS_CLI_DEPS = False


def main():
    """Main entry point for the copyplane CLI."""
    if not HAS_CLI_DEPS:
        print("The copyplane CLI needs extra packages: pip install copyplane[cli]", file=sys.stderr)
        sys.exit(1)

    from copyplane.cli.app import cli

    cli()


if __name__ == "__main__":
    main()
