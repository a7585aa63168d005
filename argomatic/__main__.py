"""
Module entry-point that makes the package runnable with

    python -m argomatic
    python -m argomatic.cli

Behaves exactly like the *argomatic-cli* console script.
"""

from argomatic.cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
