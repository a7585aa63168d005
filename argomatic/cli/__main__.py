"""Allow ``python -m argomatic.cli``."""

from argomatic.cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
