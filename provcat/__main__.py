"""Allow ``python -m provcat``."""

from provcat.cli.cli import main

if __name__ == "__main__":
    main()
