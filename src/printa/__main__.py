"""Allow ``python -m printa``."""

from printa.cli import main

if __name__ == "__main__":
    main()
