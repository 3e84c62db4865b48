"""Allow ``python -m dumpreport``."""

from dumpreport.cli import main

if __name__ == "__main__":
    main()
