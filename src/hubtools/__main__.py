"""Allow running as python -m hubtools."""

from hubtools.cli import main

if __name__ == "__main__":
    main()
