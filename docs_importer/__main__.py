"""Main entry point for the docs importer."""
from .cli import main


if __name__ == "__main__":
    main()
