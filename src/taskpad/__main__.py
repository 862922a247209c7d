"""Entry point for ``python -m taskpad``."""
from taskpad.cli import main

if __name__ == "__main__":
    main()
