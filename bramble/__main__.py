"""Entry point for the Bramble CLI.

Running ``python -m bramble`` calls the main function from the cli module.
"""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
