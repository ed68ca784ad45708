"""Module entrypoint for ``python -m lazylauncher``.

Argument parsing and runtime setup happen in ``lazylauncher.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
