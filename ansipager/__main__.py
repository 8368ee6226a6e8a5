"""Module entrypoint for ``python -m ansipager``.

All argument parsing and runtime setup happen in ``ansipager.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
