"""Module entrypoint for ``python -m notesview``.

All argument parsing and runtime setup happen in ``notesview.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
