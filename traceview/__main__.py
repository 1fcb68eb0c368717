"""Module entrypoint for ``python -m traceview``.

All argument parsing and setup happen in ``traceview.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
