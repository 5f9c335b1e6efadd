"""Module entrypoint for running srsoundbank as ``python -m srsoundbank``."""

from __future__ import annotations

from srsoundbank.cli import main


if __name__ == "__main__":
    main()
