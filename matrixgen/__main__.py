""""""

from __future__ import annotations

from .console import run

if __name__ == "__main__":
    run(prog_name="matrixgen")
