"""Console script entry point (``ledger-lens``)."""
from __future__ import annotations

from typing import Optional, Sequence

from ledger_lens.cli.commands import app

PROG_NAME = "ledger-lens"


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Run the CLI on ``argv``, or on the process arguments when omitted."""
    app(args=list(argv) if argv is not None else None, prog_name=PROG_NAME)


if __name__ == "__main__":
    main()
