"""Entry point for ``python -m gs1900ctl`` and the ``gs1900ctl`` script.

Examples:
  gs1900ctl --host 192.168.1.1 --password <PW> interface-status

  GS1900CTL_PASSWORD=<PW> gs1900ctl --host 192.168.1.1 poe-consumption
"""

from __future__ import annotations

import os
import sys

from tabulate import tabulate

from gs1900ctl import __version__, configure_logging
from gs1900ctl import glogger
from gs1900ctl.cli import main as cli_main


def _print_startup_banner() -> None:
    startup_rows = [
        ["version", __version__],
        ["prompt", os.getenv("GS1900CTL_PROMPT_PATTERN", "default")],
    ]

    for var in ("GITHUB_REF", "GITHUB_SHA", "BUILDTIME"):
        val = os.environ.get(var)
        if val and not val.endswith("_is_undefined"):
            startup_rows.append([var, val])

    table_str = tabulate(startup_rows, tablefmt="mixed_grid")
    lines = table_str.split("\n")
    table_width = len(lines[0])
    title = "gs1900ctl starting up"
    title_border = "┍" + "━" * (table_width - 2) + "┑"
    title_row = "│ " + title.center(table_width - 4) + " │"
    separator = lines[0].replace("┍", "┝").replace("┑", "┥").replace("┯", "┿")

    glogger.opt(raw=True).info(
        "\n{}\n", title_border + "\n" + title_row + "\n" + separator + "\n" + "\n".join(lines[1:])
    )


def main() -> None:
    """Main entry point. The banner is only shown with ``-v``."""
    if "-v" in sys.argv[1:] or "--verbose" in sys.argv[1:]:
        configure_logging()
        glogger.enable("gs1900ctl")
        _print_startup_banner()
    cli_main(sys.argv[1:])


if __name__ == "__main__":
    main()
