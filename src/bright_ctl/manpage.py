from __future__ import annotations

import argparse

from argparse_manpage.manpage import Manpage

PROG = "bright-ctl"

EXAMPLES: list[tuple[str, str]] = [
    ("set 50", "Set current brightness to 50 percent."),
    ("add 10", "Add 10 percent to current brightness."),
    ("sub 20", "Subtract 20 percent from current brightness."),
    (
        "get --device platform::fnlock --class leds",
        "Print current brightness of the leds device platform::fnlock.",
    ),
    (
        "info --class backlight --format csv",
        "Print information about backlight devices as CSV.",
    ),
    ("save", "Remember the raw brightness of every backlight."),
    ("restore", "Put the remembered backlight values back exactly."),
]


def _roff(text: str) -> str:
    return text.replace("\\", "\\\\").replace("-", "\\-")


def _examples_section() -> str:
    lines = [".SH EXAMPLES"]
    for command, about in EXAMPLES:
        lines.append(".TP")
        lines.append(f"\\fB{_roff(PROG)} {_roff(command)}\\fR")
        lines.append(_roff(about))
    return "\n".join(lines) + "\n"


def render_manpage(parser: argparse.ArgumentParser) -> str:
    """Render the parser, its sub-commands and a usage EXAMPLES section as roff."""

    page = str(Manpage(parser)).rstrip("\n") + "\n"
    return page + _examples_section()
