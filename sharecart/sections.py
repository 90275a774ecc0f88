"""
Section parser: INI text -> {section: {key: value}}.

Wraps configparser so the codec only ever sees plain dicts or a
SectionSyntaxError.
"""

from __future__ import annotations

import configparser
from typing import Dict

# A header line can never contain a newline, so no input section maps onto
# configparser's fallback section.
_NO_DEFAULT_SECTION = "\n"


class SectionSyntaxError(ValueError):
    """The text could not be tokenized into sections at all."""


def _new_parser() -> configparser.ConfigParser:
    return configparser.ConfigParser(
        delimiters=("=",),
        interpolation=None,
        strict=False,
        empty_lines_in_values=False,
        default_section=_NO_DEFAULT_SECTION,
    )


def parse_sections(text: str) -> Dict[str, Dict[str, str]]:
    """
    Parse INI text.

    Section names keep their casing; keys are lowercased by configparser.
    Repeated sections are merged and repeated keys keep the last value.
    """
    parser = _new_parser()
    # configparser folds indented lines into the previous value and has no
    # switch for it; every line stands on its own here.
    flat = "\n".join(line.lstrip() for line in text.split("\n"))
    try:
        parser.read_string(flat)
    except configparser.Error as e:
        raise SectionSyntaxError(str(e)) from e

    return {
        name: dict(parser.items(name, raw=True))
        for name in parser.sections()
    }
