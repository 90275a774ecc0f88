"""
Record codec: o_o.ini text <-> Record.

decode never raises. A field that cannot be read keeps its default; a
document that cannot be tokenized, or has no [Main] section, decodes to the
all-default Record. encode is total and always writes every key, in order,
with LF line endings.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from .models import Record, ReportItem
from .normalize import (
    REPLACEMENT_CHAR,
    decode_player_name,
    encode_player_name,
    parse_switch,
    parse_u16,
    repair_utf8,
    wrap_10bit,
)
from .rules import (
    FALSE_TOKEN,
    KEY_ORDER,
    LINE_TERMINATOR,
    MAP_KEYS,
    MAP_MODULUS,
    MISC_KEYS,
    PLAYER_NAME_KEY,
    PLAYER_NAME_MAX_BYTES,
    SECTION_ALIASES,
    SECTION_NAME,
    SWITCH_KEYS,
    TRUE_TOKEN,
)
from .sections import SectionSyntaxError, parse_sections

logger = logging.getLogger(__name__)

# Keys come out of the section parser lowercased.
_MAP_INDEX = {k.lower(): i for i, k in enumerate(MAP_KEYS)}
_MISC_INDEX = {k.lower(): i for i, k in enumerate(MISC_KEYS)}
_SWITCH_INDEX = {k.lower(): i for i, k in enumerate(SWITCH_KEYS)}
_PLAYER_NAME = PLAYER_NAME_KEY.lower()
_BOOLEAN_WORDS = (TRUE_TOKEN.lower(), FALSE_TOKEN.lower())
_FILTERED_CHARS = ("\r", "\n", REPLACEMENT_CHAR)


def _find_section(sections: Dict[str, Dict[str, str]]):
    for name in SECTION_ALIASES:
        if name in sections:
            return sections[name]
    return None


def _read_u16(key: str, value: str, warnings: List[ReportItem]) -> int:
    n = parse_u16(value)
    if n is None:
        warnings.append(ReportItem(key=key, issue="not_u16", value=value, action="defaulted_to_0"))
        return 0
    return n


def decode_with_report(text: str) -> Tuple[Record, List[ReportItem]]:
    """
    Decode o_o.ini text and list every recovery that was applied.

    Keys match case-insensitively. Section "Main" is preferred over "main";
    no other spelling is looked up.
    """
    warnings: List[ReportItem] = []

    try:
        sections = parse_sections(text)
    except SectionSyntaxError as e:
        logger.debug("unparseable sharecart text, using defaults: %s", e)
        warnings.append(ReportItem(issue="syntax_error", value=str(e), action="defaulted_record"))
        return Record(), warnings

    props = _find_section(sections)
    if props is None:
        logger.debug("no [%s] section, using defaults", SECTION_NAME)
        warnings.append(ReportItem(key=SECTION_NAME, issue="missing_section", action="defaulted_record"))
        return Record(), warnings

    maps = [0, 0]
    misc = [0, 0, 0, 0]
    player_name = ""
    switch = [False] * 8

    for key, value in props.items():
        if key in _MAP_INDEX:
            n = _read_u16(key, value, warnings)
            if n >= MAP_MODULUS:
                warnings.append(ReportItem(key=key, issue="out_of_range", value=value, action="reduced_mod_1024"))
            maps[_MAP_INDEX[key]] = wrap_10bit(n)

        elif key in _MISC_INDEX:
            misc[_MISC_INDEX[key]] = _read_u16(key, value, warnings)

        elif key == _PLAYER_NAME:
            raw = value.encode("utf-8", errors="surrogatepass")
            raw_len = len(raw)
            player_name = decode_player_name(value)
            if raw_len > PLAYER_NAME_MAX_BYTES:
                warnings.append(ReportItem(
                    key=key,
                    issue="player_name_truncated",
                    value=str(raw_len),
                    action=f"truncated_to_{PLAYER_NAME_MAX_BYTES}_bytes",
                ))
            kept = repair_utf8(raw[:PLAYER_NAME_MAX_BYTES])
            if any(c in kept for c in _FILTERED_CHARS):
                warnings.append(ReportItem(key=key, issue="player_name_filtered", action="removed_characters"))

        elif key in _SWITCH_INDEX:
            on = parse_switch(value)
            if value.lower() not in _BOOLEAN_WORDS:
                warnings.append(ReportItem(key=key, issue="not_boolean", value=value, action="read_as_false"))
            switch[_SWITCH_INDEX[key]] = on

        else:
            warnings.append(ReportItem(key=key, issue="unknown_key", action="ignored"))

    if warnings:
        logger.debug("recovered %d field(s) while decoding", len(warnings))

    record = Record(
        map_x=maps[0],
        map_y=maps[1],
        misc=misc,
        player_name=player_name,
        switch=switch,
    )
    return record, warnings


def decode(text: str) -> Record:
    """Decode o_o.ini text into a Record. Never raises."""
    record, _ = decode_with_report(text)
    return record


def encode(record: Record) -> str:
    """Serialize a Record as a complete o_o.ini file body."""
    values = [record.map_x % MAP_MODULUS, record.map_y % MAP_MODULUS]
    values.extend(record.misc)
    values.append(encode_player_name(record.player_name))
    values.extend(TRUE_TOKEN if on else FALSE_TOKEN for on in record.switch)

    lines = [f"[{SECTION_NAME}]"]
    lines.extend(f"{key}={value}" for key, value in zip(KEY_ORDER, values))
    return LINE_TERMINATOR.join(lines) + LINE_TERMINATOR
