"""
Fixed on-disk contract for the o_o.ini file.

Everything the encoder writes and the decoder looks for is spelled here once.
"""

SECTION_NAME = "Main"
# Decoder fallback spelling; nothing else is accepted.
SECTION_ALIASES = ("Main", "main")

MAP_KEYS = ("MapX", "MapY")
MISC_KEYS = ("Misc0", "Misc1", "Misc2", "Misc3")
PLAYER_NAME_KEY = "PlayerName"
SWITCH_KEYS = tuple(f"Switch{i}" for i in range(8))

KEY_ORDER = MAP_KEYS + MISC_KEYS + (PLAYER_NAME_KEY,) + SWITCH_KEYS

U16_MAX = 0xFFFF
MAP_MODULUS = 1024  # coordinates are 10 bits
PLAYER_NAME_MAX_BYTES = 1023

TRUE_TOKEN = "TRUE"
FALSE_TOKEN = "FALSE"

LINE_TERMINATOR = "\n"
