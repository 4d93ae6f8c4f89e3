"""
Key notation <-> raw register bytes

encode_keys() turns notation such as "ihello<Esc>" or "<c-F>" into the raw
characters the editor stores in a register. decode_keys() turns raw characters
back into one canonical notation ("<C-F>"), so different spellings of the same
key compare equal after a round trip.
"""

import re

_TOKEN_RE = re.compile(r"<([^<>]+)>")

# Named keys (matched case-insensitively) -> raw character
NAMED_KEYS = {
    "cr": "\r",
    "enter": "\r",
    "return": "\r",
    "nl": "\n",
    "esc": "\x1b",
    "tab": "\t",
    "bs": "\x08",
    "space": " ",
    "lt": "<",
    "bar": "|",
    "bslash": "\\",
}

# Raw character -> canonical notation
CANONICAL_NAMES = {
    "\r": "<CR>",
    "\n": "<NL>",
    "\x1b": "<Esc>",
    "\t": "<Tab>",
    "\x08": "<BS>",
    " ": "<Space>",
    "<": "<lt>",
}


def _encode_token(name: str):
    """Raw character for the inside of a <...> token, or None if unknown"""
    lowered = name.lower()
    if lowered in NAMED_KEYS:
        return NAMED_KEYS[lowered]

    if lowered.startswith("c-") and len(name) == 3:
        key = name[2].upper()
        if "@" <= key <= "_":
            return chr(ord(key) - 64)
        if key == "?":
            return "\x7f"
    return None


def encode_keys(text: str) -> str:
    """Replace key notation with raw characters. Unknown <...> stays literal."""
    out = []
    pos = 0
    for match in _TOKEN_RE.finditer(text):
        raw = _encode_token(match.group(1))
        if raw is None:
            continue
        out.append(text[pos:match.start()])
        out.append(raw)
        pos = match.end()
    out.append(text[pos:])
    return "".join(out)


def decode_keys(raw: str) -> str:
    """Render raw characters as canonical key notation"""
    out = []
    for ch in raw:
        if ch in CANONICAL_NAMES:
            out.append(CANONICAL_NAMES[ch])
        elif ord(ch) < 0x20:
            out.append(f"<C-{chr(ord(ch) + 64)}>")
        elif ch == "\x7f":
            out.append("<C-?>")
        else:
            out.append(ch)
    return "".join(out)


def normalize_keys(text: str) -> str:
    """Canonical notation for a key sequence given in any notation"""
    return decode_keys(encode_keys(text))
