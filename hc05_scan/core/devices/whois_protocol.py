"""
WHOIS query/response codec.

Request is the ASCII line ``WHOIS\\n``. A device answers with the same token
followed by a ``;``-separated list of ``KEY=value`` fields, e.g.::

    WHOIS ID=HC05-01;NAME=Sensor1;ORG=Lab;FW=1.2

There is no escaping: a value containing ``;`` or ``=`` splits wherever the
separator lands.
"""

from __future__ import annotations

from typing import Dict, Optional

WHOIS_COMMAND = "WHOIS"
LINE_ENDING = "\n"

FIELD_ID = "ID"
FIELD_NAME = "NAME"
FIELD_ORG = "ORG"
FIELD_FW = "FW"


def encode_query() -> bytes:
    """Return the bytes written to a port to ask the device to identify itself."""
    return f"{WHOIS_COMMAND}{LINE_ENDING}".encode("ascii")


def parse_response(text: str) -> Dict[str, str]:
    """Parse a ``KEY=value;KEY=value`` field list.

    Keys and values are trimmed independently, parts with an empty key are
    dropped and a repeated key keeps its last value. Never raises.
    """
    fields: Dict[str, str] = {}
    for part in text.split(";"):
        key, _, value = part.partition("=")
        key = key.strip()
        if not key:
            continue
        fields[key] = value.strip()
    return fields


def decode_reply(data: bytes) -> str:
    """Decode raw port bytes as UTF-8, replacing invalid sequences, and trim."""
    return data.decode("utf-8", errors="replace").strip()


def extract_fields(text: str) -> Optional[Dict[str, str]]:
    """Return the fields of a WHOIS reply, or None when ``text`` is not one."""
    text = text.strip()
    if not text.startswith(WHOIS_COMMAND):
        return None
    return parse_response(text[len(WHOIS_COMMAND):].lstrip())


__all__ = [
    "WHOIS_COMMAND",
    "FIELD_ID",
    "FIELD_NAME",
    "FIELD_ORG",
    "FIELD_FW",
    "encode_query",
    "parse_response",
    "decode_reply",
    "extract_fields",
]
