"""Packed username/password blob: `<N>-<username>:<password>`.

N is the UTF-8 byte length of the username. There is no escaping. The length
prefix is what keeps `-` and `:` inside a username unambiguous, so decoding
must follow exactly the same byte slicing rule that older stored entries were
written with.
"""

from __future__ import annotations

import re
from typing import Optional

_PACKED_PREFIX = re.compile(r"^(\d+)-")


def encode_blob(username: str, password: str) -> str:
    return f"{len(username.encode('utf-8'))}-{username}:{password}"


def decode_blob(blob: str) -> Optional[tuple[str, str]]:
    match = _PACKED_PREFIX.match(blob or "")
    if match is None:
        return None
    length = int(match.group(1))
    rest = blob[match.end() :].encode("utf-8")
    username = rest[:length].decode("utf-8", errors="replace")
    password = rest[length + 1 :].decode("utf-8", errors="replace")
    return username, password
