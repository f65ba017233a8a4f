"""
Focus Frenzy Capture Service — Capture Filename Codec
=======================================================

What:  Converts capture metadata (IP, score, write time) into a filename and
       parses a filename back into approximate metadata.
Why:   The captures directory doubles as the record store. The filename is
       the only place the IP, score and write time are kept.
How:   Pure string functions, no I/O.

Filename grammar (persisted on disk, must stay stable):

    capture_<sanitizedIp>_score<rawScore>_<epochMillis>.jpg

    e.g. capture_203.0.113.5_score42_1700000000123.jpg

Lossiness:
    Every IP character outside [A-Za-z0-9.] becomes "_", so distinct raw
    IPs can map to the same stored form. Decoding only ever returns the
    sanitized form. The score is embedded verbatim.

Decoding policy:
    Best effort, never raises. Unrecoverable fields become "unknown".
"""

import re
from typing import NamedTuple, Optional

FILENAME_PREFIX = "capture"
SCORE_MARKER = "score"
CAPTURE_EXTENSION = ".jpg"
UNKNOWN = "unknown"

_UNSAFE_IP_CHARS = re.compile(r"[^A-Za-z0-9.]")

# The IP group is greedy so the last "_score" it can reach ends it. A
# sanitized IP such as "a_score" therefore survives. The score keeps any
# underscores up to the trailing "_<digits>". A score that itself contains
# "_score" is the one ambiguous case and splits in favour of the IP.
_CAPTURE_NAME = re.compile(
    r"^capture_(?P<ip>[A-Za-z0-9._]*)_score(?P<score>.*)_(?P<millis>\d+)$",
    re.DOTALL,
)


class DecodedName(NamedTuple):
    """Metadata recovered from a capture filename."""

    ip: str
    score: str
    captured_at_millis: Optional[int]


def sanitize_ip(ip: Optional[str]) -> str:
    """Replace every character outside [A-Za-z0-9.] with '_'; empty becomes 'unknown'."""
    if not ip:
        return UNKNOWN
    return _UNSAFE_IP_CHARS.sub("_", ip)


def encode_filename(ip: Optional[str], score: Optional[str], now_millis: int) -> str:
    """
    Build the storage filename for a capture.

    Args:
        ip: Client-reported IP address (sanitized here).
        score: Game score, embedded as given. None is embedded as "".
        now_millis: Server-side epoch milliseconds at write time.

    Returns:
        `capture_<ip>_score<score>_<now_millis>.jpg`
    """
    raw_score = "" if score is None else str(score)
    return (
        f"{FILENAME_PREFIX}_{sanitize_ip(ip)}_{SCORE_MARKER}{raw_score}"
        f"_{int(now_millis)}{CAPTURE_EXTENSION}"
    )


def _or_unknown(value: Optional[str]) -> str:
    return value if value else UNKNOWN


def decode_filename(filename: str) -> DecodedName:
    """
    Recover IP, score and write time from a capture filename.

    Names that follow the full grammar are parsed with it, which keeps
    sanitized IPs containing "_" intact. Anything else falls back to
    positional tokens (IP = 2nd, score = 4th minus "score"), so stray
    files still show up in listings with placeholder fields.
    """
    stem = filename
    if stem.endswith(CAPTURE_EXTENSION):
        stem = stem[: -len(CAPTURE_EXTENSION)]

    match = _CAPTURE_NAME.match(stem)
    if match:
        return DecodedName(
            ip=_or_unknown(match.group("ip")),
            score=_or_unknown(match.group("score")),
            captured_at_millis=int(match.group("millis")),
        )

    parts = stem.split("_")
    ip = parts[1] if len(parts) > 1 else None
    score = parts[3].replace(SCORE_MARKER, "", 1) if len(parts) > 3 else None
    return DecodedName(ip=_or_unknown(ip), score=_or_unknown(score), captured_at_millis=None)
