"""Utilities to read chat exports from disk and normalize their lines.

Supported inputs: plain ``.txt`` exports and ``.zip`` containers holding a
``.txt`` export. Size limits are enforced here, before any parsing happens.
"""

from __future__ import annotations

import logging
import re
import zipfile
import zlib
from pathlib import Path
from typing import Optional

from .config import MAX_INPUT_BYTES

LOGGER = logging.getLogger(__name__)

# Bidi embedding/override/isolate controls plus LRM/RLM
_DIRECTION_CONTROLS_RE = re.compile("[\u200e\u200f\u202a-\u202e\u2066-\u2069]")
_DIRECTION_MARKS_RE = re.compile("[\u200e\u200f]")
# Narrow no-break space and no-break space
_EXOTIC_SPACES_RE = re.compile("[\u202f\u00a0]")

# --- Public API ----------------------------------------------------


class InputError(Exception):
    """Raised when an input file is missing, oversized, or unreadable."""


def normalize_line(line: str) -> str:
    """Strip direction-control codepoints and map exotic spaces to ``" "``."""
    return _EXOTIC_SPACES_RE.sub(" ", _DIRECTION_CONTROLS_RE.sub("", line))


def strip_direction_marks(text: str) -> str:
    """Remove left-to-right and right-to-left marks only."""
    return _DIRECTION_MARKS_RE.sub("", text)


def load_transcript(path: Path, max_bytes: int = MAX_INPUT_BYTES) -> str:
    """
    Read a chat export into a text buffer.
    Supported: .txt (and other plain text), .zip holding a .txt export.
    """
    if not path.is_file():
        raise InputError(f"No such file: {path}")
    size = path.stat().st_size
    if size > max_bytes:
        raise InputError(
            f"File too large: {size} bytes (maximum {max_bytes} bytes allowed)"
        )
    LOGGER.info("Loading %s (%.2f MB)", path.name, size / 1024 / 1024)
    if path.suffix.lower() == ".zip":
        return load_zip_transcript(path, max_bytes=max_bytes)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise InputError(f"Read failed: {e}") from e
    return read_text_best_effort(raw)


# --- Helpers -------------------------------------------------------


def load_zip_transcript(path: Path, max_bytes: int = MAX_INPUT_BYTES) -> str:
    """Decode the chat text member of a zipped export."""
    try:
        with zipfile.ZipFile(path) as zf:
            member = pick_transcript_member(zf.namelist())
            if member is None:
                raise InputError(f"No .txt transcript inside {path.name}")
            info = zf.getinfo(member)
            if info.file_size > max_bytes:
                raise InputError(
                    f"Archive member too large: {info.file_size} bytes "
                    f"(maximum {max_bytes} bytes allowed)"
                )
            raw = zf.read(member)
    except (
        zipfile.BadZipFile,
        EOFError,
        OSError,
        RuntimeError,
        NotImplementedError,
        zlib.error,
    ) as e:
        raise InputError(f"Zip read failed: {e}") from e
    LOGGER.info("Using archive member %s", member)
    return read_text_best_effort(raw)


def pick_transcript_member(names: list[str]) -> Optional[str]:
    """Choose the archive member most likely to be the chat transcript.

    Prefers ``_chat.txt`` (the usual export name), then any ``.txt`` whose
    name mentions "chat", then the first ``.txt`` member. Directory entries
    and macOS resource forks are ignored.
    """
    candidates = [
        n
        for n in names
        if n.lower().endswith(".txt")
        and not n.endswith("/")
        and not n.startswith("__MACOSX/")
    ]
    if not candidates:
        return None
    for name in candidates:
        if Path(name).name.lower() == "_chat.txt":
            return name
    for name in candidates:
        if "chat" in Path(name).name.lower():
            return name
    return candidates[0]


def read_text_best_effort(raw: bytes) -> str:
    """Decode raw bytes using a best-effort set of encodings.

    Tries UTF BOM-aware decoders and several common encodings before falling
    back to UTF-8 with replacement for undecodable bytes.
    """
    # UTF BOMs
    if raw.startswith(b"\xef\xbb\xbf"):
        return raw.decode("utf-8-sig", errors="replace")
    if raw.startswith((b"\xff\xfe", b"\xfe\xff")):
        return raw.decode("utf-16", errors="replace")
    for enc in ("utf-8", "cp1252", "latin-1"):
        try:
            return raw.decode(enc)
        except UnicodeDecodeError:
            continue
    return raw.decode("utf-8", errors="replace")
