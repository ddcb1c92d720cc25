"""
Decoding of raw log bytes under a configurable encoding label.

Invalid byte sequences are replaced with U+FFFD rather than dropped, for
both whole-file and streamed reads.
"""

import codecs
import logging
from pathlib import Path
from typing import Iterator, Union

from charset_normalizer import from_bytes

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "cp932"
AUTO_ENCODING = "auto"
FALLBACK_ENCODING = "utf-8"

# Labels logs use for Shift_JIS. Producers write the Windows variant with
# the NEC/IBM extensions, which Python calls cp932.
SHIFT_JIS_LABELS = {
    "shift_jis", "shiftjis", "sjis", "s_jis", "x_sjis", "ms_kanji",
    "mskanji", "csshiftjis", "windows_31j", "cp932", "ms932",
}


def resolve_encoding(label: str) -> str:
    """
    Resolve an encoding label to a Python text codec name.

    Shift_JIS labels resolve to cp932. Unknown or empty labels, and codecs
    that are not text encodings (base64, rot13, ...), resolve to UTF-8.
    """
    if not label:
        return FALLBACK_ENCODING
    normalized = label.strip().lower().replace('-', '_')
    if normalized in SHIFT_JIS_LABELS:
        return DEFAULT_ENCODING
    try:
        info = codecs.lookup(normalized)
    except LookupError:
        logger.debug("Unknown encoding label %r, using %s", label, FALLBACK_ENCODING)
        return FALLBACK_ENCODING
    if not getattr(info, '_is_text_encoding', True):
        logger.debug("Label %r is not a text encoding, using %s", label, FALLBACK_ENCODING)
        return FALLBACK_ENCODING
    if info.name in SHIFT_JIS_LABELS:
        return DEFAULT_ENCODING
    return info.name


def detect_encoding(data: bytes) -> str:
    """Guess the encoding of ``data``, falling back to UTF-8."""
    match = from_bytes(data).best()
    if match is None:
        return FALLBACK_ENCODING
    return resolve_encoding(match.encoding)


def _is_auto(label: str) -> bool:
    return bool(label) and label.strip().lower() == AUTO_ENCODING


def decode(data: bytes, label: str = DEFAULT_ENCODING) -> str:
    """Decode bytes under ``label``. Never fails."""
    encoding = detect_encoding(data) if _is_auto(label) else resolve_encoding(label)
    return data.decode(encoding, errors="replace")


def read_whole_file(path: Union[str, Path], label: str = DEFAULT_ENCODING) -> str:
    """
    Read and decode an entire file.

    Raises:
        OSError: if the path cannot be opened or read.
        ValueError: if the path itself is invalid (e.g. contains a NUL byte).
    """
    with open(path, 'rb') as f:
        data = f.read()
    return decode(data, label)


def stream_lines(path: Union[str, Path], label: str = DEFAULT_ENCODING) -> Iterator[str]:
    """
    Yield decoded lines one at a time without their line terminators.

    The file is opened eagerly, so an unopenable path raises ``OSError``
    (or ``ValueError`` for an invalid path) here rather than on first
    iteration. The returned iterator is single-pass and closes the file
    once exhausted.
    """
    handle = open(path, 'rb')
    try:
        if _is_auto(label):
            # Detection needs a sample; the head of the file is representative.
            sample = handle.read(64 * 1024)
            handle.seek(0)
            encoding = detect_encoding(sample)
        else:
            encoding = resolve_encoding(label)
    except BaseException:
        handle.close()
        raise
    return _iter_decoded(handle, encoding)


def _iter_decoded(handle, encoding: str) -> Iterator[str]:
    with handle:
        for raw in handle:
            if raw.endswith(b'\n'):
                raw = raw[:-1]
            if raw.endswith(b'\r'):
                raw = raw[:-1]
            yield raw.decode(encoding, errors="replace")
