"""File-name rules and payload marshaling across the sandbox boundary.

HDR sources enter the browser as base64 data URLs and ENV results come back
as *binary strings* (one character per byte, code points 0-255), which is what
``FileReader.readAsBinaryString`` produces.
"""

from __future__ import annotations

import base64
import binascii
import re

HDR_MARKER = ".hdr"
ENV_MARKER = ".env"
HDR_MIME_TYPE = "image/vnd.radiance"
DATA_URL_PREFIX = f"data:{HDR_MIME_TYPE};base64,"

_HDR_MARKER_RE = re.compile(re.escape(HDR_MARKER), re.IGNORECASE)


def is_hdr_path(name: str) -> bool:
    """Return ``True`` when ``name`` contains ``.hdr`` anywhere, ignoring case.

    The match is a substring test rather than a suffix test, so names such as
    ``sky.hdr.bak`` or ``a.HDRX.foo`` are selected too.
    """
    return HDR_MARKER in name.lower()


def derive_env_name(name: str) -> str:
    """Replace the first ``.hdr`` occurrence (any case) in ``name`` with ``.env``.

    Parameters
    ----------
    name : str
        Source file name.

    Returns
    -------
    str
        Output file name; ``name`` itself when it contains no marker.
    """
    return _HDR_MARKER_RE.sub(ENV_MARKER, name, count=1)


def encode_data_url(data: bytes) -> str:
    """Encode raw HDR bytes as a ``image/vnd.radiance`` base64 data URL."""
    return DATA_URL_PREFIX + base64.b64encode(data).decode("ascii")


def decode_data_url(url: str) -> bytes:
    """Decode a data URL produced by :func:`encode_data_url`.

    Raises
    ------
    ValueError
        If the prefix is wrong or the body is not valid base64.
    """
    if not url.startswith(DATA_URL_PREFIX):
        raise ValueError(f"data URL must start with '{DATA_URL_PREFIX}'")
    try:
        return base64.b64decode(url[len(DATA_URL_PREFIX) :], validate=True)
    except binascii.Error as exc:
        raise ValueError(f"invalid base64 payload: {exc}") from exc


def binary_string_to_bytes(text: str) -> bytes:
    """Convert a browser binary string into raw bytes.

    Raises
    ------
    ValueError
        If a character falls outside the single-byte range.
    """
    try:
        return text.encode("latin-1")
    except UnicodeEncodeError as exc:
        raise ValueError(
            f"binary string contains a non byte-sized character at index {exc.start}"
        ) from exc


def bytes_to_binary_string(data: bytes) -> str:
    """Inverse of :func:`binary_string_to_bytes`."""
    return data.decode("latin-1")
