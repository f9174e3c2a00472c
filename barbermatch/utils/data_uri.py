import base64
import binascii
import re
from typing import NamedTuple

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>[A-Za-z0-9+/=\s]+)$")


class DataURIError(ValueError):
    pass


class DataURI(NamedTuple):
    mime_type: str
    data: str  # base64 payload

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.data)


def parse_data_uri(value: str) -> DataURI:
    """Split a 'data:<mimetype>;base64,<encoded_data>' URI"""
    match = _DATA_URI_RE.match(value or "")
    if not match:
        raise DataURIError("Expected a data URI of the form 'data:<mimetype>;base64,<encoded_data>'")
    data = re.sub(r"\s", "", match.group("data"))
    try:
        base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DataURIError(f"Invalid base64 payload: {e}") from e
    return DataURI(match.group("mime"), data)


def to_data_uri(mime_type: str, payload: bytes) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(payload).decode('ascii')}"
