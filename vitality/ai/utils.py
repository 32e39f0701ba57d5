import base64
import binascii
import re
from dataclasses import dataclass
from typing import Optional

_DATA_URI = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.DOTALL)


@dataclass
class InlineImage:
    mime_type: str
    data: bytes


def normalize_model_id(model_string: str) -> str:
    """
    Sanitizes a model string to be SDK-compatible.

    - 'model="gemini-3-flash-preview"' -> 'gemini-3-flash-preview'
    - '"gemini-2.5-flash-image"' -> 'gemini-2.5-flash-image'
    """
    if not model_string:
        return model_string

    s = model_string.strip()
    if s.lower().startswith("model="):
        s = s[6:]
    return s.strip("\"' ")


def to_data_uri(image: InlineImage) -> str:
    encoded = base64.b64encode(image.data).decode("ascii")
    return f"data:{image.mime_type};base64,{encoded}"


def parse_data_uri(locator: str) -> InlineImage:
    """Split a data URI locator into its media type and decoded payload.

    Raises ValueError when the locator is not a base64 data URI.
    """
    match = _DATA_URI.match(locator or "")
    if not match:
        raise ValueError("Locator is not a base64 data URI")
    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e
    return InlineImage(mime_type=match.group("mime"), data=data)


def with_api_key(uri: str, api_key: Optional[str]) -> str:
    """Append the access credential a download link needs to be fetchable."""
    if not api_key:
        return uri
    separator = "&" if "?" in uri else "?"
    return f"{uri}{separator}key={api_key}"
