"""Hide UTF-8 text behind a carrier emoji using Unicode variation selectors."""

from typing import List, Optional, Union


class EncoderError(ValueError):
    """Raised when a payload cannot be hidden in or recovered from a carrier."""


class InvalidByteError(EncoderError):
    def __init__(self, value: int) -> None:
        super().__init__(f"Invalid byte value: {value}")
        self.value = value


class Utf8DecodeError(EncoderError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Hidden payload is not valid UTF-8: {reason}")
        self.reason = reason


# Variation Selectors block, VS1..VS16
VARIATION_SELECTOR_START = 0xFE00
VARIATION_SELECTOR_END = 0xFE0F

# Variation Selectors Supplement block, VS17..VS256
VARIATION_SELECTOR_SUPPLEMENT_START = 0xE0100
VARIATION_SELECTOR_SUPPLEMENT_END = 0xE01EF

LOW_BYTE_LIMIT = VARIATION_SELECTOR_END - VARIATION_SELECTOR_START + 1


def is_variation_selector(code_point: int) -> bool:
    return (
        VARIATION_SELECTOR_START <= code_point <= VARIATION_SELECTOR_END
        or VARIATION_SELECTOR_SUPPLEMENT_START <= code_point <= VARIATION_SELECTOR_SUPPLEMENT_END
    )


def to_variation_selector(value: int) -> str:
    if not isinstance(value, int) or value < 0 or value > 0xFF:
        raise InvalidByteError(value)
    if value < LOW_BYTE_LIMIT:
        return chr(VARIATION_SELECTOR_START + value)
    return chr(VARIATION_SELECTOR_SUPPLEMENT_START + value - LOW_BYTE_LIMIT)


def from_variation_selector(code_point: int) -> Optional[int]:
    if VARIATION_SELECTOR_START <= code_point <= VARIATION_SELECTOR_END:
        return code_point - VARIATION_SELECTOR_START
    if VARIATION_SELECTOR_SUPPLEMENT_START <= code_point <= VARIATION_SELECTOR_SUPPLEMENT_END:
        return code_point - VARIATION_SELECTOR_SUPPLEMENT_START + LOW_BYTE_LIMIT
    return None


def contains_hidden_markers(text: str) -> bool:
    """Cheap pre-filter: True when text holds at least one selector code point."""
    return any(is_variation_selector(ord(ch)) for ch in text)


def encode(carrier: str, payload: Union[str, bytes]) -> str:
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    parts: List[str] = [carrier]
    for value in payload:
        parts.append(to_variation_selector(value))
    return "".join(parts)


def decode_bytes(text: str) -> bytes:
    decoded = bytearray()
    for ch in text:
        value = from_variation_selector(ord(ch))
        if value is not None:
            decoded.append(value)
        elif decoded:
            # Only the first contiguous selector run is read.
            break
    return bytes(decoded)


def decode(text: str) -> str:
    raw = decode_bytes(text)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise Utf8DecodeError(exc.reason) from exc
