"""Telegram file_id parsing.

A file_id is the unpadded base64url encoding of a record compacted with a
zero run-length scheme. The first four bytes of the expanded record are a
little-endian type id, optionally OR-ed with the web-location and
file-reference flags.
"""

import base64
import binascii
import re
from enum import Enum
from typing import Dict


class FileIdDecodeError(ValueError):
    """Raised when a file_id cannot be parsed."""


class Base64DecodeError(FileIdDecodeError):
    pass


class RecordTooShortError(FileIdDecodeError):
    pass


class MediaKind(Enum):
    PHOTO = "photo"
    VIDEO = "video"
    VOICE = "voice"
    DOCUMENT = "document"
    STICKER = "sticker"
    AUDIO = "audio"
    ANIMATION = "animation"
    VIDEO_NOTE = "video_note"
    UNKNOWN = "unknown"


TYPE_ID_FILE_REFERENCE_FLAG = 1 << 25
TYPE_ID_WEB_LOCATION_FLAG = 1 << 24

TYPE_THUMBNAIL = 0
TYPE_PROFILE_PHOTO = 1
TYPE_PHOTO = 2
TYPE_VOICE = 3
TYPE_VIDEO = 4
TYPE_DOCUMENT = 5
TYPE_STICKER = 8
TYPE_AUDIO = 9
TYPE_ANIMATION = 10
TYPE_VIDEO_NOTE = 13

TYPE_ID_TO_MEDIA_KIND: Dict[int, MediaKind] = {
    TYPE_THUMBNAIL: MediaKind.PHOTO,
    TYPE_PROFILE_PHOTO: MediaKind.PHOTO,
    TYPE_PHOTO: MediaKind.PHOTO,
    TYPE_VOICE: MediaKind.VOICE,
    TYPE_VIDEO: MediaKind.VIDEO,
    TYPE_DOCUMENT: MediaKind.DOCUMENT,
    TYPE_STICKER: MediaKind.STICKER,
    TYPE_AUDIO: MediaKind.AUDIO,
    TYPE_ANIMATION: MediaKind.ANIMATION,
    TYPE_VIDEO_NOTE: MediaKind.VIDEO_NOTE,
}

BASE64URL_RE = re.compile(r"[A-Za-z0-9_-]*")
BASE64URL_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"


def base64url_decode(value: str) -> bytes:
    if not BASE64URL_RE.fullmatch(value):
        raise Base64DecodeError("file_id contains characters outside the base64url alphabet")
    residual = len(value) % 4
    if residual == 1:
        raise Base64DecodeError("file_id has an invalid base64url length")
    if residual:
        # Unused low bits of the last symbol must be zero.
        unused_mask = 0x0F if residual == 2 else 0x03
        if BASE64URL_ALPHABET.index(value[-1]) & unused_mask:
            raise Base64DecodeError("file_id has non-zero trailing bits")
    padded = value + "=" * ((4 - residual) % 4)
    try:
        return base64.urlsafe_b64decode(padded)
    except binascii.Error as exc:
        raise Base64DecodeError(f"file_id is not valid base64url: {exc}") from exc


def rle_decode(data: bytes) -> bytes:
    result = bytearray()
    i = 0
    while i < len(data):
        if data[i] == 0:
            if i + 1 >= len(data):
                break
            result.extend(b"\x00" * data[i + 1])
            i += 2
        else:
            result.append(data[i])
            i += 1
    return bytes(result)


def normalize_type_id(type_id: int) -> int:
    return type_id & ~TYPE_ID_FILE_REFERENCE_FLAG & ~TYPE_ID_WEB_LOCATION_FLAG


def media_kind_for_type_id(type_id: int) -> MediaKind:
    return TYPE_ID_TO_MEDIA_KIND.get(normalize_type_id(type_id), MediaKind.UNKNOWN)


def read_type_id(file_id: str) -> int:
    record = rle_decode(base64url_decode(file_id))
    if len(record) < 4:
        raise RecordTooShortError(
            f"file_id record too short ({len(record)} bytes). Need at least 4 bytes."
        )
    return int.from_bytes(record[:4], "little")


def decode_media_kind(file_id: str) -> MediaKind:
    return media_kind_for_type_id(read_type_id(file_id))
