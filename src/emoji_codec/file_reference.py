from typing import Tuple

try:
    from .variation_codec import decode, encode
except ImportError:
    from variation_codec import decode, encode

FILE_SENTINEL = "TG_FILE_"

# str.isspace also accepts the ASCII information separators, which are not
# Unicode White_Space and stay part of the file_id.
INFORMATION_SEPARATORS = frozenset("\x1c\x1d\x1e\x1f")


def is_file_id_whitespace(ch: str) -> bool:
    return ch.isspace() and ch not in INFORMATION_SEPARATORS


def wrap_file_id(file_id: str) -> str:
    return f"{FILE_SENTINEL}{file_id.strip()}"


def unwrap_file_id(decoded_text: str) -> Tuple[bool, str]:
    """Split decoded text into (is_file, content).

    The sentinel may appear anywhere in the text; everything after its first
    occurrence, with all whitespace removed, is the file_id. Literal text that
    happens to contain the sentinel is indistinguishable from a wrapped file_id.
    """
    pos = decoded_text.find(FILE_SENTINEL)
    if pos != -1:
        tail = decoded_text[pos + len(FILE_SENTINEL):]
        file_id = "".join(ch for ch in tail if not is_file_id_whitespace(ch))
        if file_id:
            return True, file_id
    return False, decoded_text


def encode_file_id(carrier: str, file_id: str) -> str:
    return encode(carrier, wrap_file_id(file_id))


def decode_with_file_check(text: str) -> Tuple[bool, str]:
    return unwrap_file_id(decode(text))
