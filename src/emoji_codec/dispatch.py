import logging
from dataclasses import dataclass
from typing import Dict, Optional, Protocol

try:
    from .file_id_decoder import FileIdDecodeError, MediaKind, decode_media_kind
    from .file_reference import unwrap_file_id
    from .variation_codec import decode
except ImportError:
    from file_id_decoder import FileIdDecodeError, MediaKind, decode_media_kind
    from file_reference import unwrap_file_id
    from variation_codec import decode


class MediaDeliveryClientProtocol(Protocol):
    def send_media(self, chat_id: int, method: str, field: str, file_id: str) -> None:
        ...

    def send_message(self, chat_id: int, text: str) -> None:
        ...


@dataclass(frozen=True)
class MediaDelivery:
    method: str
    field: str


MEDIA_DELIVERIES: Dict[MediaKind, MediaDelivery] = {
    MediaKind.PHOTO: MediaDelivery("sendPhoto", "photo"),
    MediaKind.VIDEO: MediaDelivery("sendVideo", "video"),
    MediaKind.VOICE: MediaDelivery("sendVoice", "voice"),
    MediaKind.DOCUMENT: MediaDelivery("sendDocument", "document"),
    MediaKind.STICKER: MediaDelivery("sendSticker", "sticker"),
    MediaKind.AUDIO: MediaDelivery("sendAudio", "audio"),
    MediaKind.ANIMATION: MediaDelivery("sendAnimation", "animation"),
    MediaKind.VIDEO_NOTE: MediaDelivery("sendVideoNote", "video_note"),
}


@dataclass
class DecodedPayload:
    is_file: bool
    content: str
    media_kind: Optional[MediaKind] = None
    delivery: Optional[MediaDelivery] = None


def resolve_decoded_text(decoded_text: str) -> DecodedPayload:
    """Classify decoded text as a wrapped file_id or literal text.

    Every entry point that shows decoded content to a user goes through here.
    """
    is_file, content = unwrap_file_id(decoded_text)
    if not is_file:
        return DecodedPayload(is_file=False, content=content)

    try:
        media_kind = decode_media_kind(content)
    except FileIdDecodeError as exc:
        logging.warning("Decoded file_id could not be parsed: %s", exc)
        return DecodedPayload(is_file=True, content=content)

    return DecodedPayload(
        is_file=True,
        content=content,
        media_kind=media_kind,
        delivery=MEDIA_DELIVERIES.get(media_kind),
    )


def decode_payload(text: str) -> DecodedPayload:
    return resolve_decoded_text(decode(text))


def build_decoded_text_message(content: str) -> str:
    return f"🔓 Decoded message:\n\n{content}"


def build_opaque_file_message(file_id: str) -> str:
    return (
        f"🔓 Decoded file ID:\n\n{file_id}\n\n"
        "⚠️ Unable to send this file. It may have been deleted or is no longer accessible."
    )


def deliver_payload(
    client: MediaDeliveryClientProtocol,
    chat_id: int,
    payload: DecodedPayload,
) -> bool:
    """Send a decoded payload to chat_id.

    Returns True when the payload went out in its intended form (literal text,
    or the media itself), False when a file_id had to be shown as plain text.
    """
    if not payload.is_file:
        client.send_message(chat_id, build_decoded_text_message(payload.content))
        return True

    if payload.delivery is not None:
        try:
            client.send_media(
                chat_id,
                payload.delivery.method,
                payload.delivery.field,
                payload.content,
            )
            return True
        except Exception:
            logging.exception(
                "Failed to re-deliver %s for chat_id=%s",
                payload.delivery.method,
                chat_id,
            )

    client.send_message(chat_id, build_opaque_file_message(payload.content))
    return False
