#!/usr/bin/env python3
"""Hide text and Telegram file_ids behind an emoji, and recover them."""

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from typing import List, Optional

try:
    from .dispatch import MEDIA_DELIVERIES, decode_payload, deliver_payload
    from .emojis import get_random_emoji
    from .file_id_decoder import (
        FileIdDecodeError,
        MediaKind,
        decode_media_kind,
        media_kind_for_type_id,
        normalize_type_id,
        read_type_id,
    )
    from .file_reference import decode_with_file_check, encode_file_id, wrap_file_id
    from .state_store import STATE_AWAITING_CUSTOM_EMOJI, StateRepository
    from .variation_codec import (
        EncoderError,
        contains_hidden_markers,
        decode,
        encode,
        from_variation_selector,
        to_variation_selector,
    )
except ImportError:
    from dispatch import MEDIA_DELIVERIES, decode_payload, deliver_payload
    from emojis import get_random_emoji
    from file_id_decoder import (
        FileIdDecodeError,
        MediaKind,
        decode_media_kind,
        media_kind_for_type_id,
        normalize_type_id,
        read_type_id,
    )
    from file_reference import decode_with_file_check, encode_file_id, wrap_file_id
    from state_store import STATE_AWAITING_CUSTOM_EMOJI, StateRepository
    from variation_codec import (
        EncoderError,
        contains_hidden_markers,
        decode,
        encode,
        from_variation_selector,
        to_variation_selector,
    )

NO_ENCODED_MESSAGE = "❌ No encoded message found"
CONSOLE_CHAT_ID = 0


@dataclass
class Config:
    default_emoji: Optional[str]
    max_payload_bytes: int


def parse_int_env(name: str, default: int, minimum: int = 1) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if parsed < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return parsed


def validate_carrier(carrier: str, source: str = "Carrier emoji") -> str:
    cleaned = carrier.strip()
    if not cleaned:
        raise ValueError(f"{source} cannot be blank")
    if contains_hidden_markers(cleaned):
        raise ValueError(f"{source} must not contain variation selectors: {cleaned!r}")
    return cleaned


def parse_default_emoji_env() -> Optional[str]:
    raw = os.getenv("EMOJI_CODEC_DEFAULT_EMOJI")
    if raw is None:
        return None
    return validate_carrier(raw, "EMOJI_CODEC_DEFAULT_EMOJI")


def load_config() -> Config:
    return Config(
        default_emoji=parse_default_emoji_env(),
        max_payload_bytes=parse_int_env("EMOJI_CODEC_MAX_PAYLOAD_BYTES", 4096),
    )


def pick_carrier(config: Config, requested: Optional[str] = None) -> str:
    if requested is not None:
        return validate_carrier(requested)
    if config.default_emoji:
        return config.default_emoji
    return get_random_emoji()


def encode_for_config(
    config: Config,
    text: str,
    carrier: Optional[str] = None,
    as_file_id: bool = False,
) -> str:
    payload = wrap_file_id(text) if as_file_id else text
    size = len(payload.encode("utf-8"))
    if size > config.max_payload_bytes:
        raise ValueError(
            f"Payload too large ({size} bytes). Max is {config.max_payload_bytes} bytes."
        )
    return encode(pick_carrier(config, carrier), payload)


def complete_custom_emoji(
    repo: StateRepository,
    config: Config,
    user_id: int,
    emoji: str,
) -> Optional[str]:
    """Encode the text a user parked while choosing a custom emoji.

    Returns None when the user was not waiting for an emoji. If encoding fails
    the parked text is kept so the user can pick another emoji.
    """
    user_state = repo.get_user_state(user_id)
    if user_state.kind != STATE_AWAITING_CUSTOM_EMOJI:
        return None
    encoded = encode_for_config(config, user_state.text, carrier=emoji)
    repo.clear_user_state(user_id)
    return encoded


class ConsoleDeliveryClient:
    """Delivery client that prints instead of calling the Bot API."""

    def __init__(self, stream=None) -> None:
        self.stream = stream if stream is not None else sys.stdout

    def send_media(self, chat_id: int, method: str, field: str, file_id: str) -> None:
        print(f"{method} {field}={file_id}", file=self.stream)

    def send_message(self, chat_id: int, text: str) -> None:
        print(text, file=self.stream)


def describe_file_id(file_id: str) -> List[str]:
    type_id = read_type_id(file_id)
    normalized = normalize_type_id(type_id)
    media_kind = media_kind_for_type_id(type_id)
    lines = [
        f"type_id: {type_id:#010x}",
        f"normalized: {normalized}",
        f"media_kind: {media_kind.value}",
    ]
    delivery = MEDIA_DELIVERIES.get(media_kind)
    if delivery is not None:
        lines.append(f"delivery: {delivery.method} ({delivery.field})")
    return lines


def run_encode(config: Config, args: argparse.Namespace) -> int:
    try:
        encoded = encode_for_config(
            config,
            args.text,
            carrier=args.emoji,
            as_file_id=args.file_id,
        )
    except ValueError as exc:
        logging.error("Encoding failed: %s", exc)
        return 1
    print(encoded)
    return 0


def run_decode(args: argparse.Namespace, client=None) -> int:
    client = client if client is not None else ConsoleDeliveryClient()
    text = args.text
    if not contains_hidden_markers(text):
        client.send_message(CONSOLE_CHAT_ID, NO_ENCODED_MESSAGE)
        return 1
    try:
        payload = decode_payload(text)
    except EncoderError as exc:
        logging.warning("Decoding failed: %s", exc)
        client.send_message(CONSOLE_CHAT_ID, f"❌ Error decoding: {exc}")
        return 1
    if not payload.content:
        client.send_message(CONSOLE_CHAT_ID, NO_ENCODED_MESSAGE)
        return 1
    deliver_payload(client, CONSOLE_CHAT_ID, payload)
    return 0


def run_inspect(args: argparse.Namespace) -> int:
    try:
        lines = describe_file_id(args.file_id.strip())
    except FileIdDecodeError as exc:
        logging.error("Invalid file_id: %s", exc)
        return 1
    for line in lines:
        print(line)
    return 0


def run_self_test() -> int:
    sample = "Hello 世界 🌍"
    encoded = encode("😀", sample)
    if decode(encoded) != sample:
        print("self-test failed: text round trip mismatch", file=sys.stderr)
        return 1

    file_id = "AgACAwEC"
    is_file, content = decode_with_file_check(encode_file_id("🚀", f" {file_id}\n"))
    if not is_file or content != file_id:
        print("self-test failed: file_id round trip mismatch", file=sys.stderr)
        return 1
    if decode_media_kind(content) is not MediaKind.PHOTO:
        print("self-test failed: file_id media kind mismatch", file=sys.stderr)
        return 1

    for value in range(256):
        if from_variation_selector(ord(to_variation_selector(value))) != value:
            print(f"self-test failed: selector mapping broken for {value}", file=sys.stderr)
            return 1

    print("self-test ok")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Emoji variation-selector codec")
    parser.add_argument(
        "--self-test",
        action="store_true",
        help="run local self test and exit",
    )
    subparsers = parser.add_subparsers(dest="command")

    encode_parser = subparsers.add_parser("encode", help="hide text behind an emoji")
    encode_parser.add_argument("text", help="text (or file_id with --file-id) to hide")
    encode_parser.add_argument("--emoji", default=None, help="carrier emoji")
    encode_parser.add_argument(
        "--file-id",
        action="store_true",
        help="treat text as a Telegram file_id",
    )

    decode_parser = subparsers.add_parser("decode", help="recover hidden text")
    decode_parser.add_argument("text", help="encoded emoji text")

    inspect_parser = subparsers.add_parser("inspect", help="show a file_id's media kind")
    inspect_parser.add_argument("file_id", help="raw Telegram file_id")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=os.getenv("EMOJI_CODEC_LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    if args.self_test:
        return run_self_test()

    try:
        config = load_config()
    except Exception as exc:
        logging.error("Configuration error: %s", exc)
        return 1

    if args.command == "encode":
        return run_encode(config, args)
    if args.command == "decode":
        return run_decode(args)
    if args.command == "inspect":
        return run_inspect(args)

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
