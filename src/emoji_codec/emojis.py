import random
from typing import Tuple

# Carriers must not contain variation selectors themselves, so the heart is
# the bare U+2764 rather than its emoji-presentation sequence.
EMOJI_LIST: Tuple[str, ...] = (
    "😀", "😂", "🥰", "😎", "🤔", "👍", "👎", "👏",
    "😅", "🤝", "🎉", "🎂", "🍕", "❤", "🌞", "🌙",
    "🔥", "💯", "🚀", "👀", "💀", "🥹",
)


def get_random_emoji() -> str:
    return random.choice(EMOJI_LIST)
