import threading
from dataclasses import dataclass, field
from typing import Dict

STATE_IDLE = "idle"
STATE_AWAITING_CUSTOM_EMOJI = "awaiting_custom_emoji"


@dataclass(frozen=True)
class UserState:
    kind: str = STATE_IDLE
    text: str = ""


IDLE = UserState()


@dataclass
class State:
    user_states: Dict[int, UserState] = field(default_factory=dict)
    lock: threading.Lock = field(default_factory=threading.Lock)


def get_user_state(state: State, user_id: int) -> UserState:
    with state.lock:
        return state.user_states.get(user_id, IDLE)


def set_user_state(state: State, user_id: int, user_state: UserState) -> None:
    with state.lock:
        state.user_states[user_id] = user_state


def clear_user_state(state: State, user_id: int) -> bool:
    with state.lock:
        if user_id in state.user_states:
            del state.user_states[user_id]
            return True
    return False


def await_custom_emoji(state: State, user_id: int, text: str) -> None:
    set_user_state(state, user_id, UserState(kind=STATE_AWAITING_CUSTOM_EMOJI, text=text))


class StateRepository:
    """Per-user awaiting-input state used by chat handlers."""

    def __init__(self, state: State) -> None:
        self.state = state

    def get_user_state(self, user_id: int) -> UserState:
        return get_user_state(self.state, user_id)

    def set_user_state(self, user_id: int, user_state: UserState) -> None:
        set_user_state(self.state, user_id, user_state)

    def clear_user_state(self, user_id: int) -> bool:
        return clear_user_state(self.state, user_id)

    def await_custom_emoji(self, user_id: int, text: str) -> None:
        await_custom_emoji(self.state, user_id, text)
