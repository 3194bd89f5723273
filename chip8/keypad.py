"""Hexadecimal keypad state."""

from typing import Iterable, Optional
from .errors import InvalidKey

KEY_COUNT = 16


class Keypad:
    """Sixteen pressed/released flags, one per hex key 0x0-0xF."""

    def __init__(self):
        self._keys: list[bool] = [False] * KEY_COUNT

    def _check_key(self, key: int) -> None:
        if not 0 <= key < KEY_COUNT:
            raise InvalidKey(f"Key out of range: {key}")

    def press(self, key: int) -> None:
        self._check_key(key)
        self._keys[key] = True

    def release(self, key: int) -> None:
        self._check_key(key)
        self._keys[key] = False

    def release_all(self) -> None:
        self._keys = [False] * KEY_COUNT

    def set_state(self, pressed: Iterable[int]) -> None:
        """Replace the whole state: listed keys down, all others up."""
        keys = list(pressed)
        for key in keys:
            self._check_key(key)
        self._keys = [False] * KEY_COUNT
        for key in keys:
            self._keys[key] = True

    def is_pressed(self, key: int) -> bool:
        self._check_key(key)
        return self._keys[key]

    def first_pressed(self) -> Optional[int]:
        """Lowest-numbered key currently down, or None."""
        for key, down in enumerate(self._keys):
            if down:
                return key
        return None

    def pressed_keys(self) -> list[int]:
        return [key for key, down in enumerate(self._keys) if down]
