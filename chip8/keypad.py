"""
The 16-key hex keypad, laid out as:

    1 2 3 C
    4 5 6 D
    7 8 9 E
    A 0 B F

The host overwrites the whole latch before every step.
"""

KEY_COUNT = 16


class Keypad:
    def __init__(self):
        self.keys = [False] * KEY_COUNT

    def set_input(self, key_states):
        key_states = [bool(state) for state in key_states]
        if len(key_states) != KEY_COUNT:
            raise ValueError(f"Expected {KEY_COUNT} key states, got {len(key_states)}")

        self.keys = key_states

    def is_pressed(self, key):
        return self.keys[key & 0xF]

    def pressed(self):
        return frozenset(key for key in range(KEY_COUNT) if self.keys[key])
