"""
Delay and sound timers. Both are 8-bit and count down at 60Hz until they
reach 0. The host drives the countdown through tick(), not the CPU.
"""


class Timers:
    def __init__(self):
        self.delay_timer = 0
        self.sound_timer = 0

    def tick(self):
        if self.delay_timer > 0:
            self.delay_timer -= 1

        if self.sound_timer > 0:
            self.sound_timer -= 1

    def set_delay(self, value):
        self.delay_timer = value & 0xFF

    def set_sound(self, value):
        self.sound_timer = value & 0xFF

    def get_delay(self):
        return self.delay_timer

    def get_sound(self):
        return self.sound_timer

    def is_sound_active(self):
        return self.sound_timer > 0
