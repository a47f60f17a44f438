"""
pygame host for the interpreter: a window, the keyboard, a 60Hz frame loop
and a beeper.

Keyboard layout (left) mapped onto the hex keypad (right):

    1 2 3 4        1 2 3 C
    Q W E R        4 5 6 D
    A S D F        7 8 9 E
    Z X C V        A 0 B F

F2 resets, F5 saves a snapshot, F9 restores it, Esc quits.
"""

import array
import logging
from dataclasses import dataclass

import pygame as pg

from .cpu import StepOutcome
from .keypad import KEY_COUNT

log = logging.getLogger(__name__)

KEY_MAPPING = {
    pg.K_1: 0x1,
    pg.K_2: 0x2,
    pg.K_3: 0x3,
    pg.K_4: 0xC,
    pg.K_q: 0x4,
    pg.K_w: 0x5,
    pg.K_e: 0x6,
    pg.K_r: 0xD,
    pg.K_a: 0x7,
    pg.K_s: 0x8,
    pg.K_d: 0x9,
    pg.K_f: 0xE,
    pg.K_z: 0xA,
    pg.K_x: 0x0,
    pg.K_c: 0xB,
    pg.K_v: 0xF
}

SAMPLE_RATE = 44100


@dataclass
class FrontendConfig:
    ips: int = 700 # instructions per second
    timer_hz: int = 60
    scale: int = 5 # window pixels per high res pixel
    foreground: tuple = (255, 255, 255)
    background: tuple = (0, 0, 0)
    tone_hz: int = 440
    volume: float = 0.25


class Frontend:
    def __init__(self, vm, config=None, title="CHIP-8 Emulator"):
        self.vm = vm
        self.config = config or FrontendConfig()
        self.title = title
        self.saved_state = None
        self.running = False
        self.screen = None
        self.clock = None
        self.beep = None
        self.beeping = False

    def build_beep(self):
        # One period of a square wave, looped while the sound timer is active
        period = max(1, SAMPLE_RATE // self.config.tone_hz)
        amplitude = int(32767 * self.config.volume)
        samples = array.array("h", [amplitude if n < period // 2 else -amplitude for n in range(period)])
        return pg.mixer.Sound(buffer=samples.tobytes())

    def set_keys(self):
        keys = pg.key.get_pressed()
        key_states = [False] * KEY_COUNT

        for key, value in KEY_MAPPING.items():
            if keys[key]:
                key_states[value] = True

        self.vm.set_input(key_states)

    def run_frame(self):
        steps = max(1, self.config.ips // self.config.timer_hz)

        for _ in range(steps):
            outcome = self.vm.step()
            if outcome is not StepOutcome.CONTINUED:
                break

        self.vm.tick()

    def draw_graphics(self):
        self.screen.fill(self.config.background)
        width, height, rows = self.vm.framebuffer()
        size = self.screen.get_width() // width

        for y in range(height):
            for x in range(width):
                if rows[y][x]:
                    pg.draw.rect(self.screen, self.config.foreground, (x * size, y * size, size, size))

        # print debug info
        status = "" if self.vm.running else f" - {self.vm.fault or 'exited'}"
        pg.display.set_caption(f"{self.title} - FPS: {int(self.clock.get_fps())}{status}")

        pg.display.flip()

    def play_sound(self):
        active = self.vm.is_sound_active()
        if self.beep is None or active == self.beeping:
            return

        if active:
            self.beep.play(loops=-1)
        else:
            self.beep.stop()
        self.beeping = active

    def handle_event(self, event):
        if event.type == pg.QUIT:
            self.running = False
        elif event.type == pg.KEYDOWN:
            if event.key == pg.K_ESCAPE:
                self.running = False
            elif event.key == pg.K_F2:
                self.vm.reset()
            elif event.key == pg.K_F5:
                self.saved_state = self.vm.snapshot()
                log.info("Saved state")
            elif event.key == pg.K_F9 and self.saved_state is not None:
                self.vm.restore(self.saved_state)
                log.info("Restored state")

    def run(self):
        pg.mixer.pre_init(SAMPLE_RATE, -16, 1)
        pg.init()

        self.screen = pg.display.set_mode((128 * self.config.scale, 64 * self.config.scale))
        pg.display.set_caption(self.title)
        self.clock = pg.time.Clock()

        try:
            self.beep = self.build_beep()
        except pg.error as exc:
            log.warning("No audio device, running silent: %s", exc)

        self.running = True
        try:
            while self.running:
                for event in pg.event.get():
                    self.handle_event(event)
                self.set_keys()
                self.run_frame()
                self.play_sound()
                self.draw_graphics()
                self.clock.tick(self.config.timer_hz)
        finally:
            pg.quit()
