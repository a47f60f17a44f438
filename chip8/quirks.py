"""
Compatibility quirks, chosen once when a program is loaded.

- quirk-memory     : FX55/FX65 leave I unchanged instead of advancing it
- quirk-shift      : 8XY6/8XYE shift VX in place and ignore VY
- quirk-collision  : DXYN reports the number of rows that collided or were
                     clipped by the bottom edge, rows past the bottom are clipped
- quirk-resolution : switching between low and high res clears the screen
- quirk-lores16    : DXY0 draws a 16x16 sprite in low res instead of 8x16
"""

import logging
from dataclasses import dataclass, fields

log = logging.getLogger(__name__)

FLAG_PREFIX = "quirk-"


@dataclass(frozen=True)
class QuirkSet:
    memory: bool = False
    shift: bool = False
    collision: bool = False
    resolution: bool = False
    lores16: bool = False

    @classmethod
    def names(cls):
        return [FLAG_PREFIX + field.name for field in fields(cls)]

    @classmethod
    def from_flags(cls, flags, strict=False):
        """Build a QuirkSet from flag names such as "quirk-shift".

        Unrecognised names are logged and ignored, or rejected with a
        ValueError when strict is set.
        """
        known = cls.names()
        enabled = {}

        for flag in flags:
            if flag not in known:
                if strict:
                    raise ValueError(f"Unknown quirk: {flag}")
                log.warning("Ignoring unknown quirk %r", flag)
                continue
            enabled[flag[len(FLAG_PREFIX):]] = True

        return cls(**enabled)

    def flags(self):
        return [FLAG_PREFIX + field.name for field in fields(self) if getattr(self, field.name)]
