"""Sum of trochoidal waves used to animate the water surface."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field

NUM_WAVES = 16
GRAVITY = 9.8


@dataclass
class Wave:
    """One trochoidal wave component."""

    kx: float = 0.0
    ky: float = 0.0
    kmod: float = 0.0
    amplitude: float = 0.0
    amplitude_over_k: float = 0.0
    w: float = 0.0
    phi0: float = 0.0
    phase: float = 0.0


def _uniform(rng: random.Random, low: float, high: float) -> float:
    return low + (high - low) * rng.random()


@dataclass
class WaterTrochoids:
    """A set of waves spread around a main direction."""

    amplitude: float = 0.1
    amplitude_mul: float = 0.5
    lambda0: float = 14.0
    lambda_mul: float = 1.2
    direction: float = 1.0
    angle_dev: float = 0.2
    waves: list[Wave] = field(default_factory=list)

    def create_waves(self, rng: random.Random | None = None) -> None:
        """Create the waves, each one longer and weaker than the previous."""
        rng = rng if rng is not None else random.Random()
        dir_x = math.cos(self.direction)
        dir_y = math.sin(self.direction)

        self.waves = []
        scale = 1.0
        wavelength = self.lambda0
        for _ in range(NUM_WAVES):
            rads = self.angle_dev * _uniform(rng, -1.0, 1.0)
            rx = math.cos(rads)
            ry = math.sin(rads)

            k = 2.0 * math.pi / wavelength
            amplitude = scale * self.amplitude
            self.waves.append(
                Wave(
                    kx=k * (dir_x * rx + dir_y * ry),
                    ky=k * (dir_x * -ry + dir_y * rx),
                    kmod=k,
                    amplitude=amplitude,
                    amplitude_over_k=amplitude / k,
                    w=math.sqrt(GRAVITY * k),
                    phi0=_uniform(rng, 0.0, 2.0 * math.pi),
                )
            )
            wavelength *= self.lambda_mul
            scale *= self.amplitude_mul

    def update_waves(self, time: float) -> None:
        """Advance every wave phase to the given time."""
        for wave in self.waves:
            wave.phase = wave.w * time + wave.phi0

    def pack_waves(self) -> list[float]:
        """Wave constants packed for a shader, four waves at a time.

        Each block of four waves holds kx, ky, amplitude/k, amplitude and
        phase, four values each. Waves beyond the last full block leave zeros.
        """
        packed = [0.0] * (len(self.waves) * 5)
        pos = 0
        for start in range(0, len(self.waves) - len(self.waves) % 4, 4):
            block = self.waves[start : start + 4]
            for attribute in ("kx", "ky", "amplitude_over_k", "amplitude", "phase"):
                packed[pos : pos + 4] = [getattr(wave, attribute) for wave in block]
                pos += 4
        return packed