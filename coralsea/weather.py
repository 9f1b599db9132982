"""Sky, sun and fog presets for the ocean scene."""

from __future__ import annotations

import math
from dataclasses import InitVar, dataclass, field
from enum import Enum

Vec3 = tuple[float, float, float]
Vec4 = tuple[float, float, float, float]


class Mood(Enum):
    """Predefined weather moods."""

    CLEAR = "clear"
    DUSK = "dusk"
    CLOUDY = "cloudy"
    NIGHT = "night"
    CUSTOM = "custom"


_NAMED_MOODS = {
    "cloudy": Mood.CLOUDY,
    "dusk": Mood.DUSK,
    "night": Mood.NIGHT,
}


def mood_from(name: str) -> Mood:
    """Return the mood for a scene type name; unknown names mean a clear sky."""
    return _NAMED_MOODS.get(name, Mood.CLEAR)


def int_color(r: int, g: int, b: int, a: int = 255) -> Vec4:
    """Convert 8-bit colour channels to a normalised RGBA tuple."""
    div = 1.0 / 255.0
    return (div * r, div * g, div * b, div * a)


def _divided(vec: tuple[float, ...], divisor: float) -> tuple[float, ...]:
    return tuple(c / divisor for c in vec)


def _normalized(vec: Vec3) -> Vec3:
    norm = math.sqrt(sum(c * c for c in vec))
    if norm > 0.0:
        return tuple(c / norm for c in vec)  # type: ignore[return-value]
    return vec


_ZERO3: Vec3 = (0.0, 0.0, 0.0)
_ZERO4: Vec4 = (0.0, 0.0, 0.0, 0.0)

_COLOR_ORIGINS = {
    "light": "light_color",
    "fog": "fog_color",
    "sunAmbient": "sun_ambient",
    "sunDiffuse": "sun_diffuse",
}


@dataclass
class Weather:
    """Lighting conditions of the sky above the water."""

    name: InitVar[str] = "clear"
    cubemap: str = field(init=False, default="")
    light_color: Vec4 = field(init=False, default=_ZERO4)
    fog_color: Vec4 = field(init=False, default=_ZERO4)
    fog_density: float = field(init=False, default=0.0012)
    sun_position: Vec3 = field(init=False, default=_ZERO3)
    sun_diffuse: Vec4 = field(init=False, default=_ZERO4)
    sun_ambient: Vec4 = field(init=False, default=_ZERO4)

    def __post_init__(self, name: str) -> None:
        self.switch_to(mood_from(name))

    def sun_direction(self) -> Vec3:
        """Direction of the sunlight, pointing from the sun."""
        return tuple(-c for c in self.sun_position)  # type: ignore[return-value]

    def switch_to(self, mood: Mood) -> None:
        """Load the preset colours and sun position of a mood."""
        if mood is Mood.CUSTOM:
            self.cubemap = "sky_custom"
        elif mood is Mood.CLEAR:
            self.cubemap = "sky_clear"
            self.fog_color = int_color(199, 226, 255)
            self.light_color = int_color(136, 226, 255)
            self.sun_position = (326.573, 1212.99, 1275.19)
            self.sun_diffuse = int_color(191, 191, 191)
            self.sun_ambient = _divided(self.sun_diffuse, 3.0)  # type: ignore[assignment]
        elif mood is Mood.DUSK:
            self.cubemap = "sky_dusk"
            self.fog_color = self.light_color = int_color(244, 228, 179)
            self.sun_position = (520.0, 1900.0, 550.0)
            self.sun_diffuse = int_color(251, 251, 161)
            self.sun_ambient = _divided(self.sun_diffuse, 4.0)  # type: ignore[assignment]
        elif mood is Mood.CLOUDY:
            self.cubemap = "sky_fair_cloudy"
            self.fog_color = self.light_color = int_color(172, 224, 251)
            self.sun_position = (-1056.89, -771.886, 1221.18)
            self.sun_diffuse = int_color(191, 191, 191)
            self.sun_ambient = _divided(self.sun_diffuse, 2.0)  # type: ignore[assignment]
        elif mood is Mood.NIGHT:
            self.cubemap = "sky_night"
            self.fog_color = int_color(20, 20, 50)
            self.light_color = int_color(20, 20, 50)
            self.sun_position = (100000.0, 100000.0, 100000.0)
            self.sun_diffuse = int_color(10, 10, 10)
            self.sun_ambient = _divided(self.sun_diffuse, 3.0)  # type: ignore[assignment]
        self.light_color = _divided(self.light_color, 10.0)  # type: ignore[assignment]
        self.sun_position = _normalized(self.sun_position)

    def set_color(self, origin: str, color: Vec4) -> None:
        """Override one colour: light, fog, sunAmbient or sunDiffuse.

        Other origins leave the weather untouched.
        """
        attribute = _COLOR_ORIGINS.get(origin)
        if attribute is not None:
            setattr(self, attribute, tuple(float(c) for c in color))