"""Scene configuration and its mapping to named node parameters."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any


def as_vector(vec: Sequence[float]) -> list[float]:
    """Return the components of a vector as a list of floats."""
    return [float(c) for c in vec]


@dataclass(frozen=True)
class _ParamSpec:
    attribute: str
    kind: str
    lower: float | None = None
    upper: float | None = None
    description: str = ""


_PARAMETERS: dict[str, _ParamSpec] = {
    "gui.width": _ParamSpec("width", "int", description="Width of the window"),
    "gui.height": _ParamSpec("height", "int", description="Height of the window"),
    "gui.enable_stats": _ParamSpec("stats_keys", "bool", description="Allow to show stats"),
    "gui.enable_stateset": _ParamSpec("stateset_keys", "bool", description="Allow to show 3D states"),
    "gui.camera": _ParamSpec("initial_camera_position", "vec3", description="Initial camera position"),
    "scene_type": _ParamSpec("scene_type", "str", description="Weather"),
    "sun.azimuth": _ParamSpec("azim", "float", -180.0, 180.0, "Sun azimuth [deg]"),
    "sun.elevation": _ParamSpec("elev", "float", 0.0, 90.0, "Sun elevation [deg]"),
    "wind.direction": _ParamSpec("wind_direction", "vec2"),
    "wind.speed": _ParamSpec("wind_speed", "float"),
    "wave.scale": _ParamSpec("wave_scale", "float"),
    "wave.choppy_factor": _ParamSpec("choppy_factor", "float"),
    "wave.foam_height": _ParamSpec("crest_foam_height", "float"),
    "ocean.depth": _ParamSpec("depth", "float"),
    "ocean.jerlov": _ParamSpec("jerlov", "float", 0.0, 1.0, "Jerlov water type"),
    "ocean.fog_density": _ParamSpec("fog_density", "float", 0.0, 0.01, "Water fog density"),
    "surface.reflection_damping": _ParamSpec("reflection_damping", "float"),
    "vfx.godrays": _ParamSpec("godrays", "bool"),
    "vfx.glare": _ParamSpec("glare", "bool"),
    "vfx.underwaterDof": _ParamSpec("underwater_dof", "bool"),
}


def _convert(name: str, spec: _ParamSpec, value: Any) -> Any:
    if spec.kind == "bool":
        if not isinstance(value, bool):
            raise TypeError(f"parameter {name} expects a boolean, got {value!r}")
        return value
    if spec.kind == "int":
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"parameter {name} expects an integer, got {value!r}")
        return value
    if spec.kind == "str":
        if not isinstance(value, str):
            raise TypeError(f"parameter {name} expects a string, got {value!r}")
        return value
    if spec.kind == "float":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"parameter {name} expects a number, got {value!r}")
        number = float(value)
        if spec.lower is not None and spec.upper is not None and not spec.lower <= number <= spec.upper:
            raise ValueError(f"parameter {name}={number} outside [{spec.lower}, {spec.upper}]")
        return number
    size = int(spec.kind[-1])
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise TypeError(f"parameter {name} expects a list of numbers, got {value!r}")
    if len(value) != size:
        raise ValueError(f"parameter {name} expects {size} values, got {len(value)}")
    return tuple(as_vector(value))


@dataclass
class SceneParams:
    """Everything needed to build the ocean scene."""

    wind_direction: tuple[float, float] = (1.0, 1.0)
    wind_speed: float = 3.3

    depth: float = 1000.0
    reflection_damping: float = 0.35

    wave_scale: float = 1e-8
    choppy_factor: float = 2.5
    crest_foam_height: float = 2.2

    refractions: bool = True
    reflections: bool = True
    godrays: bool = False  # godrays do not work on some integrated GPUs
    glare: bool = True
    underwater_dof: bool = False
    distortion: bool = True
    silt: bool = True
    underwater_scattering: bool = True
    heightmap: bool = False
    initial_camera_position: tuple[float, float, float] = (-10.0, 0.0, 5.0)

    width: int = 1024
    height: int = 768
    stats_keys: bool = True
    stateset_keys: bool = True

    scene_type: str = "clear"
    jerlov: float = 0.2
    elev: float = 60.0
    azim: float = 20.0
    fog_density: float = 0.002

    def is_choppy(self) -> bool:
        """Whether the waves have a noticeable choppy factor."""
        return abs(self.choppy_factor) > 1e-3

    def update_from(self, parameters: Mapping[str, Any]) -> None:
        """Override fields from named parameters such as ``sun.azimuth``.

        Names that are not scene parameters are ignored. Values of the wrong
        type raise TypeError; values out of their range raise ValueError.
        """
        converted = {
            _PARAMETERS[name].attribute: _convert(name, _PARAMETERS[name], value)
            for name, value in parameters.items()
            if name in _PARAMETERS
        }
        for attribute, value in converted.items():
            setattr(self, attribute, value)