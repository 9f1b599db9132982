# coralsea

coralsea works out the data behind an underwater ocean scene. It is plain
Python with numpy and draws nothing itself. A renderer takes the colours,
geometry, wave constants and shader sources it produces.

## Modules

- `coralsea.weather`: the `Mood` enum (clear, dusk, cloudy, night, custom)
  and the `Weather` dataclass.
  - `Weather("dusk")` or `Weather.switch_to(mood)` loads a preset. A preset
    sets the cubemap name, fog and light colours, and a normalised sun
    position with its diffuse and ambient colours.
  - `sun_direction()` returns the negated sun position.
  - `set_color(origin, color)` overrides the `"light"`, `"fog"`,
    `"sunAmbient"` or `"sunDiffuse"` colour. Any other origin is ignored.
  - `mood_from(name)` maps a scene type name to a mood. Unknown names give a
    clear sky.
  - `int_color(r, g, b, a)` turns 8-bit channels into floats.
- `coralsea.scene_params`: the `SceneParams` dataclass holds the wind, wave,
  water, effect, window and sun settings.
  - `update_from(mapping)` applies named parameters such as `"sun.azimuth"`,
    `"ocean.jerlov"` or `"gui.camera"`. It ignores names it does not know. It
    raises `TypeError` for a value of the wrong type and `ValueError` for a
    value out of range.
  - `is_choppy()` reports whether the choppy factor is larger than 1e-3.
- `coralsea.shader_manager`: the `ShaderManager` builds `Program` objects out
  of `.vert` and `.frag` files, which it looks for in its search paths.
  - When a file cannot be read, it falls back to inline source.
  - It puts a `// name` comment and sorted `#define` lines, set with
    `set_global_definition`, in front of every shader.
  - `read_shader`, `version_string` and `library_name` are also available.
- `coralsea.ocean_tile`: `OceanTile.from_heights` builds a periodic
  height-field tile, with optional (x, y) displacements.
  - `downsampled` averages it down to a coarser tile.
  - The tile computes normals and interpolates heights and normals with
    `bilinear_interp` and `normal_bilinear_interp`.
  - `normal_map_pixels` packs the normals into RGB bytes.
  - `compute_max_delta` measures the height error of coarser levels of detail.
- `coralsea.water_trochoids`: `WaterTrochoids` creates 16 waves spread
  around a main direction.
  - `update_waves(time)` advances their phases.
  - `pack_waves()` returns their constants in blocks of four waves.
- `coralsea.screen_quad`: `ScreenAlignedQuad.build` and `from_texture` give
  the vertices and texture coordinates of a screen aligned quad.
- `coralsea.silt`: `SiltEffect` derives the particle speed, size, colour,
  density, cell size and fog from an intensity.
  - `cull(eye, contains)` returns the visible cells around the eye, split into
    near quad cells and farther point cells.
  - `ordered_entries` sorts cells farthest first.
  - `advance(time)` moves the particle origin along with the wind.
  - `spot_light_image`, `spot_light_mipmaps` and `create_geometry` build the
    sprite texture and the particle attributes.
- `coralsea.discovery`: `find_models` turns a mapping of topics and their
  types into `ModelRequest`s. It makes one request for each topic ending in
  `robot_description`, together with a pose topic from the same namespace if
  one is published. `spawn_request` builds the request for an explicit spawn
  call.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from coralsea.weather import Weather, Mood, int_color
from coralsea.scene_params import SceneParams
from coralsea.water_trochoids import WaterTrochoids

weather = Weather()
weather.switch_to(Mood.DUSK)
print(weather.cubemap, weather.sun_direction())

weather.set_color("fog", int_color(10, 20, 30, 255))

params = SceneParams()
params.update_from({"wind.speed": 5.0, "ocean.jerlov": 0.4})
print(params.is_choppy())

waves = WaterTrochoids()
waves.create_waves()
waves.update_waves(1.5)
constants = waves.pack_waves()
```

This example finds models in a mapping of topics and their types:

```python
from coralsea.discovery import find_models

topics = {
    "/bluerov2/robot_description": ["std_msgs/msg/String"],
    "/bluerov2/pose_gt": ["geometry_msgs/msg/Pose"],
}
for request in find_models(topics):
    print(request.namespace, request.pose_topic)
```

## What it does not do

- coralsea has no window, no renderer and no command to start.
- It does not keep a tree of robot links, and it does not track their poses.
- It does not hold the render state of an ocean scene, such as surface
  height, visibility masks or fog uniforms.
- It does not load models. `find_models` and `spawn_request` only say which
  models should be loaded.