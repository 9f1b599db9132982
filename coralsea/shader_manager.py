"""Loading of shader programs with shared global definitions."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

log = logging.getLogger(__name__)

OCEAN_SCENE_VERT_FILE = "coral_scene.vert"
OCEAN_SCENE_FRAG_FILE = "coral_scene.frag"


class ShaderType(Enum):
    """Stage a shader runs in."""

    UNDEFINED = "undefined"
    VERTEX = "vertex"
    FRAGMENT = "fragment"


@dataclass
class Shader:
    """Source code of one shader stage."""

    type: ShaderType
    source: str
    name: str = ""


@dataclass
class Program:
    """A named set of shaders."""

    name: str = ""
    shaders: list[Shader] = field(default_factory=list)


def _find_data_file(filename: str, search_paths: Iterable[str | Path]) -> Path | None:
    direct = Path(filename)
    if direct.is_file():
        return direct
    for directory in search_paths:
        candidate = Path(directory) / filename
        if candidate.is_file():
            return candidate
    return None


def read_shader(filename: str, search_paths: Iterable[str | Path] = ()) -> Shader | None:
    """Read a ``.vert`` or ``.frag`` file, looking in the given directories.

    Returns None when the extension is unknown or the file is not found.
    """
    if filename.endswith("vert"):
        kind = ShaderType.VERTEX
    elif filename.endswith("frag"):
        kind = ShaderType.FRAGMENT
    else:
        return None
    path = _find_data_file(filename, search_paths)
    if path is None:
        return None
    return Shader(kind, path.read_text())


def version_string(major: int, minor: int, release: int, revision: int = 0) -> str:
    """Format a library version, adding the revision only when non-zero."""
    if revision == 0:
        return f"{major}.{minor}.{release}"
    return f"{major}.{minor}.{release}-{revision}"


def library_name() -> str:
    """Name of the ocean rendering library."""
    return "osgOcean Library"


class ShaderManager:
    """Creates shader programs, prefixing them with global definitions."""

    def __init__(self, search_paths: Iterable[str | Path] = (), shaders_enabled: bool = True) -> None:
        self.search_paths: list[str | Path] = list(search_paths)
        self.shaders_enabled = shaders_enabled
        self._global_definitions: dict[str, str] = {}

    def set_global_definition(self, name: str, value: object) -> None:
        """Define ``name`` to ``value`` in every program created afterwards."""
        self._global_definitions[name] = str(value)

    def get_global_definition(self, name: str) -> str:
        """Value of a global definition, or an empty string if unset."""
        return self._global_definitions.get(name, "")

    def build_global_definitions_list(self, name: str) -> str:
        """Header prepended to shader sources: a name comment and #defines."""
        header = f"// {name}\n" if name else ""
        defines = "".join(
            f"#define {key} {value}\n" for key, value in sorted(self._global_definitions.items())
        )
        return header + defines

    def _load(self, filename: str, fallback: str, kind: ShaderType) -> Shader | None:
        shader = read_shader(filename, self.search_paths)
        if shader is not None:
            return shader
        if fallback:
            log.info("Could not read shader from file %s, falling back to default shader.", filename)
            return Shader(kind, fallback)
        log.warning(
            "Could not read shader from file %s and no fallback shader source was given. "
            "No shader will be used.",
            filename,
        )
        return None

    def create_program(
        self,
        name: str,
        vertex_filename: str = OCEAN_SCENE_VERT_FILE,
        fragment_filename: str = OCEAN_SCENE_FRAG_FILE,
        vertex_source: str = "",
        fragment_source: str = "",
    ) -> Program | None:
        """Build a program from files, falling back to the given sources.

        Returns an empty program when shaders are disabled, and None when
        neither stage could be loaded.
        """
        if not self.shaders_enabled:
            return Program()

        vertex = self._load(vertex_filename, vertex_source, ShaderType.VERTEX)
        fragment = self._load(fragment_filename, fragment_source, ShaderType.FRAGMENT)
        if vertex is None and fragment is None:
            return None

        program = Program(name=name)
        header = self.build_global_definitions_list(name)
        for shader, suffix in ((vertex, "_vertex_shader"), (fragment, "_fragment_shader")):
            if shader is not None:
                shader.source = header + shader.source
                shader.name = name + suffix
                program.shaders.append(shader)
        return program