"""Ocean scene data: weather, scene parameters, shaders, wave tiles, trochoid waves, silt and model discovery."""

__version__ = "0.1.0"