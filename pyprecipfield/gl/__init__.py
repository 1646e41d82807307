"""
GPU shader backend for PyPrecipField.

moderngl is an optional dependency (``pip install pyprecipfield[gl]``), so
the renderer is imported lazily.
"""

from .shaders import VERTEX_SHADER, FRAGMENT_SHADER_TEMPLATE, fragment_shader_source

__all__ = [
    "GLPrecipitationRenderer",
    "VERTEX_SHADER",
    "FRAGMENT_SHADER_TEMPLATE",
    "fragment_shader_source",
]


def __getattr__(name: str):
    if name == "GLPrecipitationRenderer":
        from .renderer import GLPrecipitationRenderer  # lazy
        return GLPrecipitationRenderer
    raise AttributeError(name)
