"""
Command Line Interface for PyPrecipField

Available Commands:
- render_field (precip-render): Render a point file to an RGBA PNG
- demo_points (precip-demo-points): Write a synthetic clustered point set

Author: B.G.
"""

_CLI_SUBMODULES = {
    "render_field": (".render_commands", "render_field"),
    "demo_points": (".points_commands", "demo_points"),
}

__all__ = list(_CLI_SUBMODULES.keys())


def __getattr__(name):
    info = _CLI_SUBMODULES.get(name)
    if info is None:
        raise AttributeError(name)
    pkg, attr = info
    import importlib
    mod = importlib.import_module(pkg, __package__)
    obj = getattr(mod, attr)
    globals()[name] = obj
    return obj
