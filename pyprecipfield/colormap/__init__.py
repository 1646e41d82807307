"""Colour mapping module for PyPrecipField: discrete intensity bands."""

from .gradient import DEFAULT_GRADIENT, Gradient, GradientStop, color_for_ti

__all__ = ["DEFAULT_GRADIENT", "Gradient", "GradientStop", "color_for_ti"]
