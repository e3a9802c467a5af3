"""Conversion between RGB colours and the HSL (hue, saturation, lightness) model."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, Union, runtime_checkable

__all__ = ["HSL", "rgb_to_hsl", "hsl_to_rgb", "hsl_model"]


@runtime_checkable
class _RGBAColor(Protocol):
    def rgba(self) -> tuple[int, int, int, int]: ...


ColorLike = Union[_RGBAColor, Sequence[int]]


@dataclass(frozen=True)
class HSL:
    """A colour as hue, saturation and lightness, each in the range 0 to 1."""

    h: float
    s: float
    l: float  # noqa: E741

    def rgba(self) -> tuple[int, int, int, int]:
        """Return alpha-premultiplied 16-bit red, green, blue and alpha values."""
        r, g, b = hsl_to_rgb(self.h, self.s, self.l)
        return r * 0x101, g * 0x101, b * 0x101, 0xFFFF


def rgb_to_hsl(r: int, g: int, b: int) -> tuple[float, float, float]:
    """Convert 8-bit red, green and blue values to an (h, s, l) triple."""
    f_r, f_g, f_b = r / 255, g / 255, b / 255
    high = max(f_r, f_g, f_b)
    low = min(f_r, f_g, f_b)
    lightness = (high + low) / 2
    if high == low:
        return 0.0, 0.0, lightness

    delta = high - low
    if lightness > 0.5:
        saturation = delta / (2.0 - high - low)
    else:
        saturation = delta / (high + low)

    if high == f_r:
        hue = (f_g - f_b) / delta
        if f_g < f_b:
            hue += 6
    elif high == f_g:
        hue = (f_b - f_r) / delta + 2
    else:
        hue = (f_r - f_g) / delta + 4
    return hue / 6, saturation, lightness


def _hue_to_rgb(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1.0 / 6:
        return p + (q - p) * 6 * t
    if t < 0.5:
        return q
    if t < 2.0 / 3:
        return p + (q - p) * (2.0 / 3 - t) * 6
    return p


def hsl_to_rgb(h: float, s: float, l: float) -> tuple[int, int, int]:  # noqa: E741
    """Convert an (h, s, l) triple to 8-bit red, green and blue values."""
    if s == 0:
        f_r = f_g = f_b = l
    else:
        q = l * (1 + s) if l < 0.5 else l + s - s * l
        p = 2 * l - q
        f_r = _hue_to_rgb(p, q, h + 1.0 / 3)
        f_g = _hue_to_rgb(p, q, h)
        f_b = _hue_to_rgb(p, q, h - 1.0 / 3)
    return (
        int(f_r * 255 + 0.5) & 0xFF,
        int(f_g * 255 + 0.5) & 0xFF,
        int(f_b * 255 + 0.5) & 0xFF,
    )


def hsl_model(color: ColorLike) -> HSL:
    """Convert a colour to HSL.

    The colour may be an ``HSL`` (returned unchanged), any object with an
    ``rgba()`` method returning 16-bit components, or a sequence of 16-bit
    ``(r, g, b[, a])`` components.
    """
    if isinstance(color, HSL):
        return color
    if isinstance(color, _RGBAColor):
        r, g, b, _ = color.rgba()
    else:
        r, g, b = tuple(color)[:3]
    h, s, l = rgb_to_hsl((r >> 8) & 0xFF, (g >> 8) & 0xFF, (b >> 8) & 0xFF)  # noqa: E741
    return HSL(h, s, l)