"""
habitsim/palette.py - Qubit Colors

Hue per qubit index and channel-average blending for links.
"""

import colorsys
from typing import Tuple

QUBIT_SATURATION = 0.8
QUBIT_VALUE = 0.9


def _to_hex(rgb: Tuple[int, int, int]) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def _from_hex(color: str) -> Tuple[int, int, int]:
    color = color.lstrip("#")
    return int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16)


def qubit_hue(index: int, n_qubits: int) -> float:
    """Hue in degrees, evenly spread over the capacity."""
    return (index * 360.0 / n_qubits) % 360.0


def color_for_qubit(index: int, n_qubits: int) -> str:
    """
    Color for a qubit index as "#rrggbb".

    Examples:
        >>> color_for_qubit(0, 8)
        '#e52d2d'
    """
    h = qubit_hue(index, n_qubits) / 360.0
    r, g, b = colorsys.hsv_to_rgb(h, QUBIT_SATURATION, QUBIT_VALUE)
    return _to_hex((int(r * 255), int(g * 255), int(b * 255)))


def blend_colors(color_a: str, color_b: str) -> str:
    """Integer average of each RGB channel."""
    ra, ga, ba = _from_hex(color_a)
    rb, gb, bb = _from_hex(color_b)
    return _to_hex(((ra + rb) // 2, (ga + gb) // 2, (ba + bb) // 2))
