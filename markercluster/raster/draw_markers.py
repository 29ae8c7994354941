from __future__ import annotations

import numpy as np

from markercluster.raster.canvas import RGBA, blend_mask, draw_pixel


def draw_square_marker(dst: np.ndarray, x: int, y: int, color: RGBA, radius: int) -> None:
    radius = max(0, radius)
    for yy in range(y - radius, y + radius + 1):
        for xx in range(x - radius, x + radius + 1):
            draw_pixel(dst, xx, yy, color)


def draw_annulus(
    dst: np.ndarray,
    cx: float,
    cy: float,
    outer: float,
    color: RGBA,
    *,
    inner: float = 0.0,
) -> None:
    """Fill the ring between ``inner`` and ``outer`` radii; ``inner=0`` gives a disc."""
    if outer <= 0 or outer <= inner:
        return
    x0 = int(np.floor(cx - outer - 1))
    y0 = int(np.floor(cy - outer - 1))
    size = int(np.ceil(2 * outer + 3))
    ys, xs = np.mgrid[0:size, 0:size]
    dist = np.hypot(xs + x0 + 0.5 - cx, ys + y0 + 0.5 - cy)
    # One pixel of linear falloff on each edge.
    cov = np.clip(outer + 0.5 - dist, 0.0, 1.0)
    if inner > 0:
        cov = np.minimum(cov, np.clip(dist - inner + 0.5, 0.0, 1.0))
    blend_mask(dst, x0, y0, cov, color)


def draw_cluster_symbol(
    dst: np.ndarray,
    cx: float,
    cy: float,
    radius: float,
    fill: RGBA,
    *,
    halo_alpha: float = 0.3,
) -> None:
    # Inner disc plus two translucent rings, matching the classic cluster glyph.
    space = 1.0
    outer_width = 1.0
    r, g, b, a = fill
    halo = (r, g, b, int(a * halo_alpha))
    draw_annulus(dst, cx, cy, radius + space * 2 + outer_width * 3, halo, inner=radius + outer_width * 2.5)
    draw_annulus(dst, cx, cy, radius + outer_width * 2, halo, inner=radius + outer_width)
    draw_annulus(dst, cx, cy, radius - space, fill)
