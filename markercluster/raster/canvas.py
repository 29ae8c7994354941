from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (0, 0, 0, 255)) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("canvas width/height must be > 0")
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def draw_pixel(dst: np.ndarray, x: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0] or x < 0 or x >= dst.shape[1]:
        return
    a = color[3] / 255.0
    inv = 1.0 - a
    current = dst[y, x, :3].astype(np.float32)
    dst[y, x, 0:3] = (np.asarray(color[0:3], dtype=np.float32) * a + current * inv).astype(np.uint8)
    dst[y, x, 3] = 255


def blend_mask(dst: np.ndarray, x0: int, y0: int, mask: np.ndarray, color: RGBA) -> None:
    """Alpha-blend ``color`` through a 0..1 coverage mask whose top-left lands at (x0, y0)."""
    h, w = mask.shape
    xa = max(0, x0)
    ya = max(0, y0)
    xb = min(dst.shape[1], x0 + w)
    yb = min(dst.shape[0], y0 + h)
    if xa >= xb or ya >= yb:
        return
    cov = mask[ya - y0 : yb - y0, xa - x0 : xb - x0].astype(np.float32) * (color[3] / 255.0)
    if not np.any(cov > 0):
        return
    view = dst[ya:yb, xa:xb]
    src = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
    alpha = cov[:, :, None]
    view[:, :, :3] = (src * alpha + view[:, :, :3].astype(np.float32) * (1.0 - alpha)).astype(np.uint8)
    view[:, :, 3] = np.maximum(view[:, :, 3], (cov * 255.0).astype(np.uint8))


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0]:
        return
    xa = max(0, min(x0, x1))
    xb = min(dst.shape[1] - 1, max(x0, x1))
    if xa > xb:
        return
    segment = dst[y, xa : xb + 1]
    a = color[3] / 255.0
    inv = 1.0 - a
    segment[:, :3] = (np.asarray(color[0:3], dtype=np.float32) * a + segment[:, :3].astype(np.float32) * inv).astype(np.uint8)
    segment[:, 3] = 255


def draw_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA) -> None:
    if x < 0 or x >= dst.shape[1]:
        return
    ya = max(0, min(y0, y1))
    yb = min(dst.shape[0] - 1, max(y0, y1))
    if ya > yb:
        return
    segment = dst[ya : yb + 1, x]
    a = color[3] / 255.0
    inv = 1.0 - a
    segment[:, :3] = (np.asarray(color[0:3], dtype=np.float32) * a + segment[:, :3].astype(np.float32) * inv).astype(np.uint8)
    segment[:, 3] = 255
