from .canvas import blend_mask, draw_hline, draw_pixel, draw_vline, new_canvas
from .draw_markers import draw_annulus, draw_cluster_symbol, draw_square_marker
from .draw_text import draw_text, draw_text_centered

__all__ = [
    "blend_mask",
    "draw_annulus",
    "draw_cluster_symbol",
    "draw_hline",
    "draw_pixel",
    "draw_square_marker",
    "draw_text",
    "draw_text_centered",
    "draw_vline",
    "new_canvas",
]
