from .png_export import export_grid_to_png, render_grid_image
from .text_export import render_text, format_compatibility_table

__all__ = [
    'export_grid_to_png', 'render_grid_image',
    'render_text', 'format_compatibility_table'
]
