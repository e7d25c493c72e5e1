"""Convert: full .xmind -> .canvas pipeline plus output file conventions."""
from .pipeline import ConversionResult, convert_xmind_to_canvas
from .export import canvas_path_for, image_folder_for, save_images, relative_file_path

__all__ = [
    "ConversionResult",
    "convert_xmind_to_canvas",
    "canvas_path_for",
    "image_folder_for",
    "save_images",
    "relative_file_path",
]
