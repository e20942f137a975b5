"""
Image file input and output.
"""

from .image_io import check_input_path, check_output_path, load_image, save_image, to_uint8

__all__ = ['check_input_path', 'check_output_path', 'load_image', 'save_image', 'to_uint8']
