"""Core utilities -- re-exports all public symbols for convenience."""

from .util import (
    encode_text,
    get_padding,
    align,
    least_common_multiple,
    compare_keys,
    get_block_byte_length,
)
from .io import load_image, write_bytes_atomic, srgb_to_linear, linear_to_srgb
from .logging import setup_logging

__all__ = [
    "encode_text", "get_padding", "align", "least_common_multiple",
    "compare_keys", "get_block_byte_length",
    "load_image", "write_bytes_atomic", "srgb_to_linear", "linear_to_srgb",
    "setup_logging",
]
