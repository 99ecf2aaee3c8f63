"""Small arithmetic and text helpers shared by the section assemblers."""

import math


def encode_text(text: str) -> bytes:
    """Encode text as UTF-8 without a terminator."""
    return text.encode("utf-8")


def get_padding(offset: int, alignment: int) -> int:
    """Return the smallest number of bytes that brings ``offset`` to ``alignment``."""
    if alignment <= 0:
        return 0
    return (alignment - offset % alignment) % alignment


def align(offset: int, alignment: int) -> int:
    """Round ``offset`` up to the next multiple of ``alignment``."""
    return offset + get_padding(offset, alignment)


def least_common_multiple(a: int, b: int) -> int:
    if a == 0 or b == 0:
        return 0
    return abs(a * b) // math.gcd(a, b)


def compare_keys(a: str, b: str) -> int:
    """Order metadata keys by their UTF-8 bytes.

    Ordinal, locale-independent comparison; keys in a mapping are unique so
    ties only occur when a key is compared with itself.
    """
    a_bytes, b_bytes = encode_text(a), encode_text(b)
    if a_bytes < b_bytes:
        return -1
    if a_bytes > b_bytes:
        return 1
    return 0


def get_block_byte_length(container) -> int:
    """Byte length of one texel block of the first plane.

    Falls back to ``type_size`` for unsized descriptors (``bytes_plane[0] == 0``).
    """
    dfd = container.data_format_descriptor[0]
    block_byte_length = dfd.bytes_plane[0]
    if not block_byte_length:
        block_byte_length = max(int(container.type_size), 1)
    return block_byte_length
