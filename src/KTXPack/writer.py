"""Serialize a `KTX2Container` into a KTX 2.0 file."""

import logging
import struct
from typing import Optional

from .assemble import (
    data_format_descriptor_byte_length,
    encode_key_value,
    global_data_byte_length,
    key_value_byte_length,
    validate_data_format_descriptor,
    write_data_format_descriptor,
    write_global_data,
    write_key_value,
)
from .config import WriteOptions
from .constants import KTX2_ID
from .container import KTX2Container
from .layout import (
    LayoutPlan,
    PackedLevels,
    pack_levels,
    plan_layout,
    write_level_data,
    write_level_index,
)

logger = logging.getLogger("ktx_pack.writer")

# vkFormat, typeSize, pixelWidth, pixelHeight, pixelDepth, layerCount,
# faceCount, levelCount, supercompressionScheme,
# dfdByteOffset, dfdByteLength, kvdByteOffset, kvdByteLength,
# sgdByteOffset, sgdByteLength
_HEADER = struct.Struct("<9I4I2Q")


def write_header(buffer: bytearray, container: KTX2Container, plan: LayoutPlan) -> int:
    """Write the identifier and fixed header at the start of ``buffer``."""
    buffer[0:len(KTX2_ID)] = KTX2_ID
    _HEADER.pack_into(
        buffer, len(KTX2_ID),
        container.vk_format,
        container.type_size,
        container.pixel_width,
        container.pixel_height,
        container.pixel_depth,
        container.layer_count,
        container.face_count,
        plan.level_count,
        container.supercompression_scheme,
        plan.dfd_offset,
        plan.dfd_byte_length,
        plan.kvd_offset,
        plan.kvd_byte_length,
        plan.sgd_offset if plan.sgd_byte_length > 0 else 0,
        plan.sgd_byte_length,
    )
    return len(KTX2_ID) + _HEADER.size


def write(container: KTX2Container, options: Optional[WriteOptions] = None) -> bytes:
    """Serialize ``container`` to a KTX 2.0 file.

    Level payloads and other binary data are copied into the result, so the
    container may be changed or discarded afterwards. The container itself is
    never modified.

    Args:
        container: Texture to serialize. Must carry exactly one BASICFORMAT
            data format descriptor.
        options: See `WriteOptions`. Defaults generate a ``KTXwriter`` entry
            unless the container supplies one.

    Raises:
        UnsupportedDescriptorError: the descriptor list is not a single
            BASICFORMAT block, or its texel block dimension is not a
            4-element sequence.

    """
    options = options or WriteOptions()

    # Pass 1: sizes and offsets.
    dfd = validate_data_format_descriptor(container.data_format_descriptor)
    kv_entries = encode_key_value(container.key_value, options)
    plan = plan_layout(
        level_count=len(container.levels),
        dfd_byte_length=data_format_descriptor_byte_length(dfd),
        kvd_byte_length=key_value_byte_length(kv_entries),
        sgd_byte_length=global_data_byte_length(container.global_data),
    )
    packed: PackedLevels = pack_levels(container, plan)

    # Pass 2: write every section at its planned offset into one zeroed buffer.
    buffer = bytearray(packed.end_offset)
    write_header(buffer, container, plan)
    write_level_index(buffer, plan.level_index_offset, packed)
    write_data_format_descriptor(buffer, plan.dfd_offset, dfd)
    write_key_value(buffer, plan.kvd_offset, kv_entries)
    if plan.sgd_byte_length:
        write_global_data(buffer, plan.sgd_offset, container.global_data)
    write_level_data(buffer, container, packed)

    logger.debug(
        "Serialized %dx%dx%d texture: %d levels, %d bytes",
        container.pixel_width, container.pixel_height, container.pixel_depth,
        plan.level_count, len(buffer),
    )
    return bytes(buffer)
