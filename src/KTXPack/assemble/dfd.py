"""Data format descriptor (DFD) section.

Only a single Khronos BASICFORMAT block is written. The section starts with
the u32 total size, followed by the block header and one 16-byte record per
sample.
"""

import logging
import struct
from typing import Sequence

from ..constants import (
    DFD_BLOCK_HEADER_BYTE_LENGTH,
    DFD_SAMPLE_BYTE_LENGTH,
    KHR_DF_KHR_DESCRIPTORTYPE_BASICFORMAT,
    KHR_DF_SAMPLE_DATATYPE_SIGNED,
)
from ..container import KTX2BasicFormatDescriptor

logger = logging.getLogger("ktx_pack.assemble.dfd")

# dfdTotalSize, vendorId, descriptorType, versionNumber, descriptorBlockSize,
# colorModel, colorPrimaries, transferFunction, flags,
# texelBlockDimension[4], bytesPlane[8]
_BLOCK_HEADER = struct.Struct("<IHHHHBBBB4B8B")
_SAMPLE_UNSIGNED = struct.Struct("<HBB4BII")
_SAMPLE_SIGNED = struct.Struct("<HBB4Bii")

# The descriptor block size excludes the leading dfdTotalSize field.
_DFD_TOTAL_SIZE_BYTE_LENGTH = 4


class UnsupportedDescriptorError(ValueError):
    """Raised when a data format descriptor cannot be serialized."""


def validate_data_format_descriptor(
        descriptors: Sequence[KTX2BasicFormatDescriptor]) -> KTX2BasicFormatDescriptor:
    """Return the single BASICFORMAT block, or raise `UnsupportedDescriptorError`."""
    if (
        len(descriptors) != 1
        or descriptors[0].descriptor_type != KHR_DF_KHR_DESCRIPTORTYPE_BASICFORMAT
    ):
        raise UnsupportedDescriptorError(
            "Only BASICFORMAT Data Format Descriptor output supported "
            f"(got {len(descriptors)} block(s))."
        )
    dfd = descriptors[0]
    dims = dfd.texel_block_dimension
    if not isinstance(dims, (list, tuple)) or len(dims) != 4:
        raise UnsupportedDescriptorError(
            "texel_block_dimension must be a 4-element sequence. "
            "For dimensionality `d`, set `d - 1`."
        )
    return dfd


def data_format_descriptor_byte_length(dfd: KTX2BasicFormatDescriptor) -> int:
    return DFD_BLOCK_HEADER_BYTE_LENGTH + DFD_SAMPLE_BYTE_LENGTH * len(dfd.samples)


def write_data_format_descriptor(buffer: bytearray, offset: int,
                                 dfd: KTX2BasicFormatDescriptor) -> int:
    """Write a validated descriptor at ``offset``; return the number of bytes written."""
    total_size = data_format_descriptor_byte_length(dfd)
    _BLOCK_HEADER.pack_into(
        buffer, offset,
        total_size,
        dfd.vendor_id,
        dfd.descriptor_type,
        dfd.version_number,
        total_size - _DFD_TOTAL_SIZE_BYTE_LENGTH,
        dfd.color_model,
        dfd.color_primaries,
        dfd.transfer_function,
        dfd.flags,
        *dfd.texel_block_dimension,
        *dfd.bytes_plane[:8],
    )

    for i, sample in enumerate(dfd.samples):
        sample_offset = offset + DFD_BLOCK_HEADER_BYTE_LENGTH + i * DFD_SAMPLE_BYTE_LENGTH
        if sample.channel_type & KHR_DF_SAMPLE_DATATYPE_SIGNED:
            layout = _SAMPLE_SIGNED
        else:
            layout = _SAMPLE_UNSIGNED
        layout.pack_into(
            buffer, sample_offset,
            sample.bit_offset,
            sample.bit_length,
            sample.channel_type,
            *sample.sample_position[:4],
            sample.sample_lower,
            sample.sample_upper,
        )

    logger.debug("DFD: %d samples, %d bytes at offset %d", len(dfd.samples), total_size, offset)
    return total_size


def assemble_data_format_descriptor(
        descriptors: Sequence[KTX2BasicFormatDescriptor]) -> bytes:
    """Validate and build the DFD section as a standalone byte string."""
    dfd = validate_data_format_descriptor(descriptors)
    buffer = bytearray(data_format_descriptor_byte_length(dfd))
    write_data_format_descriptor(buffer, 0, dfd)
    return bytes(buffer)
