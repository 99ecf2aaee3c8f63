"""Supercompression global data (SGD) section."""

import logging
import struct
from typing import Optional

from ..constants import IMAGE_DESC_BYTE_LENGTH, SGD_HEADER_BYTE_LENGTH
from ..container import KTX2GlobalDataBasisLZ

logger = logging.getLogger("ktx_pack.assemble.sgd")

# endpointCount, selectorCount, endpoints/selectors/tables/extended byte lengths
_SGD_HEADER = struct.Struct("<HHIIII")
# imageFlags, rgbSliceByteOffset/Length, alphaSliceByteOffset/Length
_IMAGE_DESC = struct.Struct("<IIIII")


def _payloads(global_data: KTX2GlobalDataBasisLZ):
    return (
        global_data.endpoints_data,
        global_data.selectors_data,
        global_data.tables_data,
        global_data.extended_data,
    )


def global_data_byte_length(global_data: Optional[KTX2GlobalDataBasisLZ]) -> int:
    """Size of the SGD section; zero when the container has no global data."""
    if global_data is None:
        return 0
    return (
        SGD_HEADER_BYTE_LENGTH
        + IMAGE_DESC_BYTE_LENGTH * len(global_data.image_descs)
        + sum(len(payload) for payload in _payloads(global_data))
    )


def write_global_data(buffer: bytearray, offset: int,
                      global_data: Optional[KTX2GlobalDataBasisLZ]) -> int:
    """Write the SGD section at ``offset`` and return the number of bytes written."""
    if global_data is None:
        return 0
    payloads = _payloads(global_data)
    _SGD_HEADER.pack_into(
        buffer, offset,
        global_data.endpoint_count,
        global_data.selector_count,
        *(len(payload) for payload in payloads),
    )
    cursor = offset + SGD_HEADER_BYTE_LENGTH
    for desc in global_data.image_descs:
        _IMAGE_DESC.pack_into(
            buffer, cursor,
            desc.image_flags,
            desc.rgb_slice_byte_offset,
            desc.rgb_slice_byte_length,
            desc.alpha_slice_byte_offset,
            desc.alpha_slice_byte_length,
        )
        cursor += IMAGE_DESC_BYTE_LENGTH
    for payload in payloads:
        buffer[cursor:cursor + len(payload)] = payload
        cursor += len(payload)
    logger.debug(
        "SGD: %d image descs, %d bytes at offset %d",
        len(global_data.image_descs), cursor - offset, offset,
    )
    return cursor - offset


def assemble_global_data(global_data: Optional[KTX2GlobalDataBasisLZ]) -> bytes:
    """Build the SGD section as a standalone byte string."""
    buffer = bytearray(global_data_byte_length(global_data))
    write_global_data(buffer, 0, global_data)
    return bytes(buffer)
