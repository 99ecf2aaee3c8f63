"""Plan section offsets and level placement for a KTX2 file.

File order::

    identifier | header | level index | DFD | KVD | pad(8) | SGD | level data

Header fields point forward into sections written later, so every size is
computed first and every offset derived from the sizes before any byte is
written. Level payloads are stored smallest mip first while the level index
stays in mip order.
"""

import logging
import struct
from dataclasses import dataclass, field
from typing import List

from .constants import (
    HEADER_BYTE_LENGTH,
    KTX2_ID,
    LEVEL_INDEX_ENTRY_BYTE_LENGTH,
    SGD_ALIGNMENT,
    SupercompressionScheme,
)
from .container import KTX2Container
from .core.util import align, get_block_byte_length, get_padding, least_common_multiple

logger = logging.getLogger("ktx_pack.layout")

# byteOffset, byteLength, uncompressedByteLength
_LEVEL_INDEX_ENTRY = struct.Struct("<QQQ")


@dataclass(frozen=True)
class LayoutPlan:
    """Absolute offsets of the variable-size sections."""

    level_count: int
    dfd_offset: int
    dfd_byte_length: int
    kvd_offset: int
    kvd_byte_length: int
    sgd_offset: int
    sgd_byte_length: int

    @property
    def level_index_offset(self) -> int:
        return len(KTX2_ID) + HEADER_BYTE_LENGTH

    @property
    def kvd_end(self) -> int:
        return self.kvd_offset + self.kvd_byte_length

    @property
    def sgd_padding(self) -> int:
        """Zero bytes between the end of KVD and the start of SGD."""
        return self.sgd_offset - self.kvd_end if self.sgd_byte_length else 0

    @property
    def level_data_offset(self) -> int:
        """First byte after SGD (or KVD when there is no SGD)."""
        return (self.sgd_offset or self.kvd_end) + self.sgd_byte_length


def plan_layout(level_count: int, dfd_byte_length: int, kvd_byte_length: int,
                sgd_byte_length: int) -> LayoutPlan:
    """Derive DFD, KVD and SGD offsets from section sizes."""
    dfd_offset = len(KTX2_ID) + HEADER_BYTE_LENGTH + level_count * LEVEL_INDEX_ENTRY_BYTE_LENGTH
    kvd_offset = dfd_offset + dfd_byte_length
    sgd_offset = 0
    if sgd_byte_length > 0:
        sgd_offset = align(kvd_offset + kvd_byte_length, SGD_ALIGNMENT)
    plan = LayoutPlan(
        level_count=level_count,
        dfd_offset=dfd_offset,
        dfd_byte_length=dfd_byte_length,
        kvd_offset=kvd_offset,
        kvd_byte_length=kvd_byte_length,
        sgd_offset=sgd_offset,
        sgd_byte_length=sgd_byte_length,
    )
    logger.debug(
        "Layout: dfd=%d+%d kvd=%d+%d sgd=%d+%d levels@%d",
        plan.dfd_offset, plan.dfd_byte_length,
        plan.kvd_offset, plan.kvd_byte_length,
        plan.sgd_offset, plan.sgd_byte_length,
        plan.level_data_offset,
    )
    return plan


@dataclass(frozen=True)
class LevelIndexEntry:
    byte_offset: int
    byte_length: int
    uncompressed_byte_length: int


@dataclass
class PackedLevels:
    """Level placement: index entries in mip order, total file length."""

    alignment: int
    entries: List[LevelIndexEntry] = field(default_factory=list)
    end_offset: int = 0

    @property
    def level_index_byte_length(self) -> int:
        return len(self.entries) * LEVEL_INDEX_ENTRY_BYTE_LENGTH


def level_alignment(container: KTX2Container) -> int:
    """Required level alignment; 0 when supercompression defines its own."""
    if container.supercompression_scheme == SupercompressionScheme.NONE:
        return least_common_multiple(get_block_byte_length(container), 4)
    return 0


def pack_levels(container: KTX2Container, plan: LayoutPlan) -> PackedLevels:
    """Place level payloads after SGD, smallest mip first, padding before each."""
    alignment = level_alignment(container)
    levels = container.levels
    offsets = [0] * len(levels)

    cursor = plan.level_data_offset
    for i in range(len(levels) - 1, -1, -1):
        cursor += get_padding(cursor, alignment)
        offsets[i] = cursor
        cursor += len(levels[i].level_data)

    entries = [
        LevelIndexEntry(
            byte_offset=offsets[i],
            byte_length=len(level.level_data),
            uncompressed_byte_length=level.uncompressed_byte_length,
        )
        for i, level in enumerate(levels)
    ]
    logger.debug(
        "Packed %d levels (align=%d), data ends at %d", len(levels), alignment, cursor,
    )
    return PackedLevels(alignment=alignment, entries=entries, end_offset=cursor)


def write_level_index(buffer: bytearray, offset: int, packed: PackedLevels) -> int:
    """Write the level index (mip order) at ``offset``; return bytes written."""
    for i, entry in enumerate(packed.entries):
        _LEVEL_INDEX_ENTRY.pack_into(
            buffer, offset + i * LEVEL_INDEX_ENTRY_BYTE_LENGTH,
            entry.byte_offset,
            entry.byte_length,
            entry.uncompressed_byte_length,
        )
    return packed.level_index_byte_length


def write_level_data(buffer: bytearray, container: KTX2Container, packed: PackedLevels) -> None:
    """Copy each payload to its planned offset; padding stays zero."""
    for level, entry in zip(container.levels, packed.entries):
        buffer[entry.byte_offset:entry.byte_offset + entry.byte_length] = level.level_data
