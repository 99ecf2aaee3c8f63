"""Key/value data (KVD) section.

Each entry is written as::

    u32 keyAndValueByteLength
    key (UTF-8) NUL
    value (UTF-8 NUL for text, raw bytes otherwise)
    zero padding to a multiple of 4

Entries are ordered by the UTF-8 bytes of their key.
"""

import logging
import struct
from functools import cmp_to_key
from typing import List, Optional, Tuple

from ..config import WriteOptions
from ..constants import KTX_WRITER, KVD_ALIGNMENT, NUL, WRITER_KEY
from ..container import KeyValueMap
from ..core.util import compare_keys, encode_text, get_padding

logger = logging.getLogger("ktx_pack.assemble.kvd")

_UINT32 = struct.Struct("<I")

KeyValueEntry = Tuple[bytes, bytes]


def merge_key_value(key_value: KeyValueMap, options: Optional[WriteOptions] = None) -> KeyValueMap:
    """Return the metadata to write, with the generated writer entry merged in.

    The generated ``KTXwriter`` entry is only a default: an entry supplied by
    the caller always takes priority. With ``keep_writer`` no entry is
    generated at all.
    """
    options = options or WriteOptions()
    merged: KeyValueMap = {}
    if not options.keep_writer:
        merged[WRITER_KEY] = KTX_WRITER
    merged.update(key_value)
    return merged


def encode_key_value(key_value: KeyValueMap,
                     options: Optional[WriteOptions] = None) -> List[KeyValueEntry]:
    """Encode merged metadata into sorted ``(key, value)`` byte pairs."""
    merged = merge_key_value(key_value, options)
    entries = []
    for key in sorted(merged, key=cmp_to_key(compare_keys)):
        value = merged[key]
        if isinstance(value, str):
            value_data = encode_text(value) + NUL
        else:
            value_data = bytes(value)
        entries.append((encode_text(key), value_data))
    return entries


def _entry_byte_length(key_data: bytes, value_data: bytes) -> int:
    return len(key_data) + 1 + len(value_data)


def key_value_byte_length(entries: List[KeyValueEntry]) -> int:
    """Total size of the KVD section, padding included."""
    total = 0
    for key_data, value_data in entries:
        kv_byte_length = _entry_byte_length(key_data, value_data)
        total += _UINT32.size + kv_byte_length + get_padding(kv_byte_length, KVD_ALIGNMENT)
    return total


def write_key_value(buffer: bytearray, offset: int, entries: List[KeyValueEntry]) -> int:
    """Write encoded entries at ``offset``; return the number of bytes written.

    Padding bytes are left as found, so ``buffer`` must be zero-filled.
    """
    cursor = offset
    for key_data, value_data in entries:
        kv_byte_length = _entry_byte_length(key_data, value_data)
        _UINT32.pack_into(buffer, cursor, kv_byte_length)
        cursor += _UINT32.size
        buffer[cursor:cursor + len(key_data)] = key_data
        cursor += len(key_data) + 1  # NUL
        buffer[cursor:cursor + len(value_data)] = value_data
        cursor += len(value_data)
        cursor += get_padding(kv_byte_length, KVD_ALIGNMENT)
    logger.debug("KVD: %d entries, %d bytes at offset %d", len(entries), cursor - offset, offset)
    return cursor - offset


def assemble_key_value(key_value: KeyValueMap, options: Optional[WriteOptions] = None) -> bytes:
    """Build the KVD section as a standalone byte string."""
    entries = encode_key_value(key_value, options)
    buffer = bytearray(key_value_byte_length(entries))
    write_key_value(buffer, 0, entries)
    return bytes(buffer)
