"""Test helpers: a minimal KTX2 reader and container builders."""

import struct

import numpy as np

from KTXPack import KTX2Level, KTX2Sample, create_default_container

KTX2_ID = bytes([0xAB, 0x4B, 0x54, 0x58, 0x20, 0x32, 0x30, 0xBB, 0x0D, 0x0A, 0x1A, 0x0A])

HEADER_FIELDS = (
    "vk_format", "type_size", "pixel_width", "pixel_height", "pixel_depth",
    "layer_count", "face_count", "level_count", "supercompression_scheme",
    "dfd_offset", "dfd_length", "kvd_offset", "kvd_length",
    "sgd_offset", "sgd_length",
)


def parse_ktx2(data: bytes) -> dict:
    assert data[:12] == KTX2_ID, "bad identifier"
    header = dict(zip(HEADER_FIELDS, struct.unpack_from("<9I4I2Q", data, 12)))

    levels = []
    for i in range(header["level_count"]):
        offset, length, uncompressed = struct.unpack_from("<QQQ", data, 80 + 24 * i)
        levels.append({
            "offset": offset,
            "length": length,
            "uncompressed": uncompressed,
            "data": data[offset:offset + length],
        })

    kvd = []
    pos = header["kvd_offset"]
    end = pos + header["kvd_length"]
    while pos < end:
        (length,) = struct.unpack_from("<I", data, pos)
        record = data[pos + 4:pos + 4 + length]
        key, _, value = record.partition(b"\x00")
        kvd.append({"offset": pos, "length": length, "key": key.decode("utf-8"), "value": value})
        pos += 4 + length + (-length % 4)

    return {"header": header, "levels": levels, "kvd": kvd}


def make_rgba8_container(level_sizes=(16, 4)):
    """Container with an RGBA8 descriptor and one payload per size."""
    container = create_default_container()
    container.vk_format = 37
    container.pixel_width = 2
    container.pixel_height = 2
    dfd = container.data_format_descriptor[0]
    dfd.bytes_plane = [4, 0, 0, 0, 0, 0, 0, 0]
    dfd.samples = [
        KTX2Sample(bit_offset=8 * i, bit_length=7, channel_type=channel, sample_upper=255)
        for i, channel in enumerate((0, 1, 2, 15))
    ]
    container.levels = [
        KTX2Level(level_data=bytes([i + 1]) * size, uncompressed_byte_length=size)
        for i, size in enumerate(level_sizes)
    ]
    return container


def random_image(width=16, height=16, channels=4, seed=0):
    rng = np.random.default_rng(seed)
    return rng.random((height, width, channels), dtype=np.float32)
