"""Constants for the KTX 2.0 container and its Khronos data format descriptor."""

from enum import IntEnum

from . import __version__

KTX_WRITER = f"KTXPack v{__version__}"

# "«KTX 20»\r\n\x1A\n"
KTX2_ID = bytes([0xAB, 0x4B, 0x54, 0x58, 0x20, 0x32, 0x30, 0xBB, 0x0D, 0x0A, 0x1A, 0x0A])
HEADER_BYTE_LENGTH = 68
LEVEL_INDEX_ENTRY_BYTE_LENGTH = 24
SGD_HEADER_BYTE_LENGTH = 20
IMAGE_DESC_BYTE_LENGTH = 20
DFD_BLOCK_HEADER_BYTE_LENGTH = 28
DFD_SAMPLE_BYTE_LENGTH = 16
KVD_ALIGNMENT = 4
SGD_ALIGNMENT = 8
NUL = b"\x00"

WRITER_KEY = "KTXwriter"
ORIENTATION_KEY = "KTXorientation"


class SupercompressionScheme(IntEnum):
    """Enumerate the supercompression schemes a container may declare."""

    NONE = 0
    BASISLZ = 1
    ZSTD = 2
    ZLIB = 3


class VkFormat(IntEnum):
    """Subset of Vulkan formats produced by the image packer."""

    UNDEFINED = 0
    R8_UNORM = 9
    R8_SRGB = 15
    R8G8_UNORM = 16
    R8G8_SRGB = 22
    R8G8B8_UNORM = 23
    R8G8B8_SRGB = 29
    R8G8B8A8_UNORM = 37
    R8G8B8A8_SRGB = 43


# Data Format Descriptor
KHR_DF_VENDORID_KHRONOS = 0
KHR_DF_KHR_DESCRIPTORTYPE_BASICFORMAT = 0
KHR_DF_VERSIONNUMBER_1_3 = 2

KHR_DF_MODEL_UNSPECIFIED = 0
KHR_DF_MODEL_RGBSDA = 1
KHR_DF_MODEL_ETC1S = 163
KHR_DF_MODEL_UASTC = 166

KHR_DF_PRIMARIES_UNSPECIFIED = 0
KHR_DF_PRIMARIES_BT709 = 1

KHR_DF_TRANSFER_UNSPECIFIED = 0
KHR_DF_TRANSFER_LINEAR = 1
KHR_DF_TRANSFER_SRGB = 2

KHR_DF_FLAG_ALPHA_STRAIGHT = 0
KHR_DF_FLAG_ALPHA_PREMULTIPLIED = 1

KHR_DF_CHANNEL_RGBSDA_RED = 0
KHR_DF_CHANNEL_RGBSDA_GREEN = 1
KHR_DF_CHANNEL_RGBSDA_BLUE = 2
KHR_DF_CHANNEL_RGBSDA_ALPHA = 15

KHR_DF_SAMPLE_DATATYPE_FLOAT = 0x80
KHR_DF_SAMPLE_DATATYPE_SIGNED = 0x40
KHR_DF_SAMPLE_DATATYPE_EXPONENT = 0x20
KHR_DF_SAMPLE_DATATYPE_LINEAR = 0x10
