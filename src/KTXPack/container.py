"""In-memory model of a KTX 2.0 texture container."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

from .constants import (
    KHR_DF_FLAG_ALPHA_STRAIGHT,
    KHR_DF_KHR_DESCRIPTORTYPE_BASICFORMAT,
    KHR_DF_MODEL_UNSPECIFIED,
    KHR_DF_PRIMARIES_BT709,
    KHR_DF_TRANSFER_SRGB,
    KHR_DF_VENDORID_KHRONOS,
    KHR_DF_VERSIONNUMBER_1_3,
    SupercompressionScheme,
    VkFormat,
)

KeyValueMap = Dict[str, Union[str, bytes]]


@dataclass
class KTX2Level:
    """Single mip level payload (pre-encoded, possibly supercompressed)."""

    level_data: bytes = b""
    uncompressed_byte_length: int = 0


@dataclass
class KTX2Sample:
    """One 16-byte sample record of a BASICFORMAT descriptor."""

    bit_offset: int = 0
    bit_length: int = 0
    channel_type: int = 0
    sample_position: Sequence[int] = field(default_factory=lambda: [0, 0, 0, 0])
    sample_lower: int = 0
    sample_upper: int = 0


@dataclass
class KTX2BasicFormatDescriptor:
    """Khronos BASICFORMAT data format descriptor block."""

    vendor_id: int = KHR_DF_VENDORID_KHRONOS
    descriptor_type: int = KHR_DF_KHR_DESCRIPTORTYPE_BASICFORMAT
    version_number: int = KHR_DF_VERSIONNUMBER_1_3
    color_model: int = KHR_DF_MODEL_UNSPECIFIED
    color_primaries: int = KHR_DF_PRIMARIES_BT709
    transfer_function: int = KHR_DF_TRANSFER_SRGB
    flags: int = KHR_DF_FLAG_ALPHA_STRAIGHT
    # Dimensionality d is stored as d - 1.
    texel_block_dimension: Sequence[int] = field(default_factory=lambda: [0, 0, 0, 0])
    bytes_plane: Sequence[int] = field(default_factory=lambda: [0] * 8)
    samples: List[KTX2Sample] = field(default_factory=list)


@dataclass
class KTX2ImageDesc:
    """Per-image slice description inside BasisLZ global data."""

    image_flags: int = 0
    rgb_slice_byte_offset: int = 0
    rgb_slice_byte_length: int = 0
    alpha_slice_byte_offset: int = 0
    alpha_slice_byte_length: int = 0


@dataclass
class KTX2GlobalDataBasisLZ:
    """Supercompression global data shared by every level."""

    endpoint_count: int = 0
    selector_count: int = 0
    image_descs: List[KTX2ImageDesc] = field(default_factory=list)
    endpoints_data: bytes = b""
    selectors_data: bytes = b""
    tables_data: bytes = b""
    extended_data: bytes = b""


@dataclass
class KTX2Container:
    """Texture container handed to :func:`KTXPack.write`.

    The serializer treats the container as read-only input; callers own
    structural consistency (level count vs. dimensions, payload lengths).
    """

    vk_format: int = VkFormat.UNDEFINED
    type_size: int = 1
    pixel_width: int = 0
    pixel_height: int = 0
    pixel_depth: int = 0
    layer_count: int = 0
    face_count: int = 1
    supercompression_scheme: int = SupercompressionScheme.NONE
    levels: List[KTX2Level] = field(default_factory=list)
    data_format_descriptor: List[KTX2BasicFormatDescriptor] = field(default_factory=list)
    key_value: KeyValueMap = field(default_factory=dict)
    global_data: Optional[KTX2GlobalDataBasisLZ] = None


def create_default_container() -> KTX2Container:
    """Return an empty container carrying a single BASICFORMAT descriptor."""
    return KTX2Container(data_format_descriptor=[KTX2BasicFormatDescriptor()])
