"""Build uncompressed 8-bit KTX2 containers from float images.

The mip chain is box-filtered; color channels of sRGB textures are averaged
in linear space while alpha is always filtered as stored.
"""

import logging
from typing import List, Optional

import numpy as np
from PIL import Image

from .constants import (
    KHR_DF_CHANNEL_RGBSDA_ALPHA,
    KHR_DF_CHANNEL_RGBSDA_BLUE,
    KHR_DF_CHANNEL_RGBSDA_GREEN,
    KHR_DF_CHANNEL_RGBSDA_RED,
    KHR_DF_MODEL_RGBSDA,
    KHR_DF_PRIMARIES_BT709,
    KHR_DF_SAMPLE_DATATYPE_LINEAR,
    KHR_DF_TRANSFER_LINEAR,
    KHR_DF_TRANSFER_SRGB,
    ORIENTATION_KEY,
    SupercompressionScheme,
    VkFormat,
)
from .container import (
    KeyValueMap,
    KTX2BasicFormatDescriptor,
    KTX2Container,
    KTX2Level,
    KTX2Sample,
)
from .core.io import linear_to_srgb, srgb_to_linear

logger = logging.getLogger("ktx_pack.mipmap")

_FORMATS = {
    # channels: (unorm, srgb)
    1: (VkFormat.R8_UNORM, VkFormat.R8_SRGB),
    2: (VkFormat.R8G8_UNORM, VkFormat.R8G8_SRGB),
    3: (VkFormat.R8G8B8_UNORM, VkFormat.R8G8B8_SRGB),
    4: (VkFormat.R8G8B8A8_UNORM, VkFormat.R8G8B8A8_SRGB),
}

_CHANNEL_IDS = {
    1: [KHR_DF_CHANNEL_RGBSDA_RED],
    2: [KHR_DF_CHANNEL_RGBSDA_RED, KHR_DF_CHANNEL_RGBSDA_GREEN],
    3: [KHR_DF_CHANNEL_RGBSDA_RED, KHR_DF_CHANNEL_RGBSDA_GREEN, KHR_DF_CHANNEL_RGBSDA_BLUE],
    4: [
        KHR_DF_CHANNEL_RGBSDA_RED, KHR_DF_CHANNEL_RGBSDA_GREEN,
        KHR_DF_CHANNEL_RGBSDA_BLUE, KHR_DF_CHANNEL_RGBSDA_ALPHA,
    ],
}


def mip_dimensions(width: int, height: int, min_size: int = 1) -> List[tuple]:
    """Return ``(width, height)`` for every level, base level first."""
    dims = [(width, height)]
    while max(width, height) > min_size and (width > 1 or height > 1):
        width, height = max(1, width // 2), max(1, height // 2)
        dims.append((width, height))
    return dims


def _resize_box(arr: np.ndarray, width: int, height: int) -> np.ndarray:
    channels = []
    for c in range(arr.shape[2]):
        with Image.fromarray(np.ascontiguousarray(arr[:, :, c])) as img:
            with img.resize((width, height), Image.Resampling.BOX) as resized:
                channels.append(np.asarray(resized, dtype=np.float32))
    return np.stack(channels, axis=-1)


def generate_mip_chain(img: np.ndarray, min_size: int = 1,
                       srgb_downsampling: bool = True) -> List[np.ndarray]:
    """Downsample ``img`` (H, W, C float32 in [0, 1]) into a full mip chain."""
    if img.ndim != 3 or img.shape[2] not in _FORMATS:
        raise ValueError(f"Expected an HxWx1..4 image, got shape {img.shape}")
    h, w = img.shape[:2]
    color_channels = 3 if img.shape[2] == 4 else img.shape[2]

    work = img.astype(np.float32, copy=True)
    if srgb_downsampling:
        work[:, :, :color_channels] = srgb_to_linear(work[:, :, :color_channels])

    chain = [img.astype(np.float32, copy=False)]
    for width, height in mip_dimensions(w, h, min_size)[1:]:
        mip = _resize_box(work, width, height)
        out = mip.copy()
        if srgb_downsampling:
            out[:, :, :color_channels] = linear_to_srgb(out[:, :, :color_channels])
        chain.append(np.clip(out, 0.0, 1.0))
    logger.debug("Generated %d mip levels from %dx%d", len(chain), w, h)
    return chain


def _basic_descriptor(channels: int, srgb: bool) -> KTX2BasicFormatDescriptor:
    samples = []
    for i, channel_id in enumerate(_CHANNEL_IDS[channels]):
        channel_type = channel_id
        if srgb and channel_id == KHR_DF_CHANNEL_RGBSDA_ALPHA:
            channel_type |= KHR_DF_SAMPLE_DATATYPE_LINEAR
        samples.append(KTX2Sample(
            bit_offset=8 * i,
            bit_length=7,
            channel_type=channel_type,
            sample_position=[0, 0, 0, 0],
            sample_lower=0,
            sample_upper=255,
        ))
    return KTX2BasicFormatDescriptor(
        color_model=KHR_DF_MODEL_RGBSDA,
        color_primaries=KHR_DF_PRIMARIES_BT709,
        transfer_function=KHR_DF_TRANSFER_SRGB if srgb else KHR_DF_TRANSFER_LINEAR,
        texel_block_dimension=[0, 0, 0, 0],
        bytes_plane=[channels, 0, 0, 0, 0, 0, 0, 0],
        samples=samples,
    )


def build_container(img: np.ndarray, srgb: bool = True, generate_mipmaps: bool = True,
                    min_size: int = 1, srgb_downsampling: bool = True,
                    orientation: str = "rd",
                    key_value: Optional[KeyValueMap] = None) -> KTX2Container:
    """Create an uncompressed 8-bit-per-channel container from ``img``."""
    if img.ndim == 2:
        img = img[:, :, np.newaxis]
    if img.ndim != 3 or img.shape[2] not in _FORMATS:
        raise ValueError(f"Expected an HxWx1..4 image, got shape {img.shape}")
    h, w, channels = img.shape

    if generate_mipmaps:
        chain = generate_mip_chain(img, min_size, srgb_downsampling=srgb and srgb_downsampling)
    else:
        chain = [img]

    levels = []
    for mip in chain:
        data = np.round(np.clip(mip, 0.0, 1.0) * 255.0).astype(np.uint8).tobytes()
        levels.append(KTX2Level(level_data=data, uncompressed_byte_length=len(data)))

    metadata: KeyValueMap = {ORIENTATION_KEY: orientation}
    metadata.update(key_value or {})

    unorm, srgb_format = _FORMATS[channels]
    return KTX2Container(
        vk_format=srgb_format if srgb else unorm,
        type_size=1,
        pixel_width=w,
        pixel_height=h,
        pixel_depth=0,
        layer_count=0,
        face_count=1,
        supercompression_scheme=SupercompressionScheme.NONE,
        levels=levels,
        data_format_descriptor=[_basic_descriptor(channels, srgb)],
        key_value=metadata,
    )
