"""Image and file I/O -- load source images as numpy arrays, write containers atomically."""

import logging
import os
import threading
from pathlib import Path

import numpy as np
from PIL import Image

logger = logging.getLogger("ktx_pack.io")


def load_image(path: str, max_pixels: int = 0) -> np.ndarray:
    """Load image as a float32 (H, W, C) array normalized to [0, 1].

    Grayscale sources keep a single channel, LA/RGB/RGBA keep theirs;
    palette and CMYK images are converted first.
    """
    ext = Path(path).suffix.lower()
    try:
        with Image.open(path) as img:
            if max_pixels > 0 and img.width * img.height > max_pixels:
                logger.warning(
                    "Image %s exceeds max_pixels: %d > %d",
                    path, img.width * img.height, max_pixels,
                )
                raise ValueError(
                    f"Image too large: {img.width}x{img.height} = {img.width * img.height:,} "
                    f"pixels (max {max_pixels:,})."
                )

            if img.mode in ("I;16", "I;16B", "I;16L", "I;16N"):
                logger.debug("Loading %s as 16-bit integer mode %s", path, img.mode)
                arr = np.asarray(img, dtype=np.float32) / 65535.0
            elif img.mode == "F":
                arr = np.clip(np.asarray(img, dtype=np.float32), 0.0, 1.0)
            elif img.mode in ("L", "LA", "RGB", "RGBA"):
                arr = np.asarray(img, dtype=np.float32) / 255.0
            else:
                target = "RGBA" if img.mode == "P" else "RGB"
                logger.debug("Converting image '%s' from %s->%s", path, img.mode, target)
                with img.convert(target) as converted:
                    arr = np.asarray(converted, dtype=np.float32) / 255.0

            if arr.ndim == 2:
                arr = arr[:, :, np.newaxis]
            logger.debug("Loaded %s (%dx%d, %d channels)", path, arr.shape[1], arr.shape[0], arr.shape[2])
            return arr.astype(np.float32, copy=False)
    except ValueError:
        raise
    except Exception as e:
        logger.error("Failed to open image '%s' (ext=%s): %s", path, ext, e)
        raise IOError(f"Failed to open image: {path}\n  Format: {ext}, Error: {e}") from e


def write_bytes_atomic(data: bytes, path: str) -> None:
    """Write ``data`` to ``path`` via temp file + ``os.replace``."""
    parent_dir = os.path.dirname(path) or "."
    os.makedirs(parent_dir, exist_ok=True)
    tmp_path = f"{path}.tmp.{os.getpid()}.{threading.get_ident()}"
    try:
        with open(tmp_path, "wb") as f:
            f.write(data)
        os.replace(tmp_path, path)
        logger.debug("Saved: %s (%d bytes)", path, len(data))
    finally:
        if os.path.exists(tmp_path):
            try:
                os.remove(tmp_path)
            except OSError:
                pass


def srgb_to_linear(arr: np.ndarray) -> np.ndarray:
    """Convert sRGB [0,1] values to linear RGB."""
    arr = np.clip(arr, 0.0, 1.0).astype(np.float32, copy=False)
    return np.where(
        arr <= 0.04045,
        arr / 12.92,
        np.power((arr + 0.055) / 1.055, 2.4),
    ).astype(np.float32, copy=False)


def linear_to_srgb(arr: np.ndarray) -> np.ndarray:
    """Convert linear RGB values to sRGB [0,1]."""
    arr = np.clip(arr, 0.0, 1.0).astype(np.float32, copy=False)
    return np.where(
        arr <= 0.0031308,
        arr * 12.92,
        1.055 * np.power(arr, 1.0 / 2.4) - 0.055,
    ).astype(np.float32, copy=False)
