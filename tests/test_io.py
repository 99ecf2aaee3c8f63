"""Tests for image loading and atomic file writes."""

import os
import shutil
import tempfile
import unittest

import numpy as np
from PIL import Image

from KTXPack.core import load_image, write_bytes_atomic
from KTXPack.core.io import linear_to_srgb, srgb_to_linear


class TestLoadImage(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def _save(self, arr, name):
        path = os.path.join(self.tmpdir, name)
        Image.fromarray(arr).save(path)
        return path

    def test_rgba_png_keeps_four_channels(self):
        arr = np.zeros((8, 4, 4), dtype=np.uint8)
        arr[..., 3] = 255
        arr[0, 0] = [255, 128, 0, 255]
        loaded = load_image(self._save(arr, "rgba.png"))
        self.assertEqual(loaded.shape, (8, 4, 4))
        self.assertEqual(loaded.dtype, np.float32)
        np.testing.assert_allclose(loaded[0, 0], [1.0, 128 / 255, 0.0, 1.0], atol=1e-6)

    def test_grayscale_png_single_channel(self):
        arr = np.full((4, 4), 51, dtype=np.uint8)
        loaded = load_image(self._save(arr, "gray.png"))
        self.assertEqual(loaded.shape, (4, 4, 1))
        np.testing.assert_allclose(loaded, 0.2, atol=1e-6)

    def test_max_pixels_guard(self):
        arr = np.zeros((16, 16, 3), dtype=np.uint8)
        path = self._save(arr, "big.png")
        with self.assertRaises(ValueError):
            load_image(path, max_pixels=100)

    def test_unreadable_file_raises_ioerror(self):
        path = os.path.join(self.tmpdir, "broken.png")
        with open(path, "wb") as f:
            f.write(b"not an image")
        with self.assertRaises(IOError):
            load_image(path)


class TestWriteBytesAtomic(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_writes_and_creates_directories(self):
        path = os.path.join(self.tmpdir, "nested", "out.ktx2")
        write_bytes_atomic(b"\x01\x02", path)
        with open(path, "rb") as f:
            self.assertEqual(f.read(), b"\x01\x02")
        self.assertEqual(os.listdir(os.path.dirname(path)), ["out.ktx2"])

    def test_overwrites_existing(self):
        path = os.path.join(self.tmpdir, "out.ktx2")
        write_bytes_atomic(b"old", path)
        write_bytes_atomic(b"new", path)
        with open(path, "rb") as f:
            self.assertEqual(f.read(), b"new")


class TestColorTransfer(unittest.TestCase):
    def test_srgb_roundtrip(self):
        arr = np.linspace(0.0, 1.0, 32, dtype=np.float32)
        np.testing.assert_allclose(linear_to_srgb(srgb_to_linear(arr)), arr, atol=1e-5)

    def test_midpoint_values(self):
        self.assertAlmostEqual(float(srgb_to_linear(np.float32(0.5))), 0.214, places=3)


if __name__ == "__main__":
    unittest.main(verbosity=2)
