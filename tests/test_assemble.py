"""Tests for the SGD, KVD and DFD section assemblers."""

import struct
import unittest

from KTXPack import (
    KTX2BasicFormatDescriptor,
    KTX2GlobalDataBasisLZ,
    KTX2ImageDesc,
    KTX2Sample,
    UnsupportedDescriptorError,
    WriteOptions,
)
from KTXPack.assemble import (
    assemble_data_format_descriptor,
    assemble_global_data,
    assemble_key_value,
    encode_key_value,
    merge_key_value,
)
from KTXPack.constants import KTX_WRITER


class TestGlobalData(unittest.TestCase):
    def test_absent_global_data_is_empty(self):
        self.assertEqual(assemble_global_data(None), b"")

    def test_empty_payloads_still_emit_header_and_image_descs(self):
        gd = KTX2GlobalDataBasisLZ(
            endpoint_count=3,
            selector_count=5,
            image_descs=[KTX2ImageDesc(), KTX2ImageDesc(image_flags=2)],
        )
        data = assemble_global_data(gd)
        self.assertEqual(len(data), 20 + 2 * 20)
        self.assertEqual(struct.unpack_from("<HHIIII", data, 0), (3, 5, 0, 0, 0, 0))
        self.assertEqual(struct.unpack_from("<5I", data, 40), (2, 0, 0, 0, 0))

    def test_payload_order_and_lengths(self):
        gd = KTX2GlobalDataBasisLZ(
            endpoint_count=1,
            selector_count=2,
            image_descs=[KTX2ImageDesc(1, 10, 20, 30, 40)],
            endpoints_data=b"EE",
            selectors_data=b"SSS",
            tables_data=b"T",
            extended_data=b"XXXX",
        )
        data = assemble_global_data(gd)
        self.assertEqual(struct.unpack_from("<HHIIII", data, 0), (1, 2, 2, 3, 1, 4))
        self.assertEqual(struct.unpack_from("<5I", data, 20), (1, 10, 20, 30, 40))
        self.assertEqual(data[40:], b"EESSSTXXXX")


class TestKeyValue(unittest.TestCase):
    def test_writer_entry_generated_by_default(self):
        merged = merge_key_value({"a": "b"})
        self.assertEqual(merged["KTXwriter"], KTX_WRITER)
        self.assertEqual(merged["a"], "b")

    def test_keep_writer_suppresses_generated_entry(self):
        merged = merge_key_value({"a": "b"}, WriteOptions(keep_writer=True))
        self.assertNotIn("KTXwriter", merged)

    def test_caller_writer_entry_takes_priority(self):
        merged = merge_key_value({"KTXwriter": "mytool 2.0"})
        self.assertEqual(merged["KTXwriter"], "mytool 2.0")
        merged = merge_key_value({"KTXwriter": "mytool 2.0"}, WriteOptions(keep_writer=True))
        self.assertEqual(merged["KTXwriter"], "mytool 2.0")

    def test_merge_does_not_mutate_input(self):
        source = {"a": "b"}
        merge_key_value(source)
        self.assertEqual(source, {"a": "b"})

    def test_entries_sorted_bytewise(self):
        entries = encode_key_value({"b": "1", "a": "2", "B": "3", "é": "4"})
        keys = [k for k, _ in entries]
        self.assertEqual(keys, [b"B", b"KTXwriter", b"a", b"b", "é".encode("utf-8")])

    def test_single_text_entry_bytes(self):
        data = assemble_key_value({"KTXorientation": "rd"}, WriteOptions(keep_writer=True))
        # 14 key bytes + NUL + "rd" + NUL = 18, padded to 20.
        expected = struct.pack("<I", 18) + b"KTXorientation\x00rd\x00" + b"\x00\x00"
        self.assertEqual(data, expected)

    def test_binary_value_written_raw(self):
        data = assemble_key_value({"k": b"\x01\x02\x03"}, WriteOptions(keep_writer=True))
        # "k" NUL + 3 raw bytes = 5, padded to 8.
        self.assertEqual(data, struct.pack("<I", 5) + b"k\x00\x01\x02\x03" + b"\x00" * 3)

    def test_every_record_padded_to_four(self):
        data = assemble_key_value({"a": "x", "bb": "yy", "ccc": b"z" * 7})
        pos = 0
        while pos < len(data):
            (length,) = struct.unpack_from("<I", data, pos)
            padded = length + (-length % 4)
            self.assertEqual((4 + padded) % 4, 0)
            pos += 4 + padded
        self.assertEqual(pos, len(data))
        self.assertEqual(len(data) % 4, 0)

    def test_empty_map_with_keep_writer_is_empty(self):
        self.assertEqual(assemble_key_value({}, WriteOptions(keep_writer=True)), b"")


class TestDataFormatDescriptor(unittest.TestCase):
    def _descriptor(self, samples=()):
        return KTX2BasicFormatDescriptor(
            vendor_id=0,
            descriptor_type=0,
            version_number=2,
            color_model=1,
            color_primaries=1,
            transfer_function=2,
            flags=0,
            texel_block_dimension=[3, 3, 0, 0],
            bytes_plane=[16, 0, 0, 0, 0, 0, 0, 0],
            samples=list(samples),
        )

    def test_block_layout_without_samples(self):
        data = assemble_data_format_descriptor([self._descriptor()])
        self.assertEqual(len(data), 28)
        self.assertEqual(struct.unpack_from("<IHHHH", data, 0), (28, 0, 0, 2, 24))
        self.assertEqual(tuple(data[12:16]), (1, 1, 2, 0))
        self.assertEqual(tuple(data[16:20]), (3, 3, 0, 0))
        self.assertEqual(tuple(data[20:28]), (16, 0, 0, 0, 0, 0, 0, 0))

    def test_sample_records(self):
        samples = [
            KTX2Sample(bit_offset=0, bit_length=7, channel_type=0,
                       sample_position=[0, 0, 0, 0], sample_lower=0, sample_upper=0xFFFFFFFF),
            KTX2Sample(bit_offset=8, bit_length=7, channel_type=0x40 | 1,
                       sample_position=[1, 2, 3, 4], sample_lower=-128, sample_upper=127),
        ]
        data = assemble_data_format_descriptor([self._descriptor(samples)])
        self.assertEqual(len(data), 28 + 2 * 16)
        self.assertEqual(struct.unpack_from("<I", data, 0)[0], 60)
        self.assertEqual(struct.unpack_from("<H", data, 10)[0], 56)
        self.assertEqual(
            struct.unpack_from("<HBB4BII", data, 28),
            (0, 7, 0, 0, 0, 0, 0, 0, 0xFFFFFFFF),
        )
        self.assertEqual(
            struct.unpack_from("<HBB4Bii", data, 44),
            (8, 7, 0x41, 1, 2, 3, 4, -128, 127),
        )

    def test_rejects_empty_descriptor_list(self):
        with self.assertRaises(UnsupportedDescriptorError):
            assemble_data_format_descriptor([])

    def test_rejects_multiple_blocks(self):
        with self.assertRaises(UnsupportedDescriptorError):
            assemble_data_format_descriptor([self._descriptor(), self._descriptor()])

    def test_rejects_non_basic_descriptor_type(self):
        dfd = self._descriptor()
        dfd.descriptor_type = 1
        with self.assertRaises(UnsupportedDescriptorError):
            assemble_data_format_descriptor([dfd])

    def test_rejects_scalar_texel_block_dimension(self):
        dfd = self._descriptor()
        dfd.texel_block_dimension = 4
        with self.assertRaises(UnsupportedDescriptorError) as cm:
            assemble_data_format_descriptor([dfd])
        self.assertIn("d - 1", str(cm.exception))

    def test_rejects_short_texel_block_dimension(self):
        dfd = self._descriptor()
        dfd.texel_block_dimension = [3, 3]
        with self.assertRaises(UnsupportedDescriptorError):
            assemble_data_format_descriptor([dfd])

    def test_descriptor_error_is_value_error(self):
        self.assertTrue(issubclass(UnsupportedDescriptorError, ValueError))


if __name__ == "__main__":
    unittest.main(verbosity=2)
