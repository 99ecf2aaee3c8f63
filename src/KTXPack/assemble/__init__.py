"""Section assemblers: supercompression global data, key/value data, data format descriptor."""

from .sgd import assemble_global_data, global_data_byte_length, write_global_data
from .kvd import (
    merge_key_value,
    encode_key_value,
    key_value_byte_length,
    write_key_value,
    assemble_key_value,
)
from .dfd import (
    UnsupportedDescriptorError,
    validate_data_format_descriptor,
    data_format_descriptor_byte_length,
    write_data_format_descriptor,
    assemble_data_format_descriptor,
)

__all__ = [
    "assemble_global_data", "global_data_byte_length", "write_global_data",
    "merge_key_value", "encode_key_value", "key_value_byte_length",
    "write_key_value", "assemble_key_value",
    "UnsupportedDescriptorError", "validate_data_format_descriptor",
    "data_format_descriptor_byte_length", "write_data_format_descriptor",
    "assemble_data_format_descriptor",
]
