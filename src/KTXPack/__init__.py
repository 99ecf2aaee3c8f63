"""Provide package metadata and the KTX 2.0 serializer API for `KTXPack`."""

import logging as _logging

__version__ = "1.0.0"
_logger = _logging.getLogger("ktx_pack")

from .config import WriteOptions, merge_write_options  # noqa: E402
from .container import (  # noqa: E402
    KTX2BasicFormatDescriptor,
    KTX2Container,
    KTX2GlobalDataBasisLZ,
    KTX2ImageDesc,
    KTX2Level,
    KTX2Sample,
    create_default_container,
)
from .assemble import UnsupportedDescriptorError  # noqa: E402
from .writer import write  # noqa: E402

__all__ = [
    "__version__",
    "write",
    "WriteOptions", "merge_write_options",
    "UnsupportedDescriptorError",
    "KTX2Container", "KTX2Level", "KTX2BasicFormatDescriptor", "KTX2Sample",
    "KTX2GlobalDataBasisLZ", "KTX2ImageDesc", "create_default_container",
]
