"""Define typed configuration models for the serializer and the image packer.

Use `WriteOptions` to control a single `write()` call and `PackConfig` to
load, validate, and persist settings for the command-line packer.
"""

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Optional

import yaml

from .container import KeyValueMap

logger = logging.getLogger("ktx_pack.config")

_SUPPORTED_CONFIG_VERSION = 1
_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_VALID_ORIENTATIONS = ("rd", "ru", "ld", "lu")


@dataclass
class WriteOptions:
    """Options for a single serialization call.

    keep_writer: when True no ``KTXwriter`` entry is generated and the
    container's own entry (if any) is written unchanged.
    """

    keep_writer: bool = False


def merge_write_options(options: Optional[WriteOptions] = None, **overrides) -> WriteOptions:
    """Return a new `WriteOptions` with ``overrides`` applied over ``options``.

    Precedence is keyword overrides, then ``options``, then field defaults.
    Unknown override names raise ``TypeError``.
    """
    base = options if options is not None else WriteOptions()
    return dataclasses.replace(base, **overrides)


@dataclass
class MipmapConfig:
    """Store settings for mip chain generation."""

    enabled: bool = True
    min_size: int = 1
    srgb_downsampling: bool = True


@dataclass
class PackConfig:
    """Settings for packing images into KTX2 files."""

    config_version: int = 1
    output_dir: str = "./ktx2"
    log_level: str = "INFO"
    srgb: bool = True
    orientation: str = "rd"
    max_image_pixels: int = 67108864  # 8192x8192
    key_value: Dict[str, str] = field(default_factory=dict)

    write: WriteOptions = field(default_factory=WriteOptions)
    mipmap: MipmapConfig = field(default_factory=MipmapConfig)

    @classmethod
    def from_yaml(cls, path: str) -> "PackConfig":
        """Load pack configuration from YAML or return defaults."""
        if not os.path.exists(path):
            logger.info("Config file '%s' not found. Using defaults.", path)
            config = cls()
            config.validate()
            return config
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"{path}: invalid YAML: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(
                f"{path}: top-level YAML must be a mapping, got {type(data).__name__}"
            )

        yaml_version = data.get("config_version", 1)
        if isinstance(yaml_version, int) and yaml_version > _SUPPORTED_CONFIG_VERSION:
            logger.warning(
                "Config '%s' declares config_version=%s, newer than supported %d. "
                "Unknown keys will be ignored.",
                path, yaml_version, _SUPPORTED_CONFIG_VERSION,
            )

        config = cls()
        _merge_dict_to_dataclass(config, data)
        try:
            config.validate()
        except ValueError as exc:
            raise ValueError(f"{path}: {exc}") from exc
        return config

    def to_yaml(self, path: str):
        """Write the configuration to ``path`` as YAML."""
        data = dataclasses.asdict(self)
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
        logger.debug("Wrote config to %s", path)

    def validate(self):
        """Raise ``ValueError`` listing every invalid setting."""
        errors = []
        if self.log_level.upper() not in _VALID_LOG_LEVELS:
            errors.append(
                f"log_level must be one of {', '.join(_VALID_LOG_LEVELS)}, got '{self.log_level}'"
            )
        if self.orientation not in _VALID_ORIENTATIONS:
            errors.append(
                f"orientation must be one of {', '.join(_VALID_ORIENTATIONS)}, "
                f"got '{self.orientation}'"
            )
        if self.max_image_pixels < 0:
            errors.append("max_image_pixels must be >= 0 (0 = unlimited)")
        if self.mipmap.min_size < 1:
            errors.append(f"mipmap.min_size must be >= 1, got {self.mipmap.min_size}")
        for key, value in self.key_value.items():
            if not isinstance(key, str) or not key:
                errors.append(f"key_value keys must be non-empty strings, got {key!r}")
            elif not isinstance(value, str):
                errors.append(f"key_value['{key}'] must be a string, got {type(value).__name__}")
            elif key.startswith("KTX") and key not in ("KTXwriter", "KTXorientation"):
                logger.warning(
                    "key_value entry '%s' uses the reserved KTX prefix; writing it anyway.",
                    key,
                )

        if errors:
            raise ValueError(
                "Configuration validation failed:\n" +
                "\n".join(f"  - {e}" for e in errors)
            )

    def extra_key_value(self) -> KeyValueMap:
        """Metadata entries to merge into every packed container."""
        return dict(self.key_value)


def _merge_dict_to_dataclass(obj, data: dict, _path: str = ""):
    for key, value in data.items():
        full_key = f"{_path}{key}"
        if not hasattr(obj, key):
            logger.warning("Unknown config key ignored: '%s'", full_key)
            continue
        field_val = getattr(obj, key)
        if dataclasses.is_dataclass(field_val) and isinstance(value, dict):
            _merge_dict_to_dataclass(field_val, value, f"{full_key}.")
            continue
        if value is None and field_val is not None:
            logger.warning(
                "Config key '%s' is null but field default is %s. Using default value.",
                full_key, type(field_val).__name__,
            )
            continue
        expected_type = type(field_val)
        if (not isinstance(value, expected_type)
                and not (expected_type is int
                         and isinstance(value, float)
                         and value == int(value))):
            logger.warning(
                "Config type mismatch for '%s': expected %s, got %s (%r). Using default value.",
                full_key, expected_type.__name__, type(value).__name__, value,
            )
            continue
        if expected_type is int and isinstance(value, float):
            value = int(value)
        if isinstance(field_val, dict):
            field_val.update(value)
        else:
            setattr(obj, key, value)
