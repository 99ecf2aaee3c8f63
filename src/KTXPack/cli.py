"""Command-line interface for packing images into KTX2 files."""

import argparse
import logging
import os
import sys

from tqdm import tqdm

from .assemble import UnsupportedDescriptorError
from .config import PackConfig, merge_write_options
from .core import load_image, setup_logging, write_bytes_atomic
from .mipmap import build_container
from .writer import write

logger = logging.getLogger("ktx_pack")


def _parse_key_value(items):
    parsed = {}
    for item in items or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise ValueError(f"--kv expects KEY=VALUE, got '{item}'")
        parsed[key] = value
    return parsed


def pack_file(source_path: str, output_dir: str, config: PackConfig) -> str:
    """Pack one image into ``output_dir`` and return the written path."""
    img = load_image(source_path, max_pixels=config.max_image_pixels)
    container = build_container(
        img,
        srgb=config.srgb,
        generate_mipmaps=config.mipmap.enabled,
        min_size=config.mipmap.min_size,
        srgb_downsampling=config.mipmap.srgb_downsampling,
        orientation=config.orientation,
        key_value=config.extra_key_value(),
    )
    data = write(container, config.write)
    stem = os.path.splitext(os.path.basename(source_path))[0]
    out_path = os.path.join(output_dir, f"{stem}.ktx2")
    write_bytes_atomic(data, out_path)
    logger.info(
        "Packed %s -> %s (%d levels, %d bytes)",
        source_path, out_path, len(container.levels), len(data),
    )
    return out_path


def main(argv=None):
    """Parse CLI arguments and pack every input image."""
    parser = argparse.ArgumentParser(
        description="Pack images into uncompressed KTX 2.0 textures",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  KTXPack -i albedo.png normal.png -o ./ktx2
  KTXPack -i mask.png --linear --no-mipmaps
  KTXPack -i albedo.png --kv KTXswizzle=rgba --keep-writer
  KTXPack --generate-config -c pack.yaml
        """
    )
    parser.add_argument("--input", "-i", nargs="+", help="Input image(s)")
    parser.add_argument("--output", "-o", help="Output directory")
    parser.add_argument("--config", "-c", help="Path to config YAML")
    parser.add_argument("--linear", action="store_true",
                        help="Treat inputs as linear data instead of sRGB color")
    parser.add_argument("--no-mipmaps", action="store_true",
                        help="Write only the base level")
    parser.add_argument("--orientation", help="KTXorientation value (e.g. rd, ru)")
    parser.add_argument("--kv", action="append", metavar="KEY=VALUE",
                        help="Extra key/value metadata (repeatable)")
    parser.add_argument("--keep-writer", action="store_true",
                        help="Do not generate a KTXwriter metadata entry")
    parser.add_argument("--generate-config", action="store_true",
                        help="Generate default config YAML")
    parser.add_argument("--log-level",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])

    args = parser.parse_args(argv)

    if args.generate_config:
        config = PackConfig()
        dest = args.config or "ktxpack.yaml"
        if os.path.isdir(dest):
            dest = os.path.join(dest, "ktxpack.yaml")
        config.to_yaml(dest)
        logger.info("Generated default %s", dest)
        print(f"Generated default {dest}")
        return

    # Make from_yaml() warnings visible before logging is fully configured.
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    if args.config:
        if not os.path.exists(args.config):
            logger.error("Config file not found: %s", args.config)
            print(f"Error: Config file not found: {args.config}")
            sys.exit(1)
        try:
            config = PackConfig.from_yaml(args.config)
        except ValueError as e:
            logger.error("Invalid config file '%s': %s", args.config, e)
            print(f"Error: Invalid config: {e}")
            sys.exit(1)
    else:
        config = PackConfig()

    # CLI overrides
    if args.output:
        config.output_dir = args.output
    if args.linear:
        config.srgb = False
    if args.no_mipmaps:
        config.mipmap.enabled = False
    if args.orientation:
        config.orientation = args.orientation
    if args.keep_writer:
        config.write = merge_write_options(config.write, keep_writer=True)
    if args.log_level:
        config.log_level = args.log_level
    try:
        config.key_value.update(_parse_key_value(args.kv))
        config.validate()
    except ValueError as e:
        logger.error(str(e))
        print(f"Error: {e}")
        sys.exit(1)

    setup_logging(config.log_level)

    if not args.input:
        parser.error("--input is required unless --generate-config is given")
    missing = [p for p in args.input if not os.path.isfile(p)]
    if missing:
        logger.error("Input image(s) not found: %s", ", ".join(missing))
        print(f"Error: Input not found: {', '.join(missing)}")
        sys.exit(1)

    failed = 0
    for source_path in tqdm(args.input, desc="Packing", unit="img", disable=len(args.input) < 2):
        try:
            pack_file(source_path, config.output_dir, config)
        except UnsupportedDescriptorError as exc:
            logger.error("Cannot serialize %s: %s", source_path, exc)
            sys.exit(2)
        except (IOError, ValueError) as exc:
            logger.error("Failed to pack %s: %s", source_path, exc)
            failed += 1

    if failed:
        logger.error("%d of %d input(s) failed", failed, len(args.input))
        sys.exit(1)


if __name__ == "__main__":
    main()
