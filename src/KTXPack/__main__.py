"""Entrypoint for `python -m KTXPack`.

Usage:
  python -m KTXPack -i image.png [image2.png ...] -o ./out
"""
import logging

logger = logging.getLogger("ktx_pack")


def _run_cli():
    from .cli import main as cli_main
    logger.debug("Dispatching to CLI entrypoint.")
    cli_main()


if __name__ == "__main__":
    _run_cli()
