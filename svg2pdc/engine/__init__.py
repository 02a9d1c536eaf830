"""svg2pdc conversion engine.

The converter itself lives in ``svg2pdc.engine.pipeline``; importing it also
registers the built-in shape normalizers.
"""

from svg2pdc.engine.config import ConversionConfig, ErrorPolicy
from svg2pdc.engine.encoder import CircleCommand, CommandList, PathCommand, decode, encode
from svg2pdc.engine.registry import get_registry, normalizer

__all__ = [
    "ConversionConfig",
    "ErrorPolicy",
    "CircleCommand",
    "CommandList",
    "PathCommand",
    "decode",
    "encode",
    "get_registry",
    "normalizer",
]
