"""SVG to Pebble draw command image converter."""

__version__ = "0.1.0"
