"""Compare who you follow with who follows you, from an Instagram data export."""

__version__ = "0.1.0"
