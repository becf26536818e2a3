"""Songshelf - a local audio library manager."""

__version__ = "0.1.0"
