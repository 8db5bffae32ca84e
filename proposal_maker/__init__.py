"""Proposal Maker: text-to-deck generation, design libraries and shareable proposals."""

__version__ = "0.4.0"
