"""Solana Exposure Scanner - privacy exposure scoring for Solana addresses."""

__version__ = "0.1.0"
