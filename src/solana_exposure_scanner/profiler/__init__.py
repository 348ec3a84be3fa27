"""Profiler module - known-entity labels for Solana addresses."""
