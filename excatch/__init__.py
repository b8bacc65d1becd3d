"""Numbered exceptions with try/catch blocks, a per-thread handler stack and a termination handler."""

__version__ = "0.1.0"
__all__ = ["runtime", "blocks", "guards", "demo"]