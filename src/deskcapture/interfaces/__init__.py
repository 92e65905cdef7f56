"""Interfaces implemented by platform backends."""

from .capture_backend import ICaptureBackend

__all__ = ["ICaptureBackend"]
