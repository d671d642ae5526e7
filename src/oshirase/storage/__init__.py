"""Storage abstraction for OCR results."""

from .base import OcrRepository, get_repository
from .memory import InMemoryOcrRepository

__all__ = ["OcrRepository", "InMemoryOcrRepository", "get_repository"]
