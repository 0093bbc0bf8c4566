"""Structural reconstruction of flat extracted text."""

from fileflow.strategies.reconstruction.classifier import classify, classify_line
from fileflow.strategies.reconstruction.reconstructor import (
    TextReconstructor,
    normalize_text,
    reconstruct,
    split_cells,
)

__all__ = [
    "classify",
    "classify_line",
    "TextReconstructor",
    "normalize_text",
    "reconstruct",
    "split_cells",
]
