"""
Services — Run-level orchestration over a corpus
"""

from .corpus import Corpus, ConflictReport

__all__ = ["Corpus", "ConflictReport"]
