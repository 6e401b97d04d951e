# ABOUTME: Vector similarity index contract plus an in-memory numpy implementation
# ABOUTME: Includes the hashed bag-of-words embedding used for surf condition text

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

import numpy as np

log = logging.getLogger(__name__)

DEFAULT_DIMENSIONS = 384


@dataclass
class VectorMatch:
    """A scored nearest-neighbour hit"""
    id: str
    score: float
    metadata: dict[str, Any] = field(default_factory=dict)


class VectorIndex(ABC):
    """
    Nearest-neighbour index over fixed-size vectors.

    Implementations return matches sorted by descending similarity and only
    include entries whose metadata equals every key/value in `filter`.
    """

    @abstractmethod
    def upsert(self, id: str, vector: list[float], metadata: Optional[dict] = None) -> None:
        ...

    @abstractmethod
    def query(self, vector: list[float], top_k: int = 5, filter: Optional[dict] = None) -> list[VectorMatch]:
        ...

    @abstractmethod
    def count(self) -> int:
        ...


class InMemoryVectorIndex(VectorIndex):
    """Exact cosine-similarity search over vectors held in a numpy matrix"""

    def __init__(self, dimensions: int = DEFAULT_DIMENSIONS):
        self.dimensions = dimensions
        self._ids: list[str] = []
        self._metadata: list[dict] = []
        self._vectors = np.zeros((0, dimensions), dtype=np.float64)

    def upsert(self, id: str, vector: list[float], metadata: Optional[dict] = None) -> None:
        values = self._as_vector(vector)
        metadata = dict(metadata or {})

        if id in self._ids:
            row = self._ids.index(id)
            self._vectors[row] = values
            self._metadata[row] = metadata
            return

        self._ids.append(id)
        self._metadata.append(metadata)
        self._vectors = np.vstack([self._vectors, values])

    def query(self, vector: list[float], top_k: int = 5, filter: Optional[dict] = None) -> list[VectorMatch]:
        if top_k <= 0 or not self._ids:
            return []

        candidates = [
            row for row, meta in enumerate(self._metadata)
            if not filter or all(meta.get(k) == v for k, v in filter.items())
        ]
        if not candidates:
            return []

        scores = _cosine_similarity(self._vectors[candidates], self._as_vector(vector))
        order = np.argsort(-scores, kind="stable")[:top_k]

        return [
            VectorMatch(
                id=self._ids[candidates[i]],
                score=float(scores[i]),
                metadata=dict(self._metadata[candidates[i]]),
            )
            for i in order
        ]

    def count(self) -> int:
        return len(self._ids)

    def _as_vector(self, vector) -> np.ndarray:
        values = np.asarray(vector, dtype=np.float64)
        if values.shape != (self.dimensions,):
            raise ValueError(f"Expected vector of length {self.dimensions}, got shape {values.shape}")
        return values


def _cosine_similarity(matrix: np.ndarray, vector: np.ndarray) -> np.ndarray:
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(vector)
    dots = matrix @ vector
    with np.errstate(divide="ignore", invalid="ignore"):
        scores = np.where(norms > 0, dots / norms, 0.0)
    return scores


def string_hash(text: str) -> int:
    """Non-negative 32-bit rolling hash (multiplier 31)."""
    h = 0
    for char in text:
        h = (h * 31 + ord(char)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def hash_embedding(text: str, dimensions: int = DEFAULT_DIMENSIONS) -> list[float]:
    """
    Bag-of-words embedding: each lowercased word increments a hashed bucket.

    The result is L2-normalised; empty text yields an all-zero vector.
    """
    embedding = np.zeros(dimensions, dtype=np.float64)
    for word in text.lower().split():
        embedding[string_hash(word) % dimensions] += 1

    magnitude = np.linalg.norm(embedding)
    if magnitude > 0:
        embedding /= magnitude
    return embedding.tolist()
