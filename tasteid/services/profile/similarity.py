import math
from typing import Any


def jaccard_similarity(set_a: set[Any], set_b: set[Any]) -> float:
    """Calculate Jaccard similarity between two sets."""
    if not set_a or not set_b:
        return 0.0

    intersection = len(set_a & set_b)
    union = len(set_a | set_b)
    return intersection / union if union > 0 else 0.0


def cosine_similarity(vec_a: dict[str, float], vec_b: dict[str, float]) -> float:
    """
    Cosine similarity of two sparse vectors, clamped to [0, 1].

    Keys are visited in sorted order and every sum is built from commutative
    products, so swapping the arguments gives a bit-identical result.
    """
    keys = sorted(set(vec_a) | set(vec_b))
    dot = norm_a = norm_b = 0.0
    for key in keys:
        a = vec_a.get(key, 0.0)
        b = vec_b.get(key, 0.0)
        dot += a * b
        norm_a += a * a
        norm_b += b * b
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return max(0.0, min(1.0, dot / (math.sqrt(norm_a) * math.sqrt(norm_b))))
