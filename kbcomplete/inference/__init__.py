from .overlap import overlaps, OVERLAP_MEASURES
from .confluence import critical_pairs, is_confluent

__all__ = [
    "overlaps", "OVERLAP_MEASURES",
    "critical_pairs", "is_confluent",
]
