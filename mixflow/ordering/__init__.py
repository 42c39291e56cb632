"""Track ordering module"""

from mixflow.ordering.models import (
    AnalysisStatus,
    MixStatus,
    OrderingResult,
    Track,
    Transition,
    TransitionQuality,
    track_from_dict,
)
from mixflow.ordering.optimizer import find_compatible_groups, find_optimal_order
from mixflow.ordering.scoring import (
    MAX_BPM_DIFFERENCE,
    create_transition,
    is_transition_compatible,
    transition_quality,
)

__all__ = [
    "AnalysisStatus",
    "MixStatus",
    "OrderingResult",
    "Track",
    "Transition",
    "TransitionQuality",
    "track_from_dict",
    "find_compatible_groups",
    "find_optimal_order",
    "MAX_BPM_DIFFERENCE",
    "create_transition",
    "is_transition_compatible",
    "transition_quality",
]
