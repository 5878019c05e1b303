"""Speaking practice task: scorer context, worker, capture buffer, HTTP service and CLI."""
from .pipeline import PronunciationScorer, result_to_dict

__all__ = ["PronunciationScorer", "result_to_dict"]
