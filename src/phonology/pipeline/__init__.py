"""
Featuralization Pipeline Package

Batch featuralization of segment inventories:
- Segment list parsing
- Per-segment featuralization with error isolation
- Ordered report of bundles, errors and diagnostics
"""

from .pipeline import FeaturalizationPipeline, featuralize_batch, parse_segment_list
from .types import SegmentOutcome, BatchReport

__all__ = [
    'FeaturalizationPipeline',
    'featuralize_batch',
    'parse_segment_list',
    'SegmentOutcome',
    'BatchReport',
]
