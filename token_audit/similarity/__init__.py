"""
Duplicate analysis: edit distance, canonical ranking and grouping
"""

from .canonical import pick_canonical, rank_file
from .config import AnalyzerConfig
from .edit_distance import levenshtein, within_distance
from .grouping import AnalysisResult, DuplicateAnalyzer, KindAnalysis, cluster_near_duplicates

__all__ = [
    'pick_canonical',
    'rank_file',
    'AnalyzerConfig',
    'levenshtein',
    'within_distance',
    'AnalysisResult',
    'DuplicateAnalyzer',
    'KindAnalysis',
    'cluster_near_duplicates',
]
