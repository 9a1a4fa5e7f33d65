"""
Duplicate Token Grouping

Two layers, run per token kind:
- Layer 1: Exact duplicates (same name declared in 2+ files)
- Layer 2: Near duplicates (distinct names within an edit-distance
  threshold, clustered transitively)

Every group gets a canonical file from the directory-priority ranking.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Dict, List

from ..config import PipelineConfig
from ..constants import AnalysisDefaults
from ..models import Baseline, DuplicateGroup, GROUPED_KINDS, MatchType, TokenKind
from .canonical import pick_canonical
from .config import AnalyzerConfig
from .edit_distance import within_distance

DEBUG = PipelineConfig.DEBUG


@dataclass
class KindAnalysis:
    """Groups found for one token kind."""
    kind: TokenKind
    exact: List[DuplicateGroup] = field(default_factory=list)
    near: List[DuplicateGroup] = field(default_factory=list)


@dataclass
class AnalysisResult:
    """Groups for every analyzed kind, in report order."""
    kinds: List[KindAnalysis] = field(default_factory=list)

    def all_groups(self) -> List[DuplicateGroup]:
        groups = []
        for analysis in self.kinds:
            groups.extend(analysis.exact)
            groups.extend(analysis.near)
        return groups

    def counts(self) -> Dict[str, Dict[str, int]]:
        return {
            a.kind.baseline_key: {'exact': len(a.exact), 'near': len(a.near)}
            for a in self.kinds
        }


def find_exact_duplicates(
    index: Dict[str, List[str]],
    kind: TokenKind,
    config: AnalyzerConfig,
) -> List[DuplicateGroup]:
    """
    Layer 1: names declared in more than one file.

    Args:
        index: name -> declaring files, from Baseline.invert()
        kind: Kind of every name in index
        config: Supplies the directory priority for canonical picks
    """
    groups = []
    for name in sorted(index):
        files = sorted(set(index[name]))
        if len(files) < AnalysisDefaults.MIN_GROUP_FILES:
            continue
        groups.append(DuplicateGroup(
            kind=kind,
            match_type=MatchType.EXACT,
            names=[name],
            files=files,
            canonical=pick_canonical(files, config.directory_priority),
        ))
    return groups


def cluster_near_duplicates(names: List[str], threshold: int) -> List[List[str]]:
    """
    Layer 2: cluster distinct names within threshold edit distance.

    Names are visited in sorted order. Each name not yet placed seeds a
    cluster, which then absorbs every unplaced name within threshold of
    any member, repeating until nothing more joins. A placed name never
    seeds or joins another cluster, so the result depends on visiting
    order and is not a full pairwise closure. Singletons are dropped.
    """
    ordered = sorted(set(names))
    visited: set[str] = set()
    clusters: List[List[str]] = []

    for seed in ordered:
        if seed in visited:
            continue
        visited.add(seed)
        cluster = [seed]
        frontier = [seed]
        while frontier:
            member = frontier.pop(0)
            for candidate in ordered:
                if candidate in visited:
                    continue
                if within_distance(member, candidate, threshold):
                    visited.add(candidate)
                    cluster.append(candidate)
                    frontier.append(candidate)
        if len(cluster) >= AnalysisDefaults.MIN_CLUSTER_SIZE:
            clusters.append(sorted(cluster))

    return clusters


def find_near_duplicates(
    index: Dict[str, List[str]],
    kind: TokenKind,
    config: AnalyzerConfig,
) -> List[DuplicateGroup]:
    """Near-duplicate groups for one kind, with the union of member files."""
    groups = []
    for cluster in cluster_near_duplicates(list(index), config.threshold):
        files = sorted({f for name in cluster for f in index[name]})
        if len(files) < AnalysisDefaults.MIN_GROUP_FILES:
            if DEBUG:
                print(f"DEBUG: near-duplicate cluster confined to {files}: {cluster}", file=sys.stderr)
            continue
        groups.append(DuplicateGroup(
            kind=kind,
            match_type=MatchType.NEAR,
            names=cluster,
            files=files,
            canonical=pick_canonical(files, config.directory_priority),
        ))
    return groups


class DuplicateAnalyzer:
    """Finds exact and near-duplicate tokens in a baseline."""

    def __init__(self, config: AnalyzerConfig | None = None) -> None:
        self.config = config or AnalyzerConfig()

    def analyze_kind(self, baseline: Baseline, kind: TokenKind) -> KindAnalysis:
        index = baseline.invert(kind)
        analysis = KindAnalysis(
            kind=kind,
            exact=find_exact_duplicates(index, kind, self.config),
            near=find_near_duplicates(index, kind, self.config),
        )
        if DEBUG:
            print(
                f"DEBUG: {kind.baseline_key}: {len(index)} names, "
                f"{len(analysis.exact)} exact, {len(analysis.near)} near",
                file=sys.stderr,
            )
        return analysis

    def analyze(self, baseline: Baseline) -> AnalysisResult:
        """Run both layers for every grouped kind; no files are touched."""
        return AnalysisResult(kinds=[self.analyze_kind(baseline, kind) for kind in GROUPED_KINDS])
