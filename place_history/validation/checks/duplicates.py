"""
Duplicate check: place strings that are probably misspellings of each other.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
import logging
from typing import Any, Dict, List

from rapidfuzz import process
from rapidfuzz.distance import Levenshtein
from unidecode import unidecode

from place_history.validation.base import PlaceCheck, register_check
from place_history.validation.model import DuplicateCluster, PlaceIssue, PlaceRecord, ValidationReport

logger = logging.getLogger(__name__)


def normalize_for_comparison(place: str) -> str:
    """Accent-free, case-folded, single-spaced form of a place string."""
    return ' '.join(unidecode(place).casefold().split())


class _DisjointSet:
    def __init__(self, size: int) -> None:
        self.parent = list(range(size))

    def find(self, item: int) -> int:
        while self.parent[item] != item:
            self.parent[item] = self.parent[self.parent[item]]
            item = self.parent[item]
        return item

    def union(self, a: int, b: int) -> None:
        root_a, root_b = self.find(a), self.find(b)
        if root_a != root_b:
            self.parent[max(root_a, root_b)] = min(root_a, root_b)


@register_check
@dataclass
class DuplicatesCheck(PlaceCheck):
    """
    Clusters distinct place strings whose edit distance is below max_distance.

    Strings are compared after removing accents and case, so 'Kecskemét'
    and 'kecskemet' always end up together. Each cluster is reported once
    as a 'possible_duplicate' warning naming the most frequent spelling.
    """
    check_id: str = "duplicates"
    max_distance: int = 5

    def run(self, records: List[PlaceRecord], resolver: Any, report: ValidationReport,
            check_num: int = None, total_checks: int = None) -> None:
        prefix = f"Validation ({check_num}/{total_checks}): " if check_num and total_checks else "Validation: "
        counts = Counter(r.place_str for r in records if r.place_str)
        places = sorted(counts)
        self._report_step(info=f"{prefix}Looking for duplicate places", target=len(places),
                          reset_counter=True, plus_step=0)

        for cluster in self.find_clusters(counts):
            report.duplicates.append(cluster)
            others = ', '.join(f"'{p}'" for p in cluster.places[1:])
            report.add_issue(PlaceIssue(
                issue_type='possible_duplicate',
                severity='warning',
                message=f"'{cluster.preferred}' may also be written as {others}",
                place=cluster.preferred,
            ))

    def find_clusters(self, counts: Dict[str, int]) -> List[DuplicateCluster]:
        """
        Group place strings into clusters of near-identical spellings.

        Args:
            counts: Place string -> number of occurrences.

        Returns:
            List[DuplicateCluster]: Clusters with at least two members.
        """
        places = sorted(counts)
        if self.max_distance <= 0:
            return []
        normalized = [normalize_for_comparison(p) for p in places]
        clusters = _DisjointSet(len(places))

        for idx, key in enumerate(normalized):
            if idx % 100 == 0 and self._stop_requested("Duplicate check stopped"):
                break
            candidates = normalized[idx + 1:]
            if not candidates:
                continue
            matches = process.extract(key, candidates, scorer=Levenshtein.distance,
                                      score_cutoff=self.max_distance - 1, limit=None)
            for _, _, offset in matches:
                clusters.union(idx, idx + 1 + offset)
            if idx % 100 == 0:
                self._report_step(plus_step=100 if idx else 0)

        members: Dict[int, List[str]] = {}
        for idx, place in enumerate(places):
            members.setdefault(clusters.find(idx), []).append(place)

        result = []
        for group in members.values():
            if len(group) < 2:
                continue
            group.sort(key=lambda p: (-counts[p], p))
            result.append(DuplicateCluster(places=group, counts={p: counts[p] for p in group}))
        logger.debug(f"Found {len(result)} duplicate place clusters among {len(places)} places")
        return result
