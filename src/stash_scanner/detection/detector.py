"""
Duplicate Stash Detector
========================

Finds clusters of nearby containers holding suspiciously many items.

Pipeline:
    1. Drop records outside the search area (the area defaults to the
       extent of all records)
    2. Insert every record into a QuadTree rooted at the area grown by
       `radius + 1` chunks, so neighborhood windows of edge records still
       fall inside the root
    3. For each indexed record, query the tree with its footprint grown by
       `radius`, keep candidates whose footprint intersects that window,
       and sum counts per item group
    4. Flag every group whose sum is strictly greater than its threshold

Known Limitation:
    Candidate lookup goes through QuadTree.query(), a containment descent.
    Records in a sibling quadrant of the descent path are never seen, and a
    window straddling the split lines of a child that does not contain it
    ends the lookup early. A cluster split across such a boundary can be
    under-counted. This matches the index contract and is left as is.

Deduplication:
    Every member of a cluster usually sees the same neighborhood. Warnings
    are keyed by (group, member set), so such a cluster is reported once.
    Overlapping but different clusters are each reported, and a container
    may appear in several warnings.

Modes:
    - AbsoluteMode(threshold): implemented here
    - GrowthRateMode: declared, not implemented
"""

import logging
from typing import Dict, FrozenSet, List, Optional, Sequence, Set, Tuple

from stash_scanner.config import Settings
from stash_scanner.detection.groups import ItemGroupResolver
from stash_scanner.index.quadtree import DEFAULT_CAPACITY, DEFAULT_MAX_DEPTH, QuadTree
from stash_scanner.models.output import DupeWarning, MemberPosition, ScanReport
from stash_scanner.models.stash import (
    AbsoluteMode,
    Area,
    DetectionMode,
    GrowthRateMode,
    StashRecord,
)


logger = logging.getLogger(__name__)


class DuplicateStashDetector:
    """
    Threshold-based stash cluster detector.

    Attributes:
        resolver: Group key and per-group threshold lookup
        radius: Neighborhood radius in chunks
        mode: Detection mode
        capacity: QuadTree leaf capacity
        max_depth: QuadTree depth limit

    Example:
        detector = DuplicateStashDetector(resolver, radius=1, mode=AbsoluteMode(1000))
        report = detector.detect(records, Area.parse("-20,-20;20,20"))
        for warning in report.warnings:
            print(warning.describe())
    """

    def __init__(
        self,
        resolver: ItemGroupResolver,
        radius: int = 1,
        mode: Optional[DetectionMode] = None,
        capacity: int = DEFAULT_CAPACITY,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        if radius < 0:
            raise ValueError("radius must be non-negative")

        self.resolver = resolver
        self.radius = radius
        self.mode = mode if mode is not None else AbsoluteMode(resolver.default_threshold)
        self.capacity = capacity
        self.max_depth = max_depth

        logger.info(
            f"DuplicateStashDetector initialized: mode={self.mode}, radius={radius}, "
            f"capacity={capacity}, max_depth={max_depth}"
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        mode: Optional[DetectionMode] = None,
    ) -> "DuplicateStashDetector":
        search = settings.search_dupe_stashes
        return cls(
            resolver=ItemGroupResolver.from_config(search),
            radius=search.radius,
            mode=mode,
            capacity=settings.index.capacity,
            max_depth=settings.index.max_depth,
        )

    # =========================================================================
    # Index
    # =========================================================================

    def build_index(
        self,
        records: Sequence[StashRecord],
        area: Area,
    ) -> QuadTree[StashRecord]:
        """
        Index the records lying inside the area.

        Args:
            records: Records to index; they must outlive the returned tree
            area: Search area

        Returns:
            QuadTree holding references to the in-area records
        """
        area_bounds = area.to_bounds()
        index: QuadTree[StashRecord] = QuadTree(
            area_bounds.expand(self.radius + 1),
            capacity=self.capacity,
            max_depth=self.max_depth,
        )

        skipped = 0
        for record in records:
            if not record.bounds().intersects(area_bounds):
                skipped += 1
                continue
            index.insert(record)

        logger.info(
            f"Indexed {len(index)} stash records in area {area} "
            f"({skipped} outside the area)"
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Index layout:\n{index.dump()}")

        return index

    # =========================================================================
    # Detection
    # =========================================================================

    def detect(
        self,
        records: Sequence[StashRecord],
        area: Optional[Area] = None,
    ) -> ScanReport:
        """
        Run a scan over the records.

        Args:
            records: Stash records of one save
            area: Search area; defaults to the extent of the records

        Returns:
            ScanReport with one warning per flagged (cluster, group)

        Raises:
            NotImplementedError: For GrowthRateMode
        """
        if isinstance(self.mode, GrowthRateMode):
            raise NotImplementedError("Growth rate detection is not implemented")

        threshold = self.mode.threshold

        if area is None:
            area = Area.covering(record.bounds() for record in records)
        if area is None:
            logger.info("No stash records to scan")
            return ScanReport(radius=self.radius, threshold=threshold, records_scanned=0)

        index = self.build_index(records, area)
        warnings = self._scan_absolute(index, threshold)

        logger.info(f"Scan finished: {len(warnings)} warning(s) for {len(index)} records")

        return ScanReport(
            area=str(area),
            radius=self.radius,
            threshold=threshold,
            records_scanned=len(index),
            warnings=warnings,
        )

    def neighbors(
        self,
        index: QuadTree[StashRecord],
        record: StashRecord,
    ) -> List[StashRecord]:
        """Indexed records within `radius` chunks of `record`, itself included."""
        window = record.bounds().expand(self.radius)
        return [
            candidate
            for candidate in index.query(window)
            if candidate.bounds().intersects(window)
        ]

    def _scan_absolute(
        self,
        index: QuadTree[StashRecord],
        threshold: int,
    ) -> List[DupeWarning]:
        warnings: List[DupeWarning] = []
        reported: Set[Tuple[str, FrozenSet[int]]] = set()

        for record in index:
            by_group: Dict[str, List[StashRecord]] = {}
            for neighbor in self.neighbors(index, record):
                by_group.setdefault(neighbor.group_key, []).append(neighbor)

            for group_key, members in by_group.items():
                total = sum(member.count for member in members)
                group_threshold = self.resolver.threshold_for(group_key, threshold)
                if total <= group_threshold:
                    continue

                cluster_key = (group_key, frozenset(id(member) for member in members))
                if cluster_key in reported:
                    continue
                reported.add(cluster_key)

                warning = DupeWarning(
                    group_key=group_key,
                    total_count=total,
                    threshold=group_threshold,
                    member_positions=[MemberPosition.from_record(m) for m in members],
                )
                logger.warning(f"Possible dupe stash: {warning.describe()}")
                warnings.append(warning)

        return warnings
