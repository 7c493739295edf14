from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..models import Breakdown, Sample


def median(values: Sequence[float]) -> Optional[float]:
    if not values:
        return None
    xs = sorted(values)
    mid = len(xs) // 2
    if len(xs) % 2 == 0:
        return (xs[mid - 1] + xs[mid]) / 2
    return xs[mid]


@dataclass(frozen=True)
class DurationStats:
    minimum: float
    maximum: float
    mean: float
    median: float
    count: int


def duration_stats(samples: Iterable[Sample]) -> Optional[DurationStats]:
    durs = [s.duration for s in samples if s.duration is not None]
    if not durs:
        return None
    return DurationStats(
        minimum=min(durs),
        maximum=max(durs),
        mean=sum(durs) / float(len(durs)),
        median=median(durs),
        count=len(durs),
    )


@dataclass(frozen=True)
class BreakdownRow:
    key: str
    value: float
    percentage: Optional[float] = None


def time_breakdown(group_durations: Breakdown) -> List[BreakdownRow]:
    # denominator is the category sum, not the sample's own duration
    total = sum(v for _, v in group_durations)
    rows = [
        BreakdownRow(key=k, value=v, percentage=(v / total) * 100.0 if total > 0 else 0.0)
        for k, v in group_durations
    ]
    rows.sort(key=lambda r: r.value, reverse=True)
    return rows


def memory_breakdown(group_allocations: Breakdown) -> List[BreakdownRow]:
    rows = [BreakdownRow(key=k, value=v) for k, v in group_allocations]
    rows.sort(key=lambda r: r.value, reverse=True)
    return rows


def n_plus_one_positions(samples: Sequence[Sample]) -> List[Tuple[int, Sample]]:
    """1-based positions (original order) of samples flagged with an N+1 pattern."""
    return [(i, s) for i, s in enumerate(samples, start=1) if s.has_n_plus_one]


@dataclass(frozen=True)
class AllocationSummary:
    category: str
    mean: float
    sample_count: int


def aggregate_allocations(samples: Iterable[Sample]) -> List[AllocationSummary]:
    by_key: Dict[str, List[float]] = {}
    for s in samples:
        for k, v in s.group_allocations:
            by_key.setdefault(k, []).append(v)

    out = [
        AllocationSummary(category=k, mean=sum(vs) / float(len(vs)), sample_count=len(vs))
        for k, vs in by_key.items()
    ]
    out.sort(key=lambda a: a.mean, reverse=True)
    return out
