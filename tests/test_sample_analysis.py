from appsignal_issue.analysis.samples import (
    aggregate_allocations,
    duration_stats,
    median,
    memory_breakdown,
    n_plus_one_positions,
    time_breakdown,
)
from appsignal_issue.models import Sample


def test_median_even_and_odd():
    assert median([40, 10, 30, 20]) == 25
    assert median([30, 10, 20]) == 20
    assert median([]) is None


def test_duration_stats_empty_is_none():
    assert duration_stats([]) is None
    assert duration_stats([Sample(duration=None)]) is None


def test_duration_stats_basic():
    stats = duration_stats([Sample(duration=d) for d in (10, 20, 30, 40)])
    assert stats.minimum == 10
    assert stats.maximum == 40
    assert stats.mean == 25
    assert stats.median == 25
    assert stats.count == 4


def test_time_breakdown_percentages_use_category_sum():
    rows = time_breakdown((("view", 100.0), ("db", 300.0)))
    assert [r.key for r in rows] == ["db", "view"]
    assert [round(r.percentage, 1) for r in rows] == [75.0, 25.0]
    assert sum(r.percentage for r in rows) == 100.0


def test_time_breakdown_zero_total():
    rows = time_breakdown((("view", 0.0),))
    assert rows[0].percentage == 0.0


def test_memory_breakdown_sorted_descending():
    rows = memory_breakdown((("a", 1.0), ("b", 3.0), ("c", 2.0)))
    assert [r.key for r in rows] == ["b", "c", "a"]


def test_n_plus_one_positions_keep_original_order():
    samples = [Sample(duration=300), Sample(duration=100, has_n_plus_one=True), Sample(duration=200)]
    flagged = n_plus_one_positions(samples)
    assert [pos for pos, _ in flagged] == [2]
    assert flagged[0][1].duration == 100


def test_aggregate_allocations_mean_per_reporting_sample():
    samples = [
        Sample(group_allocations=(("view", 2048.0), ("db", 100.0))),
        Sample(group_allocations=(("view", 4096.0),)),
        Sample(),
    ]
    out = aggregate_allocations(samples)
    assert [(a.category, a.mean, a.sample_count) for a in out] == [("view", 3072.0, 2), ("db", 100.0, 1)]
    assert aggregate_allocations([Sample(), Sample()]) == []
