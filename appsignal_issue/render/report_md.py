from __future__ import annotations

from typing import List, Sequence

from ..analysis.samples import (
    aggregate_allocations,
    duration_stats,
    memory_breakdown,
    n_plus_one_positions,
    time_breakdown,
)
from ..models import PerformanceIncident, Sample
from .format import format_bytes, format_date, format_duration, format_severity, format_status


def _table(header: Sequence[str], rows: List[Sequence[str]]) -> List[str]:
    lines = ["| " + " | ".join(header) + " |"]
    lines.append("|" + "|".join("-" * (len(h) + 2) for h in header) + "|")
    for r in rows:
        lines.append("| " + " | ".join(r) + " |")
    return lines


def render_frontmatter(target_repo: str) -> str:
    # consumed by downstream automation; keep delimiter and key spelling stable
    return f"---\nrepository: {target_repo}\n---"


def render_header(incident: PerformanceIncident, app_id: str, incident_number: str, target_repo: str) -> str:
    action = incident.primary_action or "Unknown Action"
    lines = [
        f"# Performance Issue: {action}",
        "",
        f"**Repository:** [{target_repo}](https://github.com/{target_repo})",
        f"**Incident Number:** #{incident_number}",
        f"**AppSignal ID:** {incident.id}",
        f"**App ID:** {app_id}",
        "",
        f"**Status:** {format_status(incident.state)}",
        f"**Severity:** {format_severity(incident.severity)}",
        "",
        "## Description",
        incident.description or "No description provided",
        "",
        "---",
    ]
    return "\n".join(lines)


def render_critical_info(incident: PerformanceIncident) -> str:
    actions = ", ".join(incident.action_names) if incident.action_names else "N/A"
    lines = ["## Critical Information", ""]
    lines.extend(
        _table(
            ["Metric", "Value"],
            [
                ["**Average Duration**", format_duration(incident.total_duration)],
                ["**Affected Actions**", actions],
                ["**State**", incident.state or "N/A"],
                ["**Severity**", incident.severity or "N/A"],
            ],
        )
    )
    return "\n".join(lines)


def render_performance_metrics(samples: Sequence[Sample]) -> str:
    stats = duration_stats(samples)
    if stats is None:
        return "## Performance Metrics\n\nNo sample data available."
    lines = ["## Performance Metrics", "", f"Based on {stats.count} sample(s):", ""]
    lines.extend(
        _table(
            ["Statistic", "Duration"],
            [
                ["**Minimum**", format_duration(stats.minimum)],
                ["**Maximum**", format_duration(stats.maximum)],
                ["**Average**", format_duration(stats.mean)],
                ["**Median**", format_duration(stats.median)],
            ],
        )
    )
    return "\n".join(lines)


def _time_breakdown_md(sample: Sample) -> List[str]:
    rows = time_breakdown(sample.group_durations)
    if not rows:
        return ["No breakdown available."]
    return _table(
        ["Component", "Duration", "Percentage"],
        [[r.key, format_duration(r.value), f"{r.percentage:.1f}%"] for r in rows],
    )


def _memory_breakdown_md(sample: Sample) -> List[str]:
    rows = memory_breakdown(sample.group_allocations)
    if not rows:
        return ["No allocation data available."]
    return _table(["Component", "Allocation"], [[r.key, format_bytes(r.value)] for r in rows])


def render_samples(samples: Sequence[Sample]) -> str:
    if not samples:
        return "## Sample Analysis\n\nNo samples available."
    lines = ["## Sample Analysis", "", f"Analyzed {len(samples)} sample(s) from recent occurrences.", ""]
    for i, s in enumerate(samples, start=1):
        lines.append(f"### Sample {i}")
        lines.append(f"- **Time:** {format_date(s.time)}")
        lines.append(f"- **Duration:** {format_duration(s.duration)}")
        lines.append(f"- **Action:** {s.action or 'N/A'}")
        lines.append(f"- **Queue Duration:** {format_duration(s.queue_duration)}")
        lines.append("")
        lines.append("#### Time Breakdown")
        lines.extend(_time_breakdown_md(s))
        lines.append("")
        lines.append("#### Memory Allocation")
        lines.extend(_memory_breakdown_md(s))
        lines.append("")
        lines.append("---")
        lines.append("")
    return "\n".join(lines).rstrip("\n")


def render_n_plus_one(samples: Sequence[Sample]) -> str:
    if not samples:
        return "## N+1 Query Detection\n\nNo samples available for analysis."
    flagged = n_plus_one_positions(samples)
    lines = ["## N+1 Query Detection", ""]
    if not flagged:
        lines.append("✅ No N+1 query patterns detected in samples.")
        return "\n".join(lines)
    lines.append(f"⚠️ **N+1 query pattern detected in {len(flagged)} out of {len(samples)} samples!**")
    lines.append("")
    lines.append("### Affected Samples:")
    for pos, s in flagged:
        lines.append(f"- Sample #{pos} at {format_date(s.time)} ({format_duration(s.duration)})")
    return "\n".join(lines)


def render_resource_allocation(samples: Sequence[Sample]) -> str:
    if not samples:
        return "## Resource Allocation Analysis\n\nNo samples available."
    summary = aggregate_allocations(samples)
    if not summary:
        return "## Resource Allocation Analysis\n\nNo allocation data available."
    lines = ["## Resource Allocation Analysis", "", "Average memory allocation by category:", ""]
    lines.extend(
        _table(
            ["Category", "Average Allocation", "Samples"],
            [[a.category, format_bytes(a.mean), str(a.sample_count)] for a in summary],
        )
    )
    return "\n".join(lines)


def render_report_md(incident: PerformanceIncident, app_id: str, incident_number: str, target_repo: str) -> str:
    samples = incident.samples
    sections = [
        render_frontmatter(target_repo),
        render_header(incident, app_id, incident_number, target_repo),
        render_critical_info(incident),
        render_performance_metrics(samples),
        render_samples(samples),
        render_n_plus_one(samples),
        render_resource_allocation(samples),
    ]
    return "\n\n".join(sections) + "\n"
