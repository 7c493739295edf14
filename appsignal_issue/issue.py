from __future__ import annotations

from typing import List

from .models import PerformanceIncident
from .render.format import format_duration

PERFORMANCE_LABEL = "performance"
SOURCE_LABEL = "appsignal"
N_PLUS_ONE_LABEL = "n+1-query"

SEVERITY_LABELS = {
    "critical": "critical",
    "warning": "high-priority",
}


def issue_title(incident: PerformanceIncident) -> str:
    action = incident.primary_action or "Unknown"
    return f"[Performance] {action} - Slow response time ({format_duration(incident.total_duration)})"


def issue_labels(incident: PerformanceIncident) -> List[str]:
    labels = [PERFORMANCE_LABEL]
    sev = SEVERITY_LABELS.get(incident.severity or "")
    if sev:
        labels.append(sev)
    if any(s.has_n_plus_one for s in incident.samples):
        labels.append(N_PLUS_ONE_LABEL)
    labels.append(SOURCE_LABEL)
    return labels
