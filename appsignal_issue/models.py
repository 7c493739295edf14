from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

PERFORMANCE_KIND = "PerformanceIncident"

# ordered (key, value) pairs, source order preserved
Breakdown = Tuple[Tuple[str, float], ...]


@dataclass(frozen=True)
class Sample:
    time: Optional[Any] = None  # ISO string or epoch millis, as returned by the API
    duration: Optional[float] = None
    action: Optional[str] = None
    queue_duration: Optional[float] = None
    group_durations: Breakdown = ()
    group_allocations: Breakdown = ()
    has_n_plus_one: bool = False
    overview: Tuple[Tuple[str, Any], ...] = ()
    params: Any = None
    session_data: Any = None


@dataclass(frozen=True)
class PerformanceIncident:
    id: str
    action_names: Tuple[str, ...] = ()
    description: Optional[str] = None
    digests: Tuple[str, ...] = ()
    severity: Optional[str] = None
    state: Optional[str] = None
    total_duration: Optional[float] = None
    samples: Tuple[Sample, ...] = ()

    kind = PERFORMANCE_KIND

    @property
    def primary_action(self) -> Optional[str]:
        return self.action_names[0] if self.action_names and self.action_names[0] else None


@dataclass(frozen=True)
class OtherIncident:
    id: Optional[str]
    kind: str


Incident = Union[PerformanceIncident, OtherIncident]


@dataclass(frozen=True)
class RepoRef:
    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class CreatedIssue:
    url: str
    number: int
