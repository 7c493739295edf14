from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import requests

from .config import Config
from .errors import (
    ApiError,
    IncidentNotFound,
    MalformedResponse,
    NetworkError,
    QueryError,
    WrongIncidentType,
)
from .models import PERFORMANCE_KIND, Breakdown, Incident, OtherIncident, PerformanceIncident, Sample

logger = logging.getLogger(__name__)

SAMPLE_LIMIT = 10

INCIDENT_QUERY = """
query GetIncident($appId: String!, $incidentNumber: Int!) {
  app(id: $appId) {
    incident(incidentNumber: $incidentNumber) {
      __typename

      ... on PerformanceIncident {
        id
        actionNames
        description
        digests
        severity
        state
        totalDuration

        samples(limit: %d) {
          duration
          action
          time
          groupDurations {
            key
            value
          }
          groupAllocations {
            key
            value
          }
          hasNPlusOne
          params
          overview {
            key
            value
          }
          queueDuration
          sessionData
        }
      }

      ... on ExceptionIncident {
        id
      }
    }
  }
}
""" % SAMPLE_LIMIT


def _safe_float(x: Any) -> Optional[float]:
    try:
        if x is None or isinstance(x, bool):
            return None
        return float(x)
    except (TypeError, ValueError):
        return None


def _str_tuple(xs: Any) -> Tuple[str, ...]:
    if not isinstance(xs, list):
        return ()
    return tuple(str(x) for x in xs if x is not None)


def _breakdown(items: Any) -> Breakdown:
    out: List[Tuple[str, float]] = []
    for item in items or []:
        if not isinstance(item, dict):
            continue
        key = item.get("key")
        value = _safe_float(item.get("value"))
        if key is None or value is None:
            continue
        out.append((str(key), value))
    return tuple(out)


def _pairs(items: Any) -> Tuple[Tuple[str, Any], ...]:
    out: List[Tuple[str, Any]] = []
    for item in items or []:
        if isinstance(item, dict) and item.get("key") is not None:
            out.append((str(item["key"]), item.get("value")))
    return tuple(out)


def decode_sample(raw: Dict[str, Any]) -> Sample:
    action = raw.get("action")
    return Sample(
        time=raw.get("time"),
        duration=_safe_float(raw.get("duration")),
        action=str(action) if action else None,
        queue_duration=_safe_float(raw.get("queueDuration")),
        group_durations=_breakdown(raw.get("groupDurations")),
        group_allocations=_breakdown(raw.get("groupAllocations")),
        has_n_plus_one=bool(raw.get("hasNPlusOne")),
        overview=_pairs(raw.get("overview")),
        params=raw.get("params"),
        session_data=raw.get("sessionData"),
    )


def decode_incident(raw: Dict[str, Any]) -> Incident:
    kind = raw.get("__typename")
    if kind != PERFORMANCE_KIND:
        return OtherIncident(id=raw.get("id"), kind=str(kind) if kind else "unknown")
    samples = raw.get("samples") or []
    return PerformanceIncident(
        id=str(raw.get("id") or ""),
        action_names=_str_tuple(raw.get("actionNames")),
        description=raw.get("description") or None,
        digests=_str_tuple(raw.get("digests")),
        severity=raw.get("severity"),
        state=raw.get("state"),
        total_duration=_safe_float(raw.get("totalDuration")),
        samples=tuple(decode_sample(s) for s in samples if isinstance(s, dict)),
    )


def _error_messages(errors: List[Any]) -> List[str]:
    msgs: List[str] = []
    for e in errors:
        if isinstance(e, dict) and e.get("message"):
            msgs.append(str(e["message"]))
        else:
            msgs.append(json.dumps(e))
    return msgs


def extract_incident(resp: Dict[str, Any]) -> PerformanceIncident:
    errors = resp.get("errors")
    if errors:
        raise QueryError(_error_messages(errors if isinstance(errors, list) else [errors]))

    data = resp.get("data")
    app = data.get("app") if isinstance(data, dict) else None
    if not isinstance(app, dict):
        raise IncidentNotFound("No app data returned from AppSignal")
    raw = app.get("incident")
    if not isinstance(raw, dict):
        raise IncidentNotFound("Incident not found")

    incident = decode_incident(raw)
    if not isinstance(incident, PerformanceIncident):
        raise WrongIncidentType(incident.kind)
    return incident


@dataclass
class AppSignalClient:
    cfg: Config
    session: requests.Session = field(default_factory=requests.Session)

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _request(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        logger.debug("GraphQL query: %s", query)
        logger.debug("GraphQL variables: %s", variables)
        try:
            resp = self.session.request(
                method="POST",
                url=self.cfg.appsignal_endpoint,
                params={"token": self.cfg.appsignal_api_key},
                data=json.dumps({"query": query, "variables": variables}),
                headers=self._headers(),
                timeout=self.cfg.timeout_seconds,
            )
        except requests.RequestException as e:
            raise NetworkError(f"Request failed: {e}") from e

        logger.debug("GraphQL response status=%s body=%s", resp.status_code, resp.text)
        if resp.status_code != 200:
            raise ApiError(resp.status_code, resp.text)
        try:
            parsed = resp.json()
        except ValueError as e:
            raise MalformedResponse(f"Failed to parse JSON response: {e}") from e
        if not isinstance(parsed, dict):
            raise MalformedResponse(f"Unexpected response shape: {type(parsed).__name__}")
        return parsed

    def fetch_incident(self, app_id: str, incident_number: int) -> PerformanceIncident:
        resp = self._request(INCIDENT_QUERY, {"appId": app_id, "incidentNumber": int(incident_number)})
        return extract_incident(resp)
