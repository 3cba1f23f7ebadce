"""Alert history and lifecycle endpoints.

Endpoints:
  GET  /api/alerts                   — full in-memory history
  GET  /api/alerts/active            — alerts still in ``active``
  POST /api/alerts/{id}/acknowledge  — active → acknowledged
  POST /api/alerts/{id}/resolve      — active|acknowledged → resolved
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request

from pulsewatch.alerts.store import AlertStore

alert_router = APIRouter(prefix="/alerts", tags=["alerts"])


def _store(request: Request) -> AlertStore:
    return request.app.state.monitor.store


@alert_router.get("")
def list_alerts(request: Request) -> dict[str, Any]:
    alerts = _store(request).history()
    return {"alerts": [a.to_dict() for a in alerts], "total": len(alerts)}


@alert_router.get("/active")
def active_alerts(request: Request) -> dict[str, Any]:
    alerts = _store(request).active()
    return {"alerts": [a.to_dict() for a in alerts], "total": len(alerts)}


@alert_router.post("/{alert_id}/acknowledge")
def acknowledge_alert(alert_id: str, request: Request) -> dict[str, Any]:
    store = _store(request)
    if store.get(alert_id) is None:
        raise HTTPException(status_code=404, detail=f"Alert not found: {alert_id}")
    changed = store.acknowledge(alert_id)
    return {"id": alert_id, "acknowledged": changed, "alert": store.get(alert_id).to_dict()}


@alert_router.post("/{alert_id}/resolve")
def resolve_alert(alert_id: str, request: Request) -> dict[str, Any]:
    store = _store(request)
    if store.get(alert_id) is None:
        raise HTTPException(status_code=404, detail=f"Alert not found: {alert_id}")
    changed = store.resolve(alert_id)
    return {"id": alert_id, "resolved": changed, "alert": store.get(alert_id).to_dict()}
