from __future__ import annotations

import logging
import os
import secrets
from datetime import date, datetime, timedelta
from typing import Any

from selvit import (
    ConfigurationError,
    StoreError,
    get_user_timezone,
    load_inputs,
    load_logs,
    log_quantity,
    logical_day_of,
    summarize_days,
    workspace_root as _workspace_root,
)
from selvit.summary import DONE_MARK, DaySummary

from fastapi import FastAPI, Depends, HTTPException, status
from fastapi import Body
from fastapi.responses import HTMLResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

logger = logging.getLogger(__name__)

MAX_REPORT_DAYS = 31


# ── HTML helpers ──────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _render_summary(summary: DaySummary) -> str:
    rows = []
    for r in summary.rows:
        if r.consumed is None:
            answer = "yes" if r.target else "no"
            rows.append(
                f'<tr><td class="muted">{r.index}</td><td></td>'
                f"<td>{_escape(r.input.name)}</td><td colspan=\"2\">{answer}</td></tr>"
            )
        else:
            mark = DONE_MARK if r.completed else ""
            rows.append(
                f'<tr><td class="muted">{r.index}</td><td>{mark}</td>'
                f"<td>{_escape(r.input.name)}</td>"
                f"<td>{r.consumed}/{r.target}</td><td>{_escape(r.unit or '')}</td></tr>"
            )
    body = "".join(rows) if rows else '<tr><td colspan="5" class="muted">(no inputs)</td></tr>'
    return f"<h2>{summary.day.isoformat()}</h2><table>{body}</table>"


# ── Auth ──────────────────────────────────────────────────────

app = FastAPI(title="Selvit UI", version="0.1.0")

security = HTTPBasic(auto_error=False)


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("SELVIT_USERNAME", "")
    expected_password = os.environ.get("SELVIT_PASSWORD", "")

    if not expected_username or not expected_password:
        return "guest"

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


def _parse_day(day: str | None) -> date:
    root = _workspace_root()
    user_tz = get_user_timezone(root)
    if not day:
        return logical_day_of(datetime.now(user_tz), user_tz)
    try:
        return date.fromisoformat(day)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid day: {day!r}")


def _summaries(days: list[date]) -> list[DaySummary]:
    root = _workspace_root()
    user_tz = get_user_timezone(root)
    now = datetime.now(user_tz).time()
    try:
        return summarize_days(load_inputs(root), days, load_logs(root), user_tz, now)
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StoreError as e:
        logger.error("Cannot load workspace: %s", e)
        raise HTTPException(status_code=500, detail=str(e))


# ── Endpoints ─────────────────────────────────────────────────

@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/", response_class=HTMLResponse)
def index(day: str | None = None, username: str = Depends(get_current_user)) -> HTMLResponse:
    summary = _summaries([_parse_day(day)])[0]
    html = f"""<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>Selvit</title>
  <style>
    body {{ font-family: system-ui, sans-serif; margin: 2rem; }}
    td {{ padding: 0.2rem 0.6rem; }}
    .muted {{ color: #888; }}
  </style>
</head>
<body>
  {_render_summary(summary)}
</body>
</html>"""
    return HTMLResponse(html)


@app.get("/api/inputs")
def api_list_inputs(username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        inputs = load_inputs(_workspace_root())
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {
        "inputs": [dict(item.to_dict(), index=idx) for idx, item in enumerate(inputs)],
    }


@app.get("/api/report")
def api_report(day: str | None = None, days: int = 1, username: str = Depends(get_current_user)) -> dict[str, Any]:
    if days < 1 or days > MAX_REPORT_DAYS:
        raise HTTPException(status_code=400, detail=f"days must be between 1 and {MAX_REPORT_DAYS}")
    start = _parse_day(day)
    span = [start + timedelta(days=i) for i in range(days)]
    return {"days": [s.to_dict() for s in _summaries(span)]}


@app.post("/api/log")
def api_log(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        index = int(payload["index"])
        quantity = int(payload["quantity"])
        hours_ago = float(payload["hours_ago"]) if payload.get("hours_ago") is not None else None
    except (KeyError, TypeError, ValueError):
        raise HTTPException(status_code=400, detail="Expected {index, quantity, hours_ago?}")
    if quantity < 0:
        raise HTTPException(status_code=400, detail="quantity must not be negative")

    try:
        entry, result = log_quantity(index, quantity, hours_ago, _workspace_root())
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"ok": True, "log": entry.to_dict(), "pushed": result.pushed}
