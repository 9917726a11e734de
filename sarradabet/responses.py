"""
Response envelope helpers shared by every router.

Success: ``{"success": true, "data": ..., "message"?: ..., "meta"?: ...}``
Failure: ``{"success": false, "message": ..., "errors"?: [...],
           "requestId": ..., "timestamp": ...}``
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Query, Request
from fastapi.responses import JSONResponse

from sarradabet.core.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT, PageMeta, PageParams


def success_response(
    data: Any = None,
    message: Optional[str] = None,
    meta: Optional[PageMeta] = None,
    status_code: int = 200,
) -> JSONResponse:
    body: Dict[str, Any] = {"success": True, "data": data}
    if message:
        body["message"] = message
    if meta is not None:
        body["meta"] = meta.to_dict()
    return JSONResponse(status_code=status_code, content=body)


def error_body(
    request: Optional[Request],
    message: str,
    errors: Optional[List[Any]] = None,
    stack: Optional[str] = None,
) -> Dict[str, Any]:
    request_id = None
    if request is not None:
        request_id = request.headers.get("x-request-id")
    body: Dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    if stack:
        body["stack"] = stack
    body["requestId"] = request_id or str(uuid.uuid4())
    body["timestamp"] = datetime.now(timezone.utc).isoformat()
    return body


def error_response(
    request: Optional[Request],
    message: str,
    status_code: int,
    errors: Optional[List[Any]] = None,
    stack: Optional[str] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_body(request, message, errors=errors, stack=stack),
    )


def page_params(
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
) -> PageParams:
    """Query-string pagination shared by the list endpoints."""
    return PageParams(page=page, limit=limit, sort_by=sort_by, sort_order=sort_order)
