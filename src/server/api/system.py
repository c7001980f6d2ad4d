# fil: src/server/api/system.py
from fastapi import APIRouter, Request

from src.server.settings.config import settings

router = APIRouter(tags=["system"])


@router.get("/api/health")
def health():
    return {"ok": True, "service": settings.app_name, "environment": settings.environment}


@router.get("/__debug/routes")
def list_routes(request: Request):
    # read from the OpenAPI paths; app.routes may hold included-router wrappers
    out = []
    for path, operations in request.app.openapi().get("paths", {}).items():
        for method, op in operations.items():
            out.append({
                "path": path,
                "methods": [method.upper()],
                "name": op.get("operationId"),
                "summary": op.get("summary"),
                "tags": op.get("tags", []),
            })
    return out
