"""
FastAPI backend: tool catalogue, tool invocation, health checks.
Tool faults come back as 200 with an error envelope so orchestrators can branch on the error field.
Logs are structured (request_id, tool, duration); no secrets.
"""
import logging
import os
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from tools.base import ToolRequest
from tools.registry import ToolRegistry, build_registry

log = logging.getLogger(__name__)
logging.basicConfig(level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO))

logging.getLogger("httpx").setLevel(logging.WARNING)

# Singleton registry for the app
_registry: ToolRegistry | None = None


def get_registry() -> ToolRegistry:
    global _registry
    if _registry is None:
        _registry = build_registry()
    return _registry


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the tool registry on startup."""
    get_registry()
    yield


app = FastAPI(title="AgentToolbox", lifespan=lifespan)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


class InvokeRequest(BaseModel):
    parameters: dict[str, Any] = Field(default_factory=dict, description="Named tool parameters")


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    rid = request.headers.get("x-request-id") or str(uuid.uuid4())
    request.state.request_id = rid
    response = await call_next(request)
    response.headers["x-request-id"] = rid
    return response


@app.get("/tools")
def list_tools():
    """Tool catalogue with JSON schemas for parameters."""
    return {"tools": get_registry().describe()}


@app.post("/tools/{tool_name}")
def invoke_tool(tool_name: str, req: InvokeRequest, request: Request):
    """Invoke one tool. Runs in the threadpool; each call is independent."""
    request_id = getattr(request.state, "request_id", str(uuid.uuid4()))
    registry = get_registry()
    if registry.get(tool_name) is None:
        raise HTTPException(status_code=404, detail=f"Unknown tool: {tool_name}")
    start = time.perf_counter()
    log.info("tool_start", extra={"request_id": request_id, "tool": tool_name})
    result = registry.invoke(ToolRequest(tool_name=tool_name, parameters=req.parameters))
    duration = time.perf_counter() - start
    if result.is_ok:
        log.info("tool_done", extra={"request_id": request_id, "tool": tool_name, "duration_sec": round(duration, 3)})
    else:
        log.info(
            "tool_error",
            extra={
                "request_id": request_id,
                "tool": tool_name,
                "kind": result.error_kind.value,
                "duration_sec": round(duration, 3),
            },
        )
    return {"tool": tool_name, **result.to_dict()}


@app.get("/health")
async def health():
    """Basic health check."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    from app.config import get_settings

    settings = get_settings()
    uvicorn.run("app.main:app", host=settings.api_host, port=settings.api_port)
