"""FastAPI application exposing govlens tools over HTTP."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..tools import TOOL_SPECS, TOOLS_BY_NAME, GovernanceTools, ToolResponse


class ToolRequest(BaseModel):
    path: str = "."


class ToolCallResponse(BaseModel):
    operation: str
    is_error: bool
    result: Dict[str, Any]


class ToolDescription(BaseModel):
    name: str
    description: str


class LivenessResponse(BaseModel):
    status: str


def _default_tools() -> GovernanceTools:
    return GovernanceTools()


def create_app(
    tools_factory: Callable[[], GovernanceTools] = _default_tools,
) -> FastAPI:
    """Create the FastAPI application exposing govlens operations."""

    app = FastAPI(title="govlens", version="1.0.0")

    async def get_tools() -> GovernanceTools:
        # Fresh instance per request keeps invocations independent.
        return tools_factory()

    @app.get("/healthz", response_model=LivenessResponse)
    async def liveness() -> LivenessResponse:
        return LivenessResponse(status="ok")

    @app.get("/tools", response_model=List[ToolDescription])
    async def list_tools() -> List[ToolDescription]:
        return [ToolDescription(name=spec.name, description=spec.description) for spec in TOOL_SPECS]

    @app.post("/tools/{name}", response_model=ToolCallResponse)
    async def call_tool(
        name: str,
        payload: ToolRequest,
        tools: GovernanceTools = Depends(get_tools),
    ) -> Any:
        if name not in TOOLS_BY_NAME:
            return JSONResponse(status_code=404, content={"detail": f"Unknown tool: {name}"})

        def _run() -> ToolResponse:
            return tools.call(name, payload.path)

        loop = asyncio.get_running_loop()
        response = await loop.run_in_executor(None, _run)
        return ToolCallResponse(**response.to_dict())

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    uvicorn.run(create_app(), host=host, port=port)
