from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from resourcetraversal.app.dependencies import get_service
from resourcetraversal.app.service import TraversalService

router = APIRouter(prefix="/api", tags=["tools"])


class ToolDescriptor(BaseModel):
    name: str
    description: str
    input_schema: dict[str, Any]


class InvokeRequest(BaseModel):
    arguments: dict[str, Any] = Field(default_factory=dict)


class InvokeResponse(BaseModel):
    text: str
    is_error: bool = False


@router.get("/tools", response_model=list[ToolDescriptor])
async def list_tools(service: TraversalService = Depends(get_service)):  # noqa: B008
    return [
        ToolDescriptor(name=tool.name, description=tool.description, input_schema=tool.input_schema)
        for tool in service.list_tools()
    ]


@router.post("/tools/{name}", response_model=InvokeResponse)
async def invoke_tool(
    name: str,
    request: InvokeRequest | None = None,
    service: TraversalService = Depends(get_service),  # noqa: B008
):
    if name not in {tool.name for tool in service.list_tools()}:
        raise HTTPException(status_code=404, detail=f"Unknown tool: {name}")
    arguments = request.arguments if request else {}
    result = await service.invoke(name, arguments)
    return InvokeResponse(text=result.text, is_error=result.is_error)
