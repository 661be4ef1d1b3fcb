"""Tool catalog and model listing endpoints."""

from typing import Any

from fastapi import APIRouter, HTTPException

from mcp_playground.domain.chat.model_registry import MODEL_CONFIG
from mcp_playground.mcp.catalog import AUTH_REQUIRED_SERVERS, MCP_SERVERS, get_catalog

router = APIRouter(tags=["Catalog"])


@router.get("/catalog")
async def list_catalogs() -> dict[str, Any]:
    """All selectable catalogs plus the display-only auth-required servers."""
    return {
        "servers": [server.to_dict() for server in MCP_SERVERS.values()],
        "authRequired": list(AUTH_REQUIRED_SERVERS),
    }


@router.get("/catalog/{catalog_id}")
async def get_catalog_entry(catalog_id: str) -> dict[str, Any]:
    catalog = get_catalog(catalog_id)
    if catalog is None:
        raise HTTPException(status_code=404, detail=f"Unknown catalog: {catalog_id}")
    return catalog.to_dict()


@router.get("/models")
async def list_models() -> list[dict[str, Any]]:
    """Known models and whether they may call tools."""
    return [
        {
            "id": info.id,
            "name": info.name,
            "provider": info.provider,
            "supportsTools": info.supports_tools,
        }
        for info in MODEL_CONFIG.values()
    ]
