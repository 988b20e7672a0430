from fastapi import APIRouter
from typing import Dict, Any

from ..config import settings
from ..core.actions.toolkit import get_toolkit

router = APIRouter()


async def _wallet_status() -> Dict[str, Any]:
    try:
        toolkit = get_toolkit()
    except ValueError as e:
        return {"status": "unavailable", "reason": str(e)}
    return await toolkit.wallet.health_check()


def _llm_status() -> Dict[str, Any]:
    if not settings.has_llm_key:
        return {"status": "unavailable", "reason": f"No API key for {settings.llm_provider}"}
    return {"status": "healthy", "provider": settings.llm_provider, "model": settings.llm_model}


@router.get("/healthz")
async def health_check() -> Dict[str, Any]:
    """Health check endpoint reporting RPC node and LLM readiness"""

    provider_status = {
        "rpc": await _wallet_status(),
        "llm": _llm_status(),
    }

    all_healthy = all(status["status"] == "healthy" for status in provider_status.values())

    return {
        "status": "healthy" if all_healthy else "degraded",
        "network_id": settings.network_id,
        "providers": provider_status,
    }
