from fastapi import APIRouter, HTTPException

from ..core.actions.toolkit import get_toolkit
from ..types import ToolCatalogResponse, ToolInfo

router = APIRouter(prefix="/tools")


@router.get("", response_model=ToolCatalogResponse)
async def list_tools() -> ToolCatalogResponse:
    """Actions the chat model can call on the active network"""
    try:
        toolkit = get_toolkit()
    except ValueError as e:
        raise HTTPException(status_code=503, detail=str(e))

    tools = []
    for definition in toolkit.registry.get_definitions():
        action = toolkit.registry.get_action(definition.name)
        tools.append(
            ToolInfo(
                name=definition.name,
                description=definition.description,
                input_schema=definition.input_schema(),
                network_id=action.network_id if action else None,
            )
        )

    return ToolCatalogResponse(
        network_id=toolkit.network_id,
        agent_address=toolkit.agent_address,
        tools=tools,
    )
