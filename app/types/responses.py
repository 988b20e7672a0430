from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ToolInfo(BaseModel):
    name: str = Field(description="Action name the model calls")
    description: str = Field(description="What the action does")
    input_schema: Dict[str, Any] = Field(description="JSON schema of the action arguments")
    network_id: Optional[str] = Field(default=None, description="Network the action is bound to, if any")


class ToolCatalogResponse(BaseModel):
    network_id: str = Field(description="Active network")
    agent_address: str = Field(description="Address of the agent wallet")
    tools: List[ToolInfo] = Field(default_factory=list, description="Actions available to the model")
