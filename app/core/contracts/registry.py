"""Deployed contract registry keyed by network id and contract name."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping

from pydantic import BaseModel, ConfigDict

from ..actions.errors import ToolError, ToolErrorKind

logger = logging.getLogger(__name__)


class ContractEntry(BaseModel):
    """A contract deployed on one network."""

    model_config = ConfigDict(frozen=True)

    network_id: str
    contract_name: str
    address: str
    abi: List[Dict[str, Any]]


class ContractRegistry:
    """Read-only view over the deployed contracts artifact.

    The artifact maps ``networkId -> contractName -> {address, abi, ...}``.
    Network ids are compared as strings so ``31337`` and ``"31337"`` resolve
    to the same network.
    """

    def __init__(self, deployments: Mapping[str, Mapping[str, Mapping[str, Any]]]):
        self._raw: Dict[str, Dict[str, Any]] = {
            str(network_id): dict(contracts) for network_id, contracts in deployments.items()
        }
        self._entries: Dict[str, Dict[str, ContractEntry]] = {}
        for network_id, contracts in self._raw.items():
            self._entries[network_id] = {
                name: ContractEntry(
                    network_id=network_id,
                    contract_name=name,
                    address=data["address"],
                    abi=list(data.get("abi", [])),
                )
                for name, data in contracts.items()
            }

    @classmethod
    def from_file(cls, path: Path | str) -> "ContractRegistry":
        path = Path(path)
        if not path.exists():
            logger.warning("Deployed contracts artifact not found at %s; registry is empty", path)
            return cls({})
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(data)

    def has_network(self, network_id: str | int) -> bool:
        return str(network_id) in self._entries

    def contract_names(self, network_id: str | int) -> List[str]:
        return list(self._entries.get(str(network_id), {}))

    def lookup(self, network_id: str | int, contract_name: str) -> ContractEntry:
        """Resolve a contract or raise ``INVALID_CONTRACT`` listing the valid names."""
        contracts = self._entries.get(str(network_id), {})
        entry = contracts.get(contract_name)
        if entry is None:
            available = ", ".join(contracts) or "none"
            raise ToolError(
                ToolErrorKind.INVALID_CONTRACT,
                f"Invalid contract name. Available: {available}",
            )
        return entry

    def to_json(self) -> str:
        return json.dumps(self._raw, indent=2)
