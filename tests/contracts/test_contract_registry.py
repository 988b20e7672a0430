"""
Tests for the deployed contract registry.
"""

import json

import pytest

from app.core.actions.errors import ToolError, ToolErrorKind
from app.core.contracts.registry import ContractRegistry


ARTIFACT = {
    31337: {
        "YourContract": {"address": "0x5FbDB2315678afecb367f032d93F642f64180aa3", "abi": [], "inheritedFunctions": {}},
        "Token": {"address": "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512", "abi": []},
    },
    "11155111": {},
}


class TestContractRegistry:

    @pytest.fixture
    def registry(self):
        return ContractRegistry(ARTIFACT)

    def test_network_ids_compare_as_strings(self, registry):
        assert registry.has_network("31337")
        assert registry.has_network(31337)
        assert not registry.has_network("1")

    def test_lookup_returns_entry(self, registry):
        entry = registry.lookup("31337", "Token")
        assert entry.address == "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512"
        assert entry.network_id == "31337"
        assert entry.contract_name == "Token"

    def test_lookup_unknown_name_lists_available(self, registry):
        with pytest.raises(ToolError) as exc_info:
            registry.lookup("31337", "Missing")
        assert exc_info.value.kind == ToolErrorKind.INVALID_CONTRACT
        assert str(exc_info.value) == "Invalid contract name. Available: YourContract, Token"

    def test_lookup_on_empty_network(self, registry):
        with pytest.raises(ToolError) as exc_info:
            registry.lookup("11155111", "YourContract")
        assert str(exc_info.value) == "Invalid contract name. Available: none"

    def test_names_are_case_sensitive(self, registry):
        with pytest.raises(ToolError):
            registry.lookup("31337", "yourcontract")

    def test_to_json_keeps_extra_keys(self, registry):
        data = json.loads(registry.to_json())
        assert data["31337"]["YourContract"]["inheritedFunctions"] == {}
        assert set(data) == {"31337", "11155111"}


class TestRegistryFile:

    def test_from_file(self, tmp_path):
        path = tmp_path / "deployed_contracts.json"
        path.write_text(json.dumps(ARTIFACT))

        registry = ContractRegistry.from_file(path)

        assert registry.contract_names("31337") == ["YourContract", "Token"]

    def test_missing_file_gives_empty_registry(self, tmp_path):
        registry = ContractRegistry.from_file(tmp_path / "nope.json")
        assert not registry.has_network("31337")
        assert registry.to_json() == "{}"

    def test_bundled_artifact_has_local_contract(self):
        from app.config import BASE_DIR

        registry = ContractRegistry.from_file(BASE_DIR / "contracts" / "deployed_contracts.json")
        assert "YourContract" in registry.contract_names("31337")
