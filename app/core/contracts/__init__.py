from .registry import ContractEntry, ContractRegistry

__all__ = ["ContractEntry", "ContractRegistry"]
