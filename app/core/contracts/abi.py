"""
ABI helpers for turning model-supplied string arguments into call data.

The model sends every argument as a string. Values are converted only as far
as the ABI encoder needs: integers are parsed, booleans and addresses are
validated, byte strings are decoded from hex, arrays and tuples are read from
JSON. Strings pass through unchanged.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError
from eth_utils import is_address, to_bytes, to_checksum_address
from eth_utils.abi import collapse_if_tuple, function_abi_to_4byte_selector

from ..actions.errors import ToolError, ToolErrorKind

ERC20_BALANCE_OF_ABI: List[Dict[str, Any]] = [
    {
        "type": "function",
        "name": "balanceOf",
        "stateMutability": "view",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    }
]


def find_function(abi: Sequence[Dict[str, Any]], function_name: str, arg_count: int) -> Dict[str, Any]:
    """Pick the ABI entry for ``function_name`` taking ``arg_count`` inputs."""
    candidates = [
        entry for entry in abi
        if entry.get("type") == "function" and entry.get("name") == function_name
    ]
    if not candidates:
        raise ToolError(ToolErrorKind.ENCODING_FAILURE, f"Function {function_name} not found in ABI")

    for entry in candidates:
        if len(entry.get("inputs", [])) == arg_count:
            return entry

    expected = " or ".join(str(n) for n in sorted({len(e.get("inputs", [])) for e in candidates}))
    raise ToolError(
        ToolErrorKind.ENCODING_FAILURE,
        f"Function {function_name} expects {expected} argument(s), got {arg_count}",
    )


def _load_json(value: Any) -> Any:
    if isinstance(value, str):
        return json.loads(value)
    return value


def _parse_int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("expected an integer, got a boolean")
    if isinstance(value, int):
        return value
    raw = str(value).strip()
    if raw.lower().startswith(("0x", "-0x")):
        return int(raw, 16)
    return int(raw, 10)


def parse_wei(value: Any) -> int:
    """Parse a wei amount written in decimal or ``0x`` hex."""
    try:
        return _parse_int(value)
    except (TypeError, ValueError) as exc:
        raise ToolError(
            ToolErrorKind.ENCODING_FAILURE,
            f"Invalid value {value!r}: expected an integer amount in wei",
        ) from exc


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raw = str(value).strip().lower()
    if raw in ("true", "1"):
        return True
    if raw in ("false", "0"):
        return False
    raise ValueError(f"expected true or false, got {value!r}")


def _coerce(param: Dict[str, Any], value: Any) -> Any:
    abi_type: str = param["type"]

    if abi_type.endswith("]"):
        items = _load_json(value)
        if not isinstance(items, list):
            raise ValueError(f"expected a JSON array for {abi_type}")
        element = {**param, "type": abi_type[: abi_type.rindex("[")]}
        return [_coerce(element, item) for item in items]

    if abi_type == "tuple":
        components = param.get("components", [])
        items = _load_json(value)
        if isinstance(items, dict):
            items = [items[c["name"]] for c in components]
        if not isinstance(items, list) or len(items) != len(components):
            raise ValueError(f"expected {len(components)} tuple components")
        return tuple(_coerce(c, item) for c, item in zip(components, items))

    if abi_type.startswith(("uint", "int")):
        return _parse_int(value)
    if abi_type == "bool":
        return _parse_bool(value)
    if abi_type == "address":
        if not isinstance(value, str) or not is_address(value):
            raise ValueError(f"{value!r} is not a valid address")
        return to_checksum_address(value)
    if abi_type.startswith("bytes"):
        if isinstance(value, (bytes, bytearray)):
            return bytes(value)
        return to_bytes(hexstr=value)
    return value


def coerce_arguments(fn_abi: Dict[str, Any], args: Sequence[Any]) -> List[Any]:
    inputs = fn_abi.get("inputs", [])
    coerced = []
    for index, (param, value) in enumerate(zip(inputs, args)):
        try:
            coerced.append(_coerce(param, value))
        except (ValueError, TypeError, KeyError) as exc:
            label = param.get("name") or f"#{index}"
            raise ToolError(
                ToolErrorKind.ENCODING_FAILURE,
                f"Invalid value for argument {label} ({param['type']}): {exc}",
            ) from exc
    return coerced


def encode_function_call(fn_abi: Dict[str, Any], args: Sequence[Any]) -> str:
    """Return ``0x``-prefixed call data for ``fn_abi`` applied to ``args``."""
    values = coerce_arguments(fn_abi, args)
    types = [collapse_if_tuple(param) for param in fn_abi.get("inputs", [])]
    try:
        encoded = encode(types, values)
    except (EncodingError, OverflowError, TypeError, ValueError) as exc:
        raise ToolError(
            ToolErrorKind.ENCODING_FAILURE,
            f"Could not encode arguments for {fn_abi.get('name')}: {exc}",
        ) from exc
    return "0x" + (function_abi_to_4byte_selector(fn_abi) + encoded).hex()


def to_json_safe(value: Any) -> Any:
    """Make decoded ABI values JSON friendly; integers become decimal strings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, (list, tuple)):
        return [to_json_safe(item) for item in value]
    return value


def decode_function_result(fn_abi: Dict[str, Any], data: bytes) -> Any:
    outputs = fn_abi.get("outputs", [])
    if not outputs:
        return []
    types = [collapse_if_tuple(param) for param in outputs]
    try:
        values = decode(types, data)
    except DecodingError as exc:
        raise ToolError(
            ToolErrorKind.ENCODING_FAILURE,
            f"Could not decode result of {fn_abi.get('name')}: {exc}",
        ) from exc
    normalized = [to_json_safe(value) for value in values]
    return normalized[0] if len(normalized) == 1 else normalized
