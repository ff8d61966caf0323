import json
from typing import Any, Dict, Iterable, List, Optional


def dig(value: Any, *keys: str) -> Any:
    """Follow nested dict keys, returning None as soon as one is missing."""
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
        if value is None:
            return None
    return value


def non_empty_list(value: Any) -> Optional[List[Any]]:
    if isinstance(value, list) and value:
        return value
    return None


def coerce_result(result: Any) -> Dict[str, Any]:
    """
    Turn an agent `result` into a dict. Some agents return their JSON as a
    string; anything that is not an object ends up as an empty dict.
    """
    if isinstance(result, str):
        try:
            result = json.loads(result)
        except json.JSONDecodeError:
            return {}
    return result if isinstance(result, dict) else {}


def sub_agent_results(result: Dict[str, Any]) -> Iterable[Dict[str, Any]]:
    entries = result.get("sub_agent_results")
    if not isinstance(entries, list):
        return []
    return [entry for entry in entries if isinstance(entry, dict)]


def find_sub_agent(result: Dict[str, Any], marker: str, exact_name: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    First sub-agent entry whose `agent_name` equals `exact_name` or contains
    `marker` (case-sensitive).
    """
    for entry in sub_agent_results(result):
        name = entry.get("agent_name")
        if not isinstance(name, str):
            continue
        if (exact_name is not None and name == exact_name) or marker in name:
            return entry
    return None
