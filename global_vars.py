# global_vars.py

import json
import random
import string
from typing import Any, Callable, Dict, Optional

ID_ALPHABET = string.ascii_uppercase + string.digits


def random_suffix(length: int = 6) -> str:
    return "".join(random.choices(ID_ALPHABET, k=length))


def _canonical(value: Any) -> Any:
    # 14 and 14.0 are the same number; True stays distinct from 1
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {k: _canonical(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_canonical(v) for v in value]
    return value


def fingerprint(value: Any) -> str:
    return json.dumps(_canonical(value), sort_keys=True, separators=(",", ":"))



class GlobalVars:
    """
    Interning table for style values shared by every node of one walk.

    Values are keyed by a canonical JSON fingerprint, so two structurally
    equal values always resolve to the same identifier. Not safe to share
    between concurrent walks.
    """

    def __init__(self, suffix_factory: Optional[Callable[[], str]] = None):
        self.styles: Dict[str, Any] = {}
        self._ids_by_fingerprint: Dict[str, str] = {}
        self._suffix_factory = suffix_factory or random_suffix

    def find_or_create(self, value: Any, prefix: str) -> str:
        key = fingerprint(value)
        existing = self._ids_by_fingerprint.get(key)
        if existing is not None:
            return existing

        var_id = f"{prefix}-{self._suffix_factory()}"
        while var_id in self.styles:
            var_id = f"{prefix}-{self._suffix_factory()}"

        self.styles[var_id] = value
        self._ids_by_fingerprint[key] = var_id
        return var_id

    def __len__(self) -> int:
        return len(self.styles)

    def to_dict(self) -> dict:
        return {"styles": self.styles}


def find_or_create_var(global_vars: GlobalVars, value: Any, prefix: str) -> str:
    return global_vars.find_or_create(value, prefix)
