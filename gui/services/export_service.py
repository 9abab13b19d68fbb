"""Export helpers for the GUI.

Turns a snapshot into camelCase documents, the same shape the collection
holds, for the JSON download on the sidebar.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional

from milkbank.models.schemas import Bank


def export_bank(bank: Bank) -> Dict[str, Any]:
    return bank.to_document()


def export_banks(banks: Iterable[Bank], stage_filter: Optional[str] = None) -> List[Dict[str, Any]]:
    """Export banks as JSON-serializable dicts."""
    return [
        export_bank(b)
        for b in banks
        if stage_filter is None or b.stage.value == stage_filter
    ]


def export_banks_json(banks: Iterable[Bank]) -> str:
    return json.dumps(export_banks(banks), indent=2, ensure_ascii=False)
