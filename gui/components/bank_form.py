"""Add/edit form for a milk bank.

The form works on a draft document (camelCase keys, as produced by
`Bank.to_document()` or `empty_add_draft()`). Widgets start from the draft;
nothing is sent anywhere until the caller gets the submitted values back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

import streamlit as st

from milkbank.dates import coerce_date
from milkbank.models.schemas import (
    BOTTLE_SIZES,
    PASTEURIZER_TYPES,
    STAGES,
    PasteurizerType,
    Stage,
    normalize_bottle_sizes,
)

from gui.theme import stage_label

FORM_IDLE = "idle"
FORM_SUBMITTED = "submitted"
FORM_CANCELLED = "cancelled"


@dataclass
class FormResult:
    action: str = FORM_IDLE
    values: Dict[str, Any] = field(default_factory=dict)


@dataclass
class FormDefaults:
    """Widget starting values derived from a draft document."""

    name: str = ""
    location: str = ""
    contact: str = ""
    email: str = ""
    phone: str = ""
    stage: str = Stage.UNKNOWN.value
    pasteurizer_type: str = PasteurizerType.UNKNOWN.value
    volume_potential: int = 0
    next_action: Optional[date] = None
    last_contact: Optional[date] = None
    bottle_sizes: List[str] = field(default_factory=list)
    notes: str = ""


def form_defaults(draft: Dict[str, Any]) -> FormDefaults:
    """Normalize a (possibly partial or legacy) draft into widget defaults."""
    try:
        volume = max(int(draft.get("volumePotential") or 0), 0)
    except (TypeError, ValueError):
        volume = 0
    return FormDefaults(
        name=draft.get("name") or "",
        location=draft.get("location") or "",
        contact=draft.get("contact") or "",
        email=draft.get("email") or "",
        phone=draft.get("phone") or "",
        stage=draft.get("stage") or Stage.UNKNOWN.value,
        pasteurizer_type=draft.get("pasteurizerType") or PasteurizerType.UNKNOWN.value,
        volume_potential=volume,
        next_action=coerce_date(draft.get("nextAction")),
        last_contact=coerce_date(draft.get("lastContact")),
        bottle_sizes=[s.value for s in normalize_bottle_sizes(draft.get("bottleSizes"))],
        notes=draft.get("notes") or "",
    )


def form_document(
    *,
    name: str,
    location: str,
    contact: str,
    email: str,
    phone: str,
    stage: str,
    pasteurizer_type: str,
    volume_potential: int,
    bottle_sizes: List[str],
    notes: str,
    next_action: Optional[date] = None,
    last_contact: Optional[date] = None,
    include_dates: bool = True,
) -> Dict[str, Any]:
    """Collect widget values into a camelCase document."""
    doc: Dict[str, Any] = {
        "name": name,
        "location": location,
        "contact": contact,
        "email": email,
        "phone": phone,
        "stage": stage,
        "pasteurizerType": pasteurizer_type,
        "volumePotential": int(volume_potential or 0),
        "bottleSizes": list(bottle_sizes),
        "notes": notes,
    }
    if include_dates:
        doc["nextAction"] = next_action.isoformat() if next_action else None
        doc["lastContact"] = last_contact.isoformat() if last_contact else None
    return doc


def render_bank_form(
    draft: Dict[str, Any],
    *,
    key: str,
    submit_label: str,
    include_dates: bool = True,
) -> FormResult:
    """Draw the form and report what the user did with it.

    The add form leaves out the date pickers.
    """
    d = form_defaults(draft)
    stage_values = [s.value for s in STAGES]
    pasteurizer_values = [p.value for p in PASTEURIZER_TYPES]

    with st.form(key=key, border=True):
        c1, c2 = st.columns(2)
        name = c1.text_input("Milk Bank Name *", value=d.name, placeholder="Milk Bank Name")
        location = c2.text_input("Location", value=d.location, placeholder="City, State")
        contact = c1.text_input("Contact Name", value=d.contact)
        email = c2.text_input("Email", value=d.email)
        phone = c1.text_input("Phone", value=d.phone)
        stage = c2.selectbox(
            "Stage",
            options=stage_values,
            index=stage_values.index(d.stage) if d.stage in stage_values else 0,
            format_func=lambda v: stage_label(Stage(v)),
        )
        pasteurizer = c1.selectbox(
            "Pasteurizer Type",
            options=pasteurizer_values,
            index=pasteurizer_values.index(d.pasteurizer_type)
            if d.pasteurizer_type in pasteurizer_values
            else 0,
        )
        volume = c2.number_input(
            "Volume Potential (bottles/month)",
            min_value=0,
            step=100,
            value=d.volume_potential,
        )
        next_action = last_contact = None
        if include_dates:
            next_action = c1.date_input("Next Action Date", value=d.next_action, format="YYYY-MM-DD")
            last_contact = c2.date_input("Last Contact Date", value=d.last_contact, format="YYYY-MM-DD")

        bottle_sizes = st.multiselect(
            "Bottle Sizes Needed",
            options=[s.value for s in BOTTLE_SIZES],
            default=d.bottle_sizes,
        )
        notes = st.text_area("Notes", value=d.notes, placeholder="Notes...", height=90)

        save_col, cancel_col = st.columns([1, 1])
        submitted = save_col.form_submit_button(submit_label, type="primary", use_container_width=True)
        cancelled = cancel_col.form_submit_button("Cancel", use_container_width=True)

    if cancelled:
        return FormResult(FORM_CANCELLED)
    if not submitted:
        return FormResult(FORM_IDLE)
    if not name.strip():
        st.warning("A milk bank name is required.")
        return FormResult(FORM_IDLE)
    return FormResult(FORM_SUBMITTED, form_document(
        name=name,
        location=location,
        contact=contact,
        email=email,
        phone=phone,
        stage=stage,
        pasteurizer_type=pasteurizer,
        volume_potential=volume,
        bottle_sizes=bottle_sizes,
        notes=notes,
        next_action=next_action,
        last_contact=last_contact,
        include_dates=include_dates,
    ))
