"""Read-only card for one milk bank."""

from __future__ import annotations

from datetime import date
from html import escape
from typing import Optional

from milkbank.dates import format_short_date, local_today
from milkbank.models.schemas import Bank, PasteurizerType

from gui.theme import DEFAULT_THEME, STAGE_STYLES, Theme


def bank_card_html(bank: Bank, today: Optional[date] = None, theme: Theme = DEFAULT_THEME) -> str:
    """Render a bank as an HTML card.

    Overdue banks use the overdue palette regardless of stage.
    """
    today = today or local_today()
    overdue = bank.is_overdue(today)
    style = STAGE_STYLES[bank.stage]
    if overdue:
        background, border = theme.overdue_background, theme.overdue_border
    else:
        background, border = style.card_background, style.card_border

    parts = [f'<div class="bank-card" style="background: {background}; border-color: {border};">']

    if bank.next_action:
        color = f" style='color: {theme.overdue_color};'" if overdue else ""
        parts.append(
            "<div class='next-action'><div class='muted'>Next Action</div>"
            f"<div{color}><b>{format_short_date(bank.next_action)}</b></div></div>"
        )

    parts.append(
        f"<div><span class='bank-name'>{escape(bank.name)}</span>"
        f"<span class='badge' style='background: white; border: 1px solid {border};'>{style.label}</span>"
    )
    if overdue:
        parts.append(
            f"<span class='badge' style='background: {theme.overdue_color}; color: white;'>⚠️ Overdue</span>"
        )
    parts.append("</div>")

    if bank.location:
        parts.append(f"<div class='muted'>{escape(bank.location)}</div>")
    if bank.contact:
        email = f" <span style='color: {theme.accent_color};'>({escape(bank.email)})</span>" if bank.email else ""
        parts.append(f"<div class='muted'>👤 {escape(bank.contact)}{email}</div>")

    chips = []
    if bank.pasteurizer_type != PasteurizerType.UNKNOWN:
        chips.append(f"🔧 {bank.pasteurizer_type.value}")
    if bank.volume_potential > 0:
        chips.append(f"📦 {bank.volume_potential:,}/mo")
    if bank.bottle_sizes:
        chips.append("🍼 " + ", ".join(size.value for size in bank.bottle_sizes))
    if bank.last_contact:
        chips.append(f"📅 Last: {format_short_date(bank.last_contact)}")
    if chips:
        parts.append("<div>" + "".join(f"<span class='chip'>{c}</span>" for c in chips) + "</div>")

    if bank.notes:
        notes = escape(bank.notes)
        if len(notes) > 240:
            notes = notes[:237] + "…"
        parts.append(f"<div class='notes muted'>{notes}</div>")

    parts.append("</div>")
    return "".join(parts)
