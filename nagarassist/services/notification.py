from __future__ import annotations
from typing import Optional
from urllib.parse import quote

from .complaint import Complaint

DEFAULT_MESSAGE = "Hello Nagar Palika, I want to connect regarding municipal services."


def compose_handoff_message(complaint: Optional[Complaint]) -> str:
    """Plain-text message for the WhatsApp support channel."""
    if complaint is None:
        return DEFAULT_MESSAGE
    lines = [
        "Hello Nagar Palika,",
        "",
        "Complaint Done!",
        "",
        "Complaint Details:",
        f"🆔 ID: {complaint.id}",
        f"📝 Category: {complaint.category}",
        f"📍 Location: {complaint.location}",
        f"📋 Description: {complaint.description}",
        f"📊 Status: {complaint.status.value.upper()}",
        f"📅 Date: {complaint.timestamp.strftime('%d/%m/%Y')}",
    ]
    fb = complaint.resolution_feedback
    if fb is not None:
        verdict = "resolved" if fb.is_resolved else "NOT resolved"
        lines.append(f"💬 Citizen feedback ({fb.feedback_date.strftime('%d/%m/%Y')}): problem {verdict}")
        if fb.user_message:
            lines.append(f'   "{fb.user_message}"')
    lines += ["", "Please provide updates on this complaint. Thank you!"]
    return "\n".join(lines)


def build_handoff_url(phone_number: str, complaint: Optional[Complaint]) -> str:
    return f"https://wa.me/{phone_number}?text={quote(compose_handoff_message(complaint), safe='')}"
