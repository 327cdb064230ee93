"""Bot reply texts."""
from __future__ import annotations
from typing import List, Optional

from .complaint import CATEGORY_INFO, Complaint, IssueCategory


def welcome(name: Optional[str] = None) -> str:
    greeting = f"👋 Welcome to Nagar Palika AI Assistant, {name}!" if name else "👋 Welcome to Nagar Palika AI Assistant!"
    return (
        f"{greeting}\n\n"
        "I'm here to help you with municipal services and report issues. You can:\n\n"
        "🔹 Report new complaints\n"
        "🔹 Check complaint status\n"
        "🔹 Confirm whether a resolved complaint was really fixed\n"
        "🔹 Share feedback about our services\n\n"
        "To get started, select an issue category from the quick actions below, "
        "or type \"help\" for more options."
    )


def location_request(category: IssueCategory) -> str:
    info = CATEGORY_INFO[category]
    return (
        f"{info['emoji']} **{info['name']} Selected**\n\n"
        "Great! I'll help you report this issue. Let's start with some basic information.\n\n"
        "📍 **Step 1: Location Details**\n\n"
        "Please provide the exact location where the issue is occurring:\n\n"
        "• Street name and number\n"
        "• Landmark or nearby reference\n"
        "• Area/locality name\n\n"
        f"💡 **Examples for {info['name'].lower()}:** {info['examples']}\n\n"
        "Please type your location details:"
    )


def description_request(category: IssueCategory, location: str) -> str:
    return (
        f"📍 Location recorded: {location}\n\n"
        f"{category.emoji} Now, please describe your {category.value} issue in detail.\n\n"
        "📸 You can also attach images to help us understand the problem better.\n\n"
        "💡 Tip: Be specific about the problem, when it started, and how it affects you."
    )


def _shorten(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def complaint_registered(complaint: Complaint, category: IssueCategory) -> str:
    images = f"📸 **Images:** {len(complaint.images)} attached\n" if complaint.images else ""
    return (
        "✅ **Complaint Successfully Registered!**\n\n"
        f"🆔 **Complaint ID:** {complaint.id}\n"
        f"{category.emoji} **Category:** {complaint.category}\n"
        f"📍 **Location:** {complaint.location}\n"
        f"📝 **Description:** {_shorten(complaint.description, 100)}\n"
        f"{images}"
        "📊 **Status:** PENDING\n\n"
        "⏰ **Expected Resolution:** 3-5 working days\n"
        "📱 **Updates:** You'll receive notifications via SMS/WhatsApp\n\n"
        "🔍 **Track Status:** Type \"status\" or open \"My Complaints\""
    )


def _summary(c: Complaint) -> str:
    return (
        f"🆔 {c.id}\n"
        f"📝 {c.category} - {_shorten(c.description, 50)}\n"
        f"📍 Location: {c.location}\n"
        f"📊 Status: {c.status.value.upper()}\n"
        f"⏰ {c.timestamp.strftime('%d/%m/%Y')}"
    )


def status_summary(complaints: List[Complaint]) -> str:
    if not complaints:
        return (
            "📋 No complaints found in our system.\n\n"
            "Would you like to report a new issue? Please select a category from the quick actions below."
        )
    body = "\n\n".join(_summary(c) for c in complaints)
    return (
        f"📋 Your Recent Complaints:\n\n{body}\n\n"
        "💬 Need help with any complaint? Just mention the complaint ID!"
    )


def single_status(complaint: Complaint) -> str:
    text = f"📋 Complaint Details:\n\n{_summary(complaint)}"
    fb = complaint.resolution_feedback
    if fb is not None:
        verdict = "Problem Resolved" if fb.is_resolved else "Problem Not Resolved"
        text += f"\n💬 Your feedback: {verdict} ({fb.feedback_date.strftime('%d/%m/%Y')})"
    return text


HELP_MENU = (
    "🔧 Here's how I can help you:\n\n"
    "📝 **Report Issues:**\n"
    "• Select category from quick actions\n"
    "• Provide location details\n"
    "• Describe the problem\n"
    "• Attach photos (optional)\n\n"
    "📊 **Check Status:**\n"
    "• Type \"status\" to see your complaints\n"
    "• Mention complaint ID for specific updates\n\n"
    "✅ **Confirm Resolution:**\n"
    "• Open \"My Complaints\" and check a resolved complaint\n\n"
    "💬 **Share Feedback:**\n"
    "• Click \"Feedback\" to rate our service\n\n"
    "📞 **Get Support:**\n"
    "• Use WhatsApp button for direct contact\n\n"
    "What would you like to do?"
)

GUIDANCE = (
    "🤔 I'd be happy to help you report an issue!\n\n"
    "To ensure I can assist you properly, please:\n\n"
    "1️⃣ Select an issue category from the quick actions below\n"
    "2️⃣ Or type \"help\" to see all available options\n"
    "3️⃣ Type \"status\" to view your complaint history\n"
    "4️⃣ Click \"Feedback\" to share your experience\n\n"
    "This helps me guide you through the proper complaint process."
)


def resolution_check(complaint: Complaint) -> str:
    return (
        f"🔍 **Resolution Check: {complaint.id}**\n\n"
        f"📝 {complaint.category} - {_shorten(complaint.description, 50)}\n"
        f"📍 Location: {complaint.location}\n\n"
        "Our team has marked this complaint as resolved. Is the problem actually fixed?\n\n"
        "Reply \"yes\" if it is resolved, or \"no\" if the problem still persists."
    )


def resolution_confirmed(complaint: Complaint) -> str:
    return (
        f"🎉 Thank you for confirming! Complaint {complaint.id} is now closed as RESOLVED.\n\n"
        "⭐ Share your experience using the Feedback button."
    )


def resolution_escalated(complaint: Complaint) -> str:
    return (
        f"😔 We're sorry the problem persists. Complaint {complaint.id} has been marked "
        "UNRESOLVED and escalated to the concerned department.\n\n"
        "📱 Use the WhatsApp button to share the complaint details with our support team."
    )


RESOLUTION_CLARIFICATION = (
    "🤔 Sorry, I couldn't tell whether the problem is fixed.\n\n"
    "Please reply \"yes\" if the issue is resolved, or \"no\" if it still persists."
)


LOCATION_MISSING = (
    "📍 I still need the location of the issue.\n\n"
    "Please type the street, landmark or area where the problem is."
)

DESCRIPTION_MISSING = (
    "📝 Please describe the issue in a few words before I register it.\n\n"
    "📸 Any photos you attached are kept with the complaint."
)
