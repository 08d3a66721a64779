"""
Placeholder rendering for campaign and workflow emails

Placeholders are literal {{name}} tokens. Only the known names are
replaced; anything else stays in the output as written.
"""

from typing import Mapping, Optional

CAMPAIGN_PLACEHOLDERS = ("first_name", "last_name", "email")
WORKFLOW_PLACEHOLDERS = ("first_name", "last_name", "email", "membership_type")

WORKFLOW_TEST_DEFAULTS = {
    "first_name": "John",
    "last_name": "Doe",
    "email": "test@example.com",
    "membership_type": "Adult",
}


def render_template(
    template: Optional[str],
    values: Mapping[str, Optional[str]],
    placeholders=CAMPAIGN_PLACEHOLDERS,
) -> str:
    """
    Replace every occurrence of each known placeholder.

    Missing or None values render as an empty string.
    """
    rendered = template or ""
    for name in placeholders:
        rendered = rendered.replace("{{" + name + "}}", values.get(name) or "")
    return rendered


__all__ = [
    "CAMPAIGN_PLACEHOLDERS",
    "WORKFLOW_PLACEHOLDERS",
    "WORKFLOW_TEST_DEFAULTS",
    "render_template",
]
