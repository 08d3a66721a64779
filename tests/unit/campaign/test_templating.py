"""
Unit Tests for placeholder rendering
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from microservices.campaign_service.templating import (
    CAMPAIGN_PLACEHOLDERS,
    WORKFLOW_PLACEHOLDERS,
    render_template,
)


class TestRenderTemplate:

    def test_replaces_every_occurrence(self):
        rendered = render_template(
            "{{first_name}}, {{first_name}}!",
            {"first_name": "Ann"},
        )
        assert rendered == "Ann, Ann!"

    def test_missing_and_none_values_render_empty(self):
        rendered = render_template(
            "[{{first_name}}][{{last_name}}][{{email}}]",
            {"first_name": None, "email": "ann@example.com"},
        )
        assert rendered == "[][][ann@example.com]"

    def test_unknown_placeholders_left_alone(self):
        rendered = render_template("{{first_name}} {{nickname}}", {"first_name": "Ann"})
        assert rendered == "Ann {{nickname}}"

    def test_no_whitespace_tolerance(self):
        assert render_template("{{ first_name }}", {"first_name": "Ann"}) == "{{ first_name }}"

    def test_values_are_not_html_escaped(self):
        rendered = render_template("<b>{{last_name}}</b>", {"last_name": "O'Brien & <Sons>"})
        assert rendered == "<b>O'Brien & <Sons></b>"

    def test_none_template(self):
        assert render_template(None, {"first_name": "Ann"}) == ""

    def test_membership_type_only_for_workflows(self):
        template = "{{membership_type}}"
        values = {"membership_type": "Family"}

        assert render_template(template, values, CAMPAIGN_PLACEHOLDERS) == "{{membership_type}}"
        assert render_template(template, values, WORKFLOW_PLACEHOLDERS) == "Family"
