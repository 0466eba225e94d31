"""
Insight rendering

Turns model output into the HTML fragment shown in the dashboard's insight
panel. The panel keeps the last good insight when a later request fails.
"""

import html
import re
from dataclasses import dataclass
from typing import Optional

from aqvision_client.prompts import InsightType


LINE_BREAK = re.compile(r"\r?\n")
LEADING_BULLET = re.compile(r"^\s*[*-]\s+")
BULLET = "• "


def format_insight_text(text: str) -> str:
    """Escape, turn newlines into <br> and leading ``*``/``-`` markers into bullets"""
    lines = [LEADING_BULLET.sub(BULLET, line) for line in LINE_BREAK.split(html.escape(text))]
    return "<br>".join(lines)


def render_insight(insight_type: InsightType, text: str) -> str:
    return (
        '<div><h4 class="text-lg font-semibold text-slate-800 mb-2">'
        f"AI Insight: {html.escape(insight_type.heading)}</h4>"
        f'<div class="prose prose-sm max-w-none text-slate-700">{format_insight_text(text)}</div></div>'
    )


def render_error(message: str) -> str:
    return f'<div class="text-red-500">Error generating AI insight: {html.escape(message)}</div>'


@dataclass
class InsightPanel:
    """In-memory display region for one client"""
    content: str = ""
    error: Optional[str] = None
    loading: bool = False

    def show_loading(self):
        self.loading = True

    def show_insight(self, insight_type: InsightType, text: str):
        self.content = render_insight(insight_type, text)
        self.error = None
        self.loading = False

    def show_error(self, message: str):
        self.error = render_error(message)
        self.loading = False

    @property
    def html(self) -> str:
        """What the panel currently displays"""
        return self.error or self.content
