"""Console styles for the report, as an explicit immutable value."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from ..models import IssueCategory


def _frozen(mapping: dict) -> Mapping:
    return MappingProxyType(mapping)


@dataclass(frozen=True)
class Theme:
    """Rich style strings plus per-category icons and styles.

    An empty style string renders unstyled text.
    """

    title: str = "bold bright_yellow"
    score: str = "bold bright_cyan"
    good: str = "bright_green"
    warning: str = "bright_yellow"
    danger: str = "bright_red"
    header: str = "bold magenta"
    section: str = "bold bright_magenta"
    info: str = "blue"
    success: str = "bold green"
    detail: str = "cyan"
    metric: str = "cyan"
    file: str = "magenta"
    number: str = "bright_white"
    divider: str = "dim"
    status_marks: Mapping[str, str] = field(
        default_factory=lambda: _frozen({"good": "✓", "medium": "!", "bad": "✗"})
    )
    category_icons: Mapping[IssueCategory, str] = field(
        default_factory=lambda: _frozen(
            {
                IssueCategory.COMPLEXITY: "🔄 ",
                IssueCategory.COMMENT: "📝 ",
                IssueCategory.NAMING: "🏷️  ",
                IssueCategory.STRUCTURE: "🏗️  ",
                IssueCategory.DUPLICATION: "📋 ",
                IssueCategory.ERROR: "❌ ",
                IssueCategory.OTHER: "⚠️  ",
            }
        )
    )
    category_styles: Mapping[IssueCategory, str] = field(
        default_factory=lambda: _frozen(
            {
                IssueCategory.COMPLEXITY: "magenta",
                IssueCategory.COMMENT: "blue",
                IssueCategory.NAMING: "cyan",
                IssueCategory.STRUCTURE: "yellow",
                IssueCategory.DUPLICATION: "red",
                IssueCategory.ERROR: "bright_red",
                IssueCategory.OTHER: "bright_yellow",
            }
        )
    )

    def band_style(self, band: str) -> str:
        return {"good": self.good, "medium": self.warning}.get(band, self.danger)

    def icon(self, category: IssueCategory) -> str:
        return self.category_icons.get(category, "")

    def category_style(self, category: IssueCategory) -> str:
        return self.category_styles.get(category, "")


DEFAULT_THEME = Theme()

PLAIN_THEME = Theme(
    title="",
    score="",
    good="",
    warning="",
    danger="",
    header="",
    section="",
    info="",
    success="",
    detail="",
    metric="",
    file="",
    number="",
    divider="",
    status_marks=_frozen({"good": "+", "medium": "!", "bad": "x"}),
    category_icons=_frozen({category: "- " for category in IssueCategory}),
    category_styles=_frozen({category: "" for category in IssueCategory}),
)
