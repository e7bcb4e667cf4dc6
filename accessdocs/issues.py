"""
Accessibility issue and report types.

Issues are advisory: they describe a defect found in generated HTML and
never block a build.
"""

import json
from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

# Longest element snippet kept on an issue
SNIPPET_LIMIT = 300


class IssueKind(Enum):
    """Category of an accessibility issue"""
    WCAG = "wcag"
    HEADING = "heading"
    CONTRAST = "contrast"
    HTML = "html"
    ARIA = "aria"
    KEYBOARD = "keyboard"
    SCREEN_READER = "screen-reader"
    ERROR = "error"


@dataclass
class AccessibilityIssue:
    """A single accessibility issue found in a document"""
    type: IssueKind
    message: str
    element: Optional[str] = None
    # WCAG rule engine fields
    rule: Optional[str] = None
    impact: Optional[str] = None
    description: Optional[str] = None
    help_url: Optional[str] = None
    elements: List[str] = field(default_factory=list)
    # HTML validator fields
    subtype: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None
    # Contrast fields
    foreground: Optional[str] = None
    background: Optional[str] = None
    ratio: Optional[float] = None
    required_ratio: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the issue, omitting fields that were never set."""
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None or value == []:
                continue
            if isinstance(value, IssueKind):
                value = value.value
            data[f.name] = value
        return data


def snippet(element, limit: int = SNIPPET_LIMIT) -> str:
    """Serialize an element for reporting, truncating long markup."""
    html = str(element)
    if len(html) > limit:
        return html[:limit] + '...'
    return html


@dataclass
class AccessibilityReport:
    """Accessibility issues found in one document"""
    file_path: str
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())
    wcag_level: str = "AA"
    issues: List[AccessibilityIssue] = field(default_factory=list)
    summary: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        if not self.summary:
            for issue in self.issues:
                kind = issue.type.value
                self.summary[kind] = self.summary.get(kind, 0) + 1

    @property
    def total_issues(self) -> int:
        return len(self.issues)

    def to_json(self) -> str:
        """Export report as JSON"""
        data = {
            'file_path': self.file_path,
            'timestamp': self.timestamp,
            'wcag_level': self.wcag_level,
            'total_issues': self.total_issues,
            'summary': self.summary,
            'issues': [issue.to_dict() for issue in self.issues],
        }
        return json.dumps(data, indent=2)

    def to_text(self) -> str:
        """Generate human-readable report"""
        lines = [
            "=" * 70,
            f"ACCESSIBILITY REPORT (WCAG {self.wcag_level})",
            "=" * 70,
            f"File: {self.file_path}",
            f"Timestamp: {self.timestamp}",
            "-" * 70,
            f"Total Issues: {self.total_issues}",
        ]
        for kind, count in sorted(self.summary.items()):
            lines.append(f"  {kind}: {count}")
        lines.append("=" * 70)

        if self.issues:
            lines.append("\nISSUES FOUND:\n")
            for i, issue in enumerate(self.issues, 1):
                header = f"{i}. [{issue.type.value.upper()}]"
                if issue.rule:
                    header += f" {issue.rule}"
                if issue.impact:
                    header += f" ({issue.impact})"
                lines.append(header)
                lines.append(f"   Issue: {issue.message}")
                if issue.line is not None:
                    lines.append(f"   Location: line {issue.line}, column {issue.column}")
                if issue.element:
                    lines.append(f"   Element: {issue.element}")
                for element in issue.elements:
                    lines.append(f"   Element: {element}")
                lines.append("")

        return "\n".join(lines)
