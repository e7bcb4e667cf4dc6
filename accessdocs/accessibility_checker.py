"""
Accessibility Checker

Read-only audit of generated HTML. Runs the WCAG rule engine followed by
structural checks and collects every finding as an AccessibilityIssue.

Checks (in order):
- WCAG rule engine (pluggable, see wcag_engine)
- Heading hierarchy
- Color contrast of inline-styled text
- HTML validity (external markup validator)
- ARIA role and attribute usage
- Keyboard accessibility
- Screen reader hazards (alt text, hidden controls, duplicate and dangling ids)

Each check is isolated: an exception inside one check becomes a single
issue and the remaining checks still run. Issues are advisory and never
fail a build.
"""

import logging
import re
from pathlib import Path
from types import MappingProxyType
from typing import Callable, List, Optional, Union

from bs4 import BeautifulSoup

from .config import AccessDocsConfig
from .contrast import evaluate_element
from .html_validator import HTMLValidator, NuHTMLValidator
from .issues import AccessibilityIssue, AccessibilityReport, IssueKind, snippet
from .wcag_engine import BuiltinWCAGEngine, WCAGEngine

logger = logging.getLogger(__name__)

HEADING_SELECTOR = 'h1, h2, h3, h4, h5, h6'
TEXT_SELECTOR = 'p, h1, h2, h3, h4, h5, h6, li, td, th, label'
INTERACTIVE_SELECTOR = 'a, button, input, select, textarea, [role="button"], [role="link"]'
HIDDEN_INTERACTIVE_SELECTOR = 'a[aria-hidden="true"], button[aria-hidden="true"], input[aria-hidden="true"]'

REDUNDANT_ALT_PHRASES = ('image of', 'picture of')

VALID_ROLES = frozenset([
    'alert', 'alertdialog', 'application', 'article', 'banner',
    'button', 'cell', 'checkbox', 'columnheader', 'combobox',
    'complementary', 'contentinfo', 'definition', 'dialog',
    'directory', 'document', 'feed', 'figure', 'form', 'grid',
    'gridcell', 'group', 'heading', 'img', 'link', 'list',
    'listbox', 'listitem', 'log', 'main', 'marquee', 'math',
    'menu', 'menubar', 'menuitem', 'menuitemcheckbox',
    'menuitemradio', 'navigation', 'none', 'note', 'option',
    'presentation', 'progressbar', 'radio', 'radiogroup',
    'region', 'row', 'rowgroup', 'rowheader', 'scrollbar',
    'search', 'searchbox', 'separator', 'slider', 'spinbutton',
    'status', 'switch', 'tab', 'table', 'tablist', 'tabpanel',
    'term', 'textbox', 'timer', 'toolbar', 'tooltip', 'tree',
    'treegrid', 'treeitem',
])

RANGE_ATTRIBUTES = ('aria-valuemin', 'aria-valuemax', 'aria-valuenow')

REQUIRED_ARIA_ATTRIBUTES = MappingProxyType({
    'checkbox': ('aria-checked',),
    'combobox': ('aria-expanded',),
    'slider': RANGE_ATTRIBUTES,
    'progressbar': RANGE_ATTRIBUTES,
    'scrollbar': RANGE_ATTRIBUTES,
    'listbox': ('aria-multiselectable',),
    'radiogroup': ('aria-required',),
})

INTEGER_PATTERN = re.compile(r'^\s*([+-]?\d+)')


class AccessibilityChecker:
    """
    Audits HTML for accessibility issues.

    Usage:
        checker = AccessibilityChecker(config)
        issues = checker.check(html)
        report = checker.check_file('build/index.html')
    """

    def __init__(self, config: Optional[AccessDocsConfig] = None,
                 engine: Optional[WCAGEngine] = None,
                 validator: Optional[HTMLValidator] = None):
        """
        Initialize the checker.

        Args:
            config: Configuration with the per-check toggles
            engine: WCAG rule engine (builtin ruleset by default)
            validator: Markup validator (Nu HTML Checker by default)
        """
        self.config = config or AccessDocsConfig()
        self.engine = engine or BuiltinWCAGEngine()
        self._validator = validator

    @property
    def validator(self) -> HTMLValidator:
        # Created lazily so audits with validation disabled never open a session
        if self._validator is None:
            self._validator = NuHTMLValidator(
                url=self.config.validator_url,
                timeout=self.config.validator_timeout,
            )
        return self._validator

    def check(self, html: str) -> List[AccessibilityIssue]:
        """
        Run all enabled checks.

        Args:
            html: Serialized HTML (a full document or a fragment)

        Returns:
            Issues in check order
        """
        try:
            soup = BeautifulSoup(html, 'html.parser')
        except Exception as e:
            logger.error(f"Error during accessibility check: {e}")
            return [AccessibilityIssue(type=IssueKind.ERROR,
                                       message=f"Accessibility check failed: {e}")]

        config = self.config
        issues = []

        if config.check_wcag:
            issues.extend(self._run_check(
                lambda: self.engine.evaluate(soup), self._engine_failure))
        if config.check_heading_hierarchy:
            issues.extend(self._run_check(lambda: self.check_heading_hierarchy(soup)))
        if config.check_color_contrast:
            issues.extend(self._run_check(lambda: self.check_color_contrast(soup)))
        if config.validate_html:
            issues.extend(self._run_check(
                lambda: self.check_html_validity(html), self._validation_failure))
        if config.check_aria:
            issues.extend(self._run_check(lambda: self.check_aria_usage(soup)))
        if config.check_keyboard_accessibility:
            issues.extend(self._run_check(lambda: self.check_keyboard_accessibility(soup)))
        if config.check_screen_reader_announcements:
            issues.extend(self._run_check(lambda: self.check_screen_reader_announcements(soup)))

        logger.debug(f"Accessibility check found {len(issues)} issue(s)")
        return issues

    def check_file(self, file_path: Union[str, Path]) -> AccessibilityReport:
        """Audit an HTML file and wrap the result in a report."""
        path = Path(file_path)
        html = path.read_text(encoding='utf-8')
        return self.build_report(self.check(html), str(path))

    def build_report(self, issues: List[AccessibilityIssue], file_path: str) -> AccessibilityReport:
        return AccessibilityReport(
            file_path=file_path,
            wcag_level=self.config.wcag_level,
            issues=issues,
        )

    # =========================================================================
    # Check isolation
    # =========================================================================

    def _run_check(self, check: Callable[[], List[AccessibilityIssue]],
                   on_error: Optional[Callable[[Exception], AccessibilityIssue]] = None
                   ) -> List[AccessibilityIssue]:
        try:
            return check()
        except Exception as e:
            logger.warning(f"Accessibility check raised an error: {e}")
            if on_error:
                return [on_error(e)]
            return [AccessibilityIssue(type=IssueKind.ERROR,
                                       message=f"Accessibility check failed: {e}")]

    @staticmethod
    def _engine_failure(error: Exception) -> AccessibilityIssue:
        return AccessibilityIssue(
            type=IssueKind.WCAG,
            rule='engine-error',
            message=f"Error running WCAG rule engine: {error}",
        )

    @staticmethod
    def _validation_failure(error: Exception) -> AccessibilityIssue:
        return AccessibilityIssue(type=IssueKind.HTML, message=f"HTML validation failed: {error}")

    # =========================================================================
    # Checks
    # =========================================================================

    def check_heading_hierarchy(self, soup: BeautifulSoup) -> List[AccessibilityIssue]:
        """
        Check heading structure.

        Only forward skips (h2 -> h4) are flagged; moving back up the
        outline (h3 -> h2) is fine.
        """
        headings = soup.select(HEADING_SELECTOR)
        if not headings:
            return [AccessibilityIssue(
                type=IssueKind.HEADING,
                message="Document has no headings, which may make navigation difficult for screen reader users",
            )]

        issues = []
        if not soup.find('h1'):
            issues.append(AccessibilityIssue(
                type=IssueKind.HEADING,
                message="Document lacks a main heading (h1), which is important for document structure",
            ))

        first = headings[0]
        if first.name != 'h1':
            issues.append(AccessibilityIssue(
                type=IssueKind.HEADING,
                message=f"Document doesn't start with an h1. First heading is {first.name}",
                element=snippet(first),
            ))

        previous_level = int(first.name[1])
        for heading in headings[1:]:
            level = int(heading.name[1])
            if level > previous_level + 1:
                issues.append(AccessibilityIssue(
                    type=IssueKind.HEADING,
                    message=f"Heading level skipped from h{previous_level} to h{level}",
                    element=snippet(heading),
                ))
            previous_level = level

        return issues

    def check_color_contrast(self, soup: BeautifulSoup) -> List[AccessibilityIssue]:
        """Check text elements whose colors are both set inline."""
        issues = []
        for element in soup.select(TEXT_SELECTOR):
            result = evaluate_element(element)
            if result is None or result['passes']:
                continue

            issues.append(AccessibilityIssue(
                type=IssueKind.CONTRAST,
                message=(f"Insufficient color contrast ratio ({result['ratio']:.2f}:1), "
                         f"should be at least {result['required']:g}:1"),
                element=snippet(element),
                foreground=result['foreground'],
                background=result['background'],
                ratio=round(result['ratio'], 2),
                required_ratio=result['required'],
            ))
        return issues

    def check_html_validity(self, html: str) -> List[AccessibilityIssue]:
        """Validate markup, keeping only errors and warnings."""
        issues = []
        for message in self.validator.validate(html):
            if message.type not in ('error', 'warning'):
                continue
            issues.append(AccessibilityIssue(
                type=IssueKind.HTML,
                subtype=message.type,
                message=message.message,
                line=message.line,
                column=message.column,
            ))
        return issues

    def check_aria_usage(self, soup: BeautifulSoup) -> List[AccessibilityIssue]:
        """Check for unknown roles and roles missing required attributes."""
        elements = soup.find_all(attrs={'role': True})
        issues = []

        for element in elements:
            role = element.get('role')
            if role not in VALID_ROLES:
                issues.append(AccessibilityIssue(
                    type=IssueKind.ARIA,
                    message=f'Invalid ARIA role: "{role}"',
                    element=snippet(element),
                ))

        for element in elements:
            role = element.get('role')
            for attr in REQUIRED_ARIA_ATTRIBUTES.get(role, ()):
                if not element.has_attr(attr):
                    issues.append(AccessibilityIssue(
                        type=IssueKind.ARIA,
                        message=f'Element with role="{role}" is missing required attribute: {attr}',
                        element=snippet(element),
                    ))

        return issues

    def check_keyboard_accessibility(self, soup: BeautifulSoup) -> List[AccessibilityIssue]:
        """Check tab order problems on interactive elements."""
        issues = []

        for element in soup.select(INTERACTIVE_SELECTOR):
            tabindex = element.get('tabindex')
            if tabindex is None:
                continue
            if tabindex.strip() == '-1':
                issues.append(AccessibilityIssue(
                    type=IssueKind.KEYBOARD,
                    message='Interactive element is not keyboard accessible (tabindex="-1")',
                    element=snippet(element),
                ))
            value = _parse_int(tabindex)
            if value is not None and value > 0:
                issues.append(AccessibilityIssue(
                    type=IssueKind.KEYBOARD,
                    message=f"Tabindex greater than 0 ({tabindex}) can cause navigation issues",
                    element=snippet(element),
                ))

        # Click handlers are invisible in static HTML; a div button without
        # tabindex cannot be reached at all
        for div in soup.select('div[role="button"]'):
            if not div.has_attr('tabindex'):
                issues.append(AccessibilityIssue(
                    type=IssueKind.KEYBOARD,
                    message='Element with role="button" needs tabindex attribute for keyboard access',
                    element=snippet(div),
                ))

        return issues

    def check_screen_reader_announcements(self, soup: BeautifulSoup) -> List[AccessibilityIssue]:
        """Check alt text, hidden controls and id references."""
        issues = []

        for img in soup.find_all('img'):
            if not img.has_attr('alt'):
                issues.append(AccessibilityIssue(
                    type=IssueKind.SCREEN_READER,
                    message="Image missing alt attribute",
                    element=snippet(img),
                ))
                continue

            alt = img.get('alt') or ''
            if not alt.strip():
                if not _is_decorative(img):
                    issues.append(AccessibilityIssue(
                        type=IssueKind.SCREEN_READER,
                        message="Non-decorative image has empty alt text",
                        element=snippet(img),
                    ))
            elif any(phrase in alt.lower() for phrase in REDUNDANT_ALT_PHRASES):
                issues.append(AccessibilityIssue(
                    type=IssueKind.SCREEN_READER,
                    message='Alt text should not include phrases like "image of" or "picture of"',
                    element=snippet(img),
                ))

        for element in soup.select(HIDDEN_INTERACTIVE_SELECTOR):
            issues.append(AccessibilityIssue(
                type=IssueKind.SCREEN_READER,
                message='Interactive element is hidden from screen readers (aria-hidden="true")',
                element=snippet(element),
            ))

        seen_ids = set()
        for element in soup.find_all(id=True):
            element_id = element['id']
            if element_id in seen_ids:
                issues.append(AccessibilityIssue(
                    type=IssueKind.SCREEN_READER,
                    message=f'Duplicate ID: "{element_id}" - can cause issues with aria references',
                    element=snippet(element),
                ))
            else:
                seen_ids.add(element_id)

        for element in soup.find_all(attrs={'aria-labelledby': True}):
            for label_id in element['aria-labelledby'].split():
                if label_id not in seen_ids:
                    issues.append(AccessibilityIssue(
                        type=IssueKind.SCREEN_READER,
                        message=f'aria-labelledby references non-existent ID: "{label_id}"',
                        element=snippet(element),
                    ))

        return issues


# =============================================================================
# Helpers
# =============================================================================

def _parse_int(value: str) -> Optional[int]:
    match = INTEGER_PATTERN.match(value)
    return int(match.group(1)) if match else None


def _is_decorative(img) -> bool:
    """An empty alt is intentional on decorative, figure or hidden images."""
    if 'decorative' in (img.get('class') or []):
        return True
    if img.find_parent('figure'):
        return True
    return img.get('aria-hidden') == 'true'


# =============================================================================
# Convenience Functions
# =============================================================================

def check_accessibility(html: str, config: Optional[AccessDocsConfig] = None) -> List[AccessibilityIssue]:
    """
    Audit HTML with a default checker.

    Args:
        html: HTML content
        config: Optional configuration toggles

    Returns:
        List of accessibility issues
    """
    return AccessibilityChecker(config).check(html)
