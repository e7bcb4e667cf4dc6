"""
WCAG Rule Engine

General-purpose WCAG ruleset evaluated over a parsed HTML tree. The
auditor talks to the engine only through ``WCAGEngine.evaluate``, so a
different rule-matching implementation can be plugged in without changing
the auditor.

Rules (WCAG 2.x AA):
- color-contrast (1.4.3)
- landmark-one-main, region (best practice, 1.3.1)
- page-has-heading-one (best practice)
- document-title (2.4.2)
- html-has-lang (3.1.1)
- image-alt (1.1.1)
- input-button-name, label, link-name (4.1.2, 2.4.4)
- list, listitem (1.3.1)
- meta-viewport (1.4.4)

Document-level rules only apply when the input is a full document; a
Markdown fragment has no title, language or landmarks of its own.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from bs4 import BeautifulSoup, NavigableString, Tag

from .contrast import evaluate_element
from .issues import AccessibilityIssue, IssueKind, snippet

logger = logging.getLogger(__name__)

HELP_URL_BASE = "https://dequeuniversity.com/rules/axe/4.9/"


@dataclass(frozen=True)
class WCAGRule:
    """Static description of one rule"""
    id: str
    impact: str
    help: str
    description: str
    document_level: bool = False

    @property
    def help_url(self) -> str:
        return HELP_URL_BASE + self.id


RULES: Tuple[WCAGRule, ...] = (
    WCAGRule('color-contrast', 'serious',
             'Elements must meet minimum color contrast ratio thresholds',
             'Ensures the contrast between foreground and background colors meets WCAG 2 AA thresholds'),
    WCAGRule('landmark-one-main', 'moderate',
             'Document should have one main landmark',
             'Ensures the document has a main landmark', document_level=True),
    WCAGRule('page-has-heading-one', 'moderate',
             'Page should contain a level-one heading',
             'Ensure that the page, or at least one of its frames contains a level-one heading',
             document_level=True),
    WCAGRule('region', 'moderate',
             'All page content should be contained by landmarks',
             'Ensures all page content is contained by landmarks', document_level=True),
    WCAGRule('document-title', 'serious',
             'Documents must have <title> element to aid in navigation',
             'Ensures each HTML document contains a non-empty <title> element', document_level=True),
    WCAGRule('html-has-lang', 'serious',
             '<html> element must have a lang attribute',
             'Ensures every HTML document has a lang attribute', document_level=True),
    WCAGRule('image-alt', 'critical',
             'Images must have alternate text',
             'Ensures <img> elements have alternate text or a role of none or presentation'),
    WCAGRule('input-button-name', 'critical',
             'Input buttons must have discernible text',
             'Ensures input buttons have discernible text'),
    WCAGRule('label', 'critical',
             'Form elements must have labels',
             'Ensures every form element has a label'),
    WCAGRule('link-name', 'serious',
             'Links must have discernible text',
             'Ensures links have discernible text'),
    WCAGRule('list', 'serious',
             '<ul> and <ol> must only directly contain <li>, <script> or <template> elements',
             'Ensures that lists are structured correctly'),
    WCAGRule('listitem', 'serious',
             '<li> elements must be contained in a <ul> or <ol>',
             'Ensures <li> elements are used semantically'),
    WCAGRule('meta-viewport', 'critical',
             'Zooming and scaling must not be disabled',
             'Ensures <meta name="viewport"> does not disable text scaling and zooming',
             document_level=True),
)

LANDMARK_TAGS = frozenset(['main', 'header', 'footer', 'nav', 'aside'])
LANDMARK_ROLES = frozenset([
    'banner', 'complementary', 'contentinfo', 'form', 'main',
    'navigation', 'region', 'search',
])
UNLABELLED_CONTROL_TYPES = frozenset(['hidden', 'submit', 'button', 'reset', 'image'])
LIST_CHILD_TAGS = frozenset(['li', 'script', 'template'])
NON_CONTENT_TAGS = frozenset(['script', 'style', 'template', 'noscript'])


class WCAGEngine:
    """Interface for a pluggable WCAG rule engine."""

    def evaluate(self, soup: BeautifulSoup) -> List[AccessibilityIssue]:
        """Return one ``wcag`` issue per violated rule."""
        raise NotImplementedError("Subclasses must implement evaluate()")


class BuiltinWCAGEngine(WCAGEngine):
    """
    Static WCAG ruleset over a BeautifulSoup tree.

    Usage:
        engine = BuiltinWCAGEngine()
        issues = engine.evaluate(BeautifulSoup(html, 'html.parser'))
    """

    def __init__(self, rules: Tuple[WCAGRule, ...] = RULES):
        self.rules = rules
        self._checks: Dict[str, Callable[[BeautifulSoup], List[Tag]]] = {
            'color-contrast': self._color_contrast,
            'landmark-one-main': self._landmark_one_main,
            'page-has-heading-one': self._page_has_heading_one,
            'region': self._region,
            'document-title': self._document_title,
            'html-has-lang': self._html_has_lang,
            'image-alt': self._image_alt,
            'input-button-name': self._input_button_name,
            'label': self._label,
            'link-name': self._link_name,
            'list': self._list,
            'listitem': self._listitem,
            'meta-viewport': self._meta_viewport,
        }

    def evaluate(self, soup: BeautifulSoup) -> List[AccessibilityIssue]:
        issues = []
        full_document = soup.find(['html', 'body']) is not None

        for rule in self.rules:
            if rule.document_level and not full_document:
                continue

            violations = self._checks[rule.id](soup)
            if not violations:
                continue

            logger.debug(f"Rule {rule.id} failed on {len(violations)} element(s)")
            issues.append(AccessibilityIssue(
                type=IssueKind.WCAG,
                message=rule.help,
                rule=rule.id,
                impact=rule.impact,
                description=rule.description,
                help_url=rule.help_url,
                elements=[snippet(node) for node in violations],
            ))

        return issues

    # =========================================================================
    # Rules
    # =========================================================================

    def _color_contrast(self, soup: BeautifulSoup) -> List[Tag]:
        failing = []
        for element in soup.find_all(True):
            if not _own_text(element):
                continue
            result = evaluate_element(element)
            if result and not result['passes']:
                failing.append(element)
        return failing

    def _landmark_one_main(self, soup: BeautifulSoup) -> List[Tag]:
        mains = [el for el in soup.find_all(True)
                 if el.name == 'main' or el.get('role') == 'main']
        if len(mains) == 1:
            return []
        if not mains:
            return [soup.find('html') or soup.find('body')]
        return mains

    def _page_has_heading_one(self, soup: BeautifulSoup) -> List[Tag]:
        if soup.find('h1'):
            return []
        if soup.find(attrs={'role': 'heading', 'aria-level': '1'}):
            return []
        return [soup.find('html') or soup.find('body')]

    def _region(self, soup: BeautifulSoup) -> List[Tag]:
        body = soup.find('body')
        if not body:
            return []

        outside = []
        for child in body.children:
            if isinstance(child, NavigableString):
                continue
            if child.name in NON_CONTENT_TAGS or _is_landmark(child):
                continue
            if 'skip-link' in (child.get('class') or []):
                continue
            if child.get('aria-hidden') == 'true':
                continue
            # Wrappers may hold landmarks; only flag content that is not inside one
            if not child.get_text().strip() and not child.find(['img', 'input', 'select', 'textarea', 'button']):
                continue
            if child.find(_is_landmark) and not _content_outside_landmarks(child):
                continue
            outside.append(child)
        return outside

    def _document_title(self, soup: BeautifulSoup) -> List[Tag]:
        title = soup.find('title')
        if title and title.get_text().strip():
            return []
        return [soup.find('html') or soup.find('body')]

    def _html_has_lang(self, soup: BeautifulSoup) -> List[Tag]:
        html = soup.find('html')
        if html is None:
            return []
        if (html.get('lang') or '').strip() or (html.get('xml:lang') or '').strip():
            return []
        return [html]

    def _image_alt(self, soup: BeautifulSoup) -> List[Tag]:
        failing = []
        for img in soup.find_all('img'):
            if img.has_attr('alt'):
                continue
            if img.get('role') in ('none', 'presentation'):
                continue
            if _aria_name(img) or (img.get('title') or '').strip():
                continue
            failing.append(img)
        return failing

    def _input_button_name(self, soup: BeautifulSoup) -> List[Tag]:
        failing = []
        for control in soup.find_all('input'):
            control_type = (control.get('type') or '').lower()
            if control_type not in ('button', 'submit', 'reset'):
                continue
            # submit and reset have a default label when value is absent
            if control_type in ('submit', 'reset') and not control.has_attr('value'):
                continue
            if (control.get('value') or '').strip() or _aria_name(control):
                continue
            if (control.get('title') or '').strip():
                continue
            failing.append(control)
        return failing

    def _label(self, soup: BeautifulSoup) -> List[Tag]:
        failing = []
        for control in soup.find_all(['input', 'select', 'textarea']):
            control_type = (control.get('type') or 'text').lower()
            if control.name == 'input' and control_type in UNLABELLED_CONTROL_TYPES:
                continue
            if control.get('aria-hidden') == 'true':
                continue
            if _aria_name(control) or (control.get('title') or '').strip():
                continue
            if control.find_parent('label'):
                continue
            control_id = control.get('id')
            if control_id and soup.find('label', attrs={'for': control_id}):
                continue
            failing.append(control)
        return failing

    def _link_name(self, soup: BeautifulSoup) -> List[Tag]:
        failing = []
        for link in soup.find_all('a', href=True):
            if link.get('aria-hidden') == 'true':
                continue
            if link.get_text().strip() or _aria_name(link):
                continue
            if (link.get('title') or '').strip():
                continue
            if any((img.get('alt') or '').strip() for img in link.find_all('img')):
                continue
            failing.append(link)
        return failing

    def _list(self, soup: BeautifulSoup) -> List[Tag]:
        failing = []
        for list_tag in soup.find_all(['ul', 'ol']):
            if list_tag.get('role') not in (None, 'list'):
                continue
            for child in list_tag.children:
                if isinstance(child, NavigableString):
                    if child.strip():
                        failing.append(list_tag)
                        break
                    continue
                if child.name not in LIST_CHILD_TAGS:
                    failing.append(list_tag)
                    break
        return failing

    def _listitem(self, soup: BeautifulSoup) -> List[Tag]:
        failing = []
        for item in soup.find_all('li'):
            parent = item.parent
            if parent is not None and (parent.name in ('ul', 'ol', 'menu') or parent.get('role') == 'list'):
                continue
            failing.append(item)
        return failing

    def _meta_viewport(self, soup: BeautifulSoup) -> List[Tag]:
        failing = []
        for meta in soup.find_all('meta', attrs={'name': 'viewport'}):
            content = (meta.get('content') or '').lower()
            settings = dict(
                (key.strip(), value.strip())
                for key, _, value in (part.partition('=') for part in re.split(r'[,;]', content))
                if key.strip()
            )
            if settings.get('user-scalable') in ('no', '0'):
                failing.append(meta)
                continue
            try:
                if float(settings.get('maximum-scale', '10')) < 2:
                    failing.append(meta)
            except ValueError:
                continue
        return failing


# =============================================================================
# Helpers
# =============================================================================

def _own_text(element: Tag) -> bool:
    return any(isinstance(child, NavigableString) and child.strip()
               for child in element.children)


def _aria_name(element: Tag) -> bool:
    return bool((element.get('aria-label') or '').strip()
                or (element.get('aria-labelledby') or '').strip())


def _is_landmark(element: Tag) -> bool:
    if not isinstance(element, Tag):
        return False
    if element.name in LANDMARK_TAGS or element.get('role') in LANDMARK_ROLES:
        return True
    # A labelled section or form is a region/form landmark
    return element.name in ('section', 'form') and _aria_name(element)


def _content_outside_landmarks(element: Tag) -> bool:
    """True if the element holds content not enclosed by any landmark."""
    for child in element.children:
        if isinstance(child, NavigableString):
            if child.strip():
                return True
            continue
        if child.name in NON_CONTENT_TAGS or _is_landmark(child):
            continue
        if child.find(_is_landmark):
            if _content_outside_landmarks(child):
                return True
            continue
        if child.get_text().strip():
            return True
    return False
