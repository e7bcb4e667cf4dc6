"""
ARIA HTML Enhancer

Mutating pass that injects semantic structure and ARIA metadata into HTML
rendered from Markdown, using the document's front matter as input.

Features:
- Document language and title from front matter (WCAG 3.1.1, 2.4.2)
- ARIA landmarks (main, banner, contentinfo, navigation, complementary)
- Heading ids for anchor navigation
- External link indication and in-page jump link labelling
- Table row/cell roles and accessible names
- Form and input labelling checks
- Focusable, labelled code blocks
- Skip link for keyboard navigation (WCAG 2.4.1)

Every pass degrades to a no-op when the structure it needs is missing, so
fragments and full documents are both accepted. Running the enhancer twice
yields the same tree as running it once.
"""

import logging
import re
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional, Set

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class EnhancerOptions:
    """Configuration options for ARIA enhancement."""
    indicate_external_links: bool = True
    main_id: str = "main-content"


HEADING_TAGS = ['h1', 'h2', 'h3', 'h4', 'h5', 'h6']
MAIN_CANDIDATES = '.content, #content, article, .main, #main'
SKIP_LINK_TARGETS = ('#main', '#main-content', '#content')
EXTERNAL_ICON_SELECTOR = 'i.external, .fa-external-link, .icon-external'
UNLABELLED_INPUT_TYPES = ('hidden', 'submit', 'button')

WARNING_CLASS = 'a11y-warning'
WARNING_ATTR = 'data-a11y-warning'


def slugify_heading(text: str) -> str:
    """Generate a URL-friendly id from heading text."""
    slug = text.strip().lower()
    slug = re.sub(r'[^\w\s-]', '', slug)
    slug = re.sub(r'\s+', '-', slug)
    return re.sub(r'-+', '-', slug)


def random_id(prefix: str) -> str:
    """Generate a short unique id with the given prefix."""
    return f"{prefix}-{uuid.uuid4().hex[:9]}"


def visible_text(tag: Tag) -> str:
    """Text content of an element with whitespace collapsed."""
    return ' '.join(tag.get_text().split())


def class_list(tag: Tag) -> list:
    classes = tag.get('class') or []
    if isinstance(classes, str):
        classes = classes.split()
    return list(classes)


# =============================================================================
# Main Enhancer Class
# =============================================================================

class AriaEnhancer:
    """
    Injects landmarks, ids and ARIA attributes into a parsed HTML tree.

    Usage:
        soup = BeautifulSoup(html, 'html.parser')
        AriaEnhancer().enhance(soup, {'title': 'Guide', 'language': 'en'})
        enhanced_html = str(soup)
    """

    def __init__(self, options: EnhancerOptions = None):
        """Initialize the enhancer."""
        self.options = options or EnhancerOptions()

    def enhance(self, soup: BeautifulSoup, frontmatter: Optional[Dict[str, Any]] = None) -> BeautifulSoup:
        """
        Apply all ARIA enhancements to a tree, in place.

        Passes run in a fixed order: later passes rely on ids and
        attributes set by earlier ones (the skip link targets the main
        landmark's id).

        Args:
            soup: Parsed HTML tree, mutated in place
            frontmatter: Document metadata (title, language, ...)

        Returns:
            The same tree, for chaining
        """
        frontmatter = frontmatter or {}

        language = frontmatter.get('language')
        if language:
            self._set_language(soup, str(language))

        title = frontmatter.get('title')
        if title:
            self._ensure_title(soup, str(title))

        main = self._add_landmarks(soup)
        self._enhance_headings(soup)
        self._enhance_links(soup)
        self._enhance_tables(soup)
        self._enhance_forms(soup)
        self._enhance_code_blocks(soup)
        self._add_skip_navigation(soup, main)

        return soup

    # =========================================================================
    # Document metadata
    # =========================================================================

    def _set_language(self, soup: BeautifulSoup, language: str) -> None:
        """Set the lang attribute on the root html element (WCAG 3.1.1)."""
        html = soup.find('html')
        if html:
            html['lang'] = language

    def _ensure_title(self, soup: BeautifulSoup, title: str) -> None:
        """Fill in the document title without overwriting an existing one (WCAG 2.4.2)."""
        html = soup.find('html')
        if not html:
            return

        head = html.find('head')
        if not head:
            head = soup.new_tag('head')
            html.insert(0, head)

        title_tag = head.find('title')
        if not title_tag:
            title_tag = soup.new_tag('title')
            head.append(title_tag)

        if not title_tag.get_text().strip():
            title_tag.string = title

    # =========================================================================
    # Landmarks
    # =========================================================================

    def _add_landmarks(self, soup: BeautifulSoup) -> Optional[Tag]:
        """
        Add ARIA landmarks to major page regions.

        Returns:
            The resolved main landmark, or None for fragments without one
        """
        main = soup.find('main')

        if not main:
            main = soup.select_one(MAIN_CANDIDATES)

        if not main:
            body = soup.find('body')
            if body:
                main = soup.new_tag('main')
                for child in list(body.contents):
                    main.append(child.extract())
                body.append(main)

        if main:
            main['role'] = 'main'
            if not main.get('id'):
                main['id'] = self.options.main_id

        for header in soup.find_all('header'):
            header['role'] = 'banner'

        for footer in soup.find_all('footer'):
            footer['role'] = 'contentinfo'

        for nav in soup.find_all('nav'):
            if not nav.has_attr('aria-label'):
                nav['aria-label'] = 'Main Navigation'

        for index, aside in enumerate(soup.find_all('aside'), 1):
            aside['role'] = 'complementary'
            if not aside.has_attr('aria-label'):
                aside['aria-label'] = f'Complementary Content {index}'

        return main

    # =========================================================================
    # Headings
    # =========================================================================

    def _enhance_headings(self, soup: BeautifulSoup) -> None:
        """Give headings ids for anchor navigation and make them focusable."""
        used_ids: Set[str] = {tag['id'] for tag in soup.find_all(id=True)}

        for heading in soup.find_all(HEADING_TAGS):
            if not heading.get('id'):
                heading_id = self._unique_heading_id(visible_text(heading), used_ids)
                if heading_id:
                    heading['id'] = heading_id
                    used_ids.add(heading_id)

            # Reachable through anchor jumps, not through Tab
            heading['tabindex'] = '-1'

            if heading.get('role') == 'heading' and not heading.has_attr('aria-level'):
                heading['aria-level'] = heading.name[1]

    def _unique_heading_id(self, text: str, used_ids: Set[str]) -> str:
        base_id = slugify_heading(text)
        if not base_id or base_id not in used_ids:
            return base_id

        counter = 1
        while f"{base_id}-{counter}" in used_ids:
            counter += 1
        return f"{base_id}-{counter}"

    # =========================================================================
    # Links
    # =========================================================================

    def _enhance_links(self, soup: BeautifulSoup) -> None:
        """Label external links, jump links and links without text (WCAG 2.4.4)."""
        for link in soup.find_all('a'):
            href = link.get('href')
            if not href:
                continue

            text = visible_text(link)

            if href.startswith(('http://', 'https://')):
                self._enhance_external_link(link, text)
            elif href.startswith('#') and len(href) > 1:
                self._enhance_jump_link(soup, link, href[1:], text)

            if not text and not link.has_attr('aria-label'):
                img = link.find('img')
                if img and img.get('alt'):
                    link['aria-label'] = img['alt']
                else:
                    self._flag_warning(link, 'Link has no accessible text')

    def _enhance_external_link(self, link: Tag, text: str) -> None:
        if not link.get('rel'):
            link['rel'] = 'noopener noreferrer'

        if not self.options.indicate_external_links or not text:
            return

        has_indicator = 'external' in text.lower() or link.select_one(EXTERNAL_ICON_SELECTOR)
        if not has_indicator and not link.get('aria-label'):
            link['aria-label'] = f'{text} (external link)'

    def _enhance_jump_link(self, soup: BeautifulSoup, link: Tag, target_id: str, text: str) -> None:
        target = soup.find(attrs={'id': target_id})
        if not target:
            return

        if not target.has_attr('tabindex'):
            target['tabindex'] = '-1'

        if 'skip-link' in class_list(link):
            return

        if not link.get('aria-label'):
            link['aria-label'] = f'Jump to {text}'

    def _flag_warning(self, tag: Tag, message: str) -> None:
        """Mark an element that could not be fixed automatically."""
        classes = class_list(tag)
        if WARNING_CLASS not in classes:
            classes.append(WARNING_CLASS)
        tag['class'] = classes
        tag[WARNING_ATTR] = message
        logger.debug(f"{message}: {tag.name}")

    # =========================================================================
    # Tables
    # =========================================================================

    def _enhance_tables(self, soup: BeautifulSoup) -> None:
        """Add explicit table semantics and an accessible name (WCAG 1.3.1)."""
        for table in soup.find_all('table'):
            table['role'] = 'table'

            for th in table.find_all('th'):
                if not th.get('scope'):
                    th['scope'] = 'col'

            if not table.find('caption'):
                previous = table.find_previous_sibling()
                if previous is not None and previous.name in HEADING_TAGS:
                    if not previous.get('id'):
                        previous['id'] = random_id('table-heading')
                    if not table.has_attr('aria-labelledby'):
                        table['aria-labelledby'] = previous['id']
                elif not table.has_attr('aria-label') and not table.has_attr('aria-labelledby'):
                    table['aria-label'] = 'Table'

            for row in table.find_all('tr'):
                row['role'] = 'row'

            for cell in table.find_all('td'):
                cell['role'] = 'cell'

    # =========================================================================
    # Forms
    # =========================================================================

    def _enhance_forms(self, soup: BeautifulSoup) -> None:
        """Name forms and check that every form control has a label (WCAG 1.3.1)."""
        for form in soup.find_all('form'):
            if form.has_attr('aria-label') or form.has_attr('aria-labelledby'):
                continue

            heading = form.find(HEADING_TAGS)
            if heading:
                if not heading.get('id'):
                    heading['id'] = random_id('form-heading')
                form['aria-labelledby'] = heading['id']
            else:
                form['aria-label'] = 'Form'

        for control in soup.find_all(['input', 'select', 'textarea']):
            control_type = (control.get('type') or 'text').lower()
            if control_type in UNLABELLED_INPUT_TYPES:
                continue

            if not control.get('id'):
                control['id'] = random_id('input')

            if not self._has_label(soup, control):
                self._flag_warning(control, 'Input has no accessible label')

        for element in soup.find_all(attrs={'required': True}):
            element['aria-required'] = 'true'

    def _has_label(self, soup: BeautifulSoup, control: Tag) -> bool:
        if soup.find('label', attrs={'for': control['id']}):
            return True
        if control.find_parent('label'):
            return True
        return control.has_attr('aria-label') or control.has_attr('aria-labelledby')

    # =========================================================================
    # Code blocks
    # =========================================================================

    def _enhance_code_blocks(self, soup: BeautifulSoup) -> None:
        """Make code blocks focusable, scrollable regions with a language label."""
        for code in soup.select('pre > code'):
            pre = code.parent

            language = 'code'
            for class_name in class_list(code):
                if class_name.startswith('language-'):
                    language = class_name[len('language-'):]
                    break

            pre['tabindex'] = '0'
            pre['role'] = 'region'
            pre['aria-label'] = f'Code example in {language}'

    # =========================================================================
    # Skip navigation
    # =========================================================================

    def _add_skip_navigation(self, soup: BeautifulSoup, main: Optional[Tag]) -> None:
        """Add skip link for keyboard navigation (WCAG 2.4.1)."""
        body = soup.find('body')
        if not body:
            return

        main_id = main['id'] if main is not None else self.options.main_id
        targets = set(SKIP_LINK_TARGETS) | {f'#{main_id}'}

        for link in soup.find_all('a', href=True):
            if link['href'] in targets:
                return

        skip_link = soup.new_tag('a', href=f'#{main_id}')
        skip_link['class'] = ['skip-link']
        skip_link.string = 'Skip to main content'
        body.insert(0, skip_link)

        if main is not None and not main.has_attr('tabindex'):
            main['tabindex'] = '-1'


# =============================================================================
# Convenience Functions
# =============================================================================

def enhance_html(html: str, frontmatter: Optional[Dict[str, Any]] = None,
                 options: EnhancerOptions = None) -> str:
    """
    Convenience function to enhance an HTML string.

    Args:
        html: Input HTML string (full document or fragment)
        frontmatter: Optional document metadata
        options: Optional configuration

    Returns:
        Enhanced HTML string
    """
    soup = BeautifulSoup(html, 'html.parser')
    AriaEnhancer(options).enhance(soup, frontmatter)
    return str(soup)
