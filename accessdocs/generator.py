"""
Accessible Documentation Generator.

Builds a static HTML site from a tree of Markdown files.

Pipeline: Markdown + front matter -> HTML fragment -> ARIA enhancement ->
accessibility audit -> page template -> output file

Features:
- YAML front matter (title, description, language, theme)
- Markdown rendering with fenced code, tables, sane lists and heading permalinks
- ARIA enhancement of every rendered page
- Advisory accessibility audit per page (never blocks the build)
- Generated index page grouped by directory
- Bundled and custom asset copying
"""

import html
import logging
import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import markdown
import yaml
from bs4 import BeautifulSoup

from .accessibility_checker import AccessibilityChecker
from .aria_enhancer import AriaEnhancer, EnhancerOptions, slugify_heading
from .config import AccessDocsConfig
from .issues import AccessibilityIssue
from .templates import apply_template

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSIONS = ['fenced_code', 'tables', 'sane_lists', 'toc']

PERMALINK_CLASS = 'header-anchor'

MARKDOWN_EXTENSION_CONFIGS = {
    'toc': {
        'permalink': '#',
        'permalink_class': PERMALINK_CLASS,
        'slugify': lambda value, separator: slugify_heading(value),
    },
}

# The block between the fences may be empty
FRONTMATTER_PATTERN = re.compile(r'\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)', re.DOTALL)

PACKAGE_ASSETS_DIR = Path(__file__).parent / 'assets'


@dataclass
class FileResult:
    """Result of processing one Markdown file."""
    success: bool
    source_path: str = ''
    output_path: str = ''
    error: str = ''
    issues: List[AccessibilityIssue] = field(default_factory=list)


@dataclass
class GenerationResult:
    """Result of a documentation build."""
    success: bool
    files_processed: int = 0
    error: str = ''
    outputs: List[str] = field(default_factory=list)
    issues: Dict[str, List[AccessibilityIssue]] = field(default_factory=dict)
    failed_files: Dict[str, str] = field(default_factory=dict)

    @property
    def total_issues(self) -> int:
        return sum(len(file_issues) for file_issues in self.issues.values())


def parse_frontmatter(text: str) -> Tuple[Dict[str, Any], str]:
    """
    Split YAML front matter from a Markdown document.

    Args:
        text: Raw file content

    Returns:
        Tuple of (metadata dict, Markdown body). Documents without front
        matter, or with front matter that is not a YAML mapping, yield an
        empty dict.
    """
    match = FRONTMATTER_PATTERN.match(text)
    if not match:
        return {}, text

    body = text[match.end():]
    try:
        data = yaml.safe_load(match.group(1) or '')
    except yaml.YAMLError as e:
        logger.warning(f"Ignoring malformed front matter: {e}")
        return {}, body

    if not isinstance(data, dict):
        if data is not None:
            logger.warning("Ignoring front matter that is not a mapping")
        return {}, body
    return data, body


def render_markdown(text: str) -> str:
    """Render Markdown to an HTML fragment."""
    return markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS,
                             extension_configs=MARKDOWN_EXTENSION_CONFIGS, output_format='html')


class AccessibleDocGenerator:
    """
    Documentation generator focused on accessibility.

    Usage:
        generator = AccessibleDocGenerator('docs', 'build')
        result = generator.generate_docs()
        print(f"{result.files_processed} files, {result.total_issues} issues")
    """

    def __init__(self, input_dir: Optional[str] = None, output_dir: Optional[str] = None,
                 config: Optional[AccessDocsConfig] = None,
                 checker: Optional[AccessibilityChecker] = None):
        """
        Initialize the generator.

        Args:
            input_dir: Markdown source directory (defaults to config.input_dir)
            output_dir: Site output directory (defaults to config.output_dir)
            config: Build configuration
            checker: Accessibility checker (built from config by default)
        """
        self.config = config or AccessDocsConfig()
        self.input_dir = Path(input_dir or self.config.input_dir)
        self.output_dir = Path(output_dir or self.config.output_dir)
        self.enhancer = AriaEnhancer(EnhancerOptions(
            indicate_external_links=self.config.indicate_external_links,
        ))
        self._checker = checker

    @property
    def checker(self) -> AccessibilityChecker:
        if self._checker is None:
            self._checker = AccessibilityChecker(self.config)
        return self._checker

    def generate_docs(self) -> GenerationResult:
        """
        Build the whole site.

        Returns:
            GenerationResult; success is False only when the input tree
            cannot be read or the output directory cannot be created.
        """
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            files = self.get_markdown_files()
        except OSError as e:
            logger.error(f"Error generating documentation: {e}")
            return GenerationResult(success=False, error=str(e))

        logger.info(f"Generating documentation for {len(files)} file(s) from {self.input_dir}")
        result = GenerationResult(success=True, files_processed=len(files))

        for file_path in files:
            file_result = self.process_file(file_path)
            if file_result.success:
                result.outputs.append(file_result.output_path)
                if file_result.issues:
                    result.issues[file_result.source_path] = file_result.issues
            else:
                result.failed_files[file_result.source_path] = file_result.error

        if self.config.generate_index:
            index_path = self.generate_index(files)
            if index_path:
                result.outputs.append(index_path)

        self.copy_assets()
        return result

    def get_markdown_files(self) -> List[Path]:
        """Return all Markdown files under the input directory, sorted."""
        if not self.input_dir.is_dir():
            raise FileNotFoundError(f"Input directory not found: {self.input_dir}")
        return sorted(path for path in self.input_dir.rglob('*.md') if path.is_file())

    def output_path_for(self, file_path: Path) -> Path:
        relative = Path(file_path).relative_to(self.input_dir)
        return self.output_dir / relative.with_suffix('.html')

    def render_page(self, text: str) -> Tuple[Dict[str, Any], str, List[AccessibilityIssue]]:
        """
        Render one Markdown document.

        Returns:
            Tuple of (front matter, complete HTML page, audit issues)
        """
        frontmatter, body = parse_frontmatter(text)

        soup = BeautifulSoup(render_markdown(body), 'html.parser')
        self._prepare_images(soup)
        self._label_permalinks(soup)
        self.enhancer.enhance(soup, frontmatter)
        content = str(soup)

        issues = []
        if self.config.check_accessibility:
            issues = self.checker.check(content)

        return frontmatter, apply_template(content, frontmatter, self.config), issues

    def process_file(self, file_path: Path) -> FileResult:
        """
        Convert a single Markdown file to an HTML page.

        Errors are logged and reported on the result rather than raised.
        """
        file_path = Path(file_path)
        try:
            text = file_path.read_text(encoding='utf-8')
            _, page, issues = self.render_page(text)

            output_path = self.output_path_for(file_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(page, encoding='utf-8')
        except (OSError, UnicodeDecodeError, ValueError) as e:
            logger.error(f"Error processing file {file_path}: {e}")
            return FileResult(success=False, source_path=str(file_path), error=str(e))

        if issues:
            logger.warning(f"Accessibility issues in {file_path}: {len(issues)}")
            for issue in issues:
                logger.debug(f"  [{issue.type.value}] {issue.message}")

        logger.info(f"Generated: {output_path}")
        return FileResult(
            success=True,
            source_path=str(file_path),
            output_path=str(output_path),
            issues=issues,
        )

    def generate_index(self, files: List[Path]) -> Optional[str]:
        """
        Write index.html listing every page, grouped by directory.

        A hand-written index.md in the input root takes precedence.

        Returns:
            Path of the generated index, or None when skipped
        """
        output_path = self.output_dir / 'index.html'
        if (self.input_dir / 'index.md') in files:
            logger.info("index.md present, skipping generated index")
            return None

        groups: Dict[str, List[Tuple[str, str]]] = {}
        for file_path in files:
            relative = file_path.relative_to(self.input_dir)
            try:
                frontmatter, _ = parse_frontmatter(file_path.read_text(encoding='utf-8'))
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Could not read {file_path} for index: {e}")
                frontmatter = {}
            title = str(frontmatter.get('title') or file_path.stem)
            groups.setdefault(relative.parent.as_posix(), []).append(
                (relative.with_suffix('.html').as_posix(), title))

        parts = ['<nav aria-label="Documentation pages">']
        for directory, entries in groups.items():
            if directory != '.':
                parts.append(f'<h2>{html.escape(directory)}</h2>')
            parts.append('<ul>')
            for href, title in entries:
                parts.append(f'<li><a href="{html.escape(href)}">{html.escape(title)}</a></li>')
            parts.append('</ul>')
        parts.append('</nav>')

        frontmatter = {'title': 'Documentation Index'}
        soup = BeautifulSoup('\n'.join(parts), 'html.parser')
        self.enhancer.enhance(soup, frontmatter)
        page = apply_template(str(soup), frontmatter, self.config)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(page, encoding='utf-8')
        logger.info(f"Generated index: {output_path}")
        return str(output_path)

    def copy_assets(self) -> None:
        """Copy bundled assets, then custom assets, into the output directory."""
        destination = self.output_dir / self.config.assets_dir
        sources = [PACKAGE_ASSETS_DIR]
        if self.config.custom_assets:
            sources.append(Path(self.config.custom_assets))

        for source in sources:
            if not source.is_dir():
                logger.warning(f"Asset directory not found: {source}")
                continue
            try:
                shutil.copytree(source, destination, dirs_exist_ok=True)
            except (OSError, shutil.Error) as e:
                logger.error(f"Error copying assets from {source}: {e}")
                continue
            logger.debug(f"Copied assets from {source}")

    def _prepare_images(self, soup: BeautifulSoup) -> None:
        for img in soup.find_all('img'):
            if not img.has_attr('loading'):
                img['loading'] = 'lazy'
            if not (img.get('alt') or '').strip():
                logger.warning(f"Image has empty alt text: {img.get('src', '')}")

    def _label_permalinks(self, soup: BeautifulSoup) -> None:
        """Name heading permalinks after their target and keep them in the tab order."""
        for anchor in soup.select(f'a.{PERMALINK_CLASS}'):
            label = f'Permalink to "{anchor.get("href", "").lstrip("#")}"'
            anchor['aria-label'] = label
            anchor['title'] = label
            anchor['tabindex'] = '0'


# =============================================================================
# Convenience Functions
# =============================================================================

def generate_docs(config: Optional[AccessDocsConfig] = None, **overrides) -> GenerationResult:
    """
    Build documentation with the given configuration.

    Args:
        config: Base configuration (defaults when omitted)
        **overrides: Configuration fields to override (input_dir, theme, ...)

    Returns:
        GenerationResult
    """
    config = config or AccessDocsConfig()
    for name, value in overrides.items():
        if not hasattr(config, name):
            raise TypeError(f"Unknown configuration option: {name}")
        setattr(config, name, value)
    return AccessibleDocGenerator(config=config).generate_docs()
