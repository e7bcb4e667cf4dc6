"""
Tests for the Accessible Documentation Generator.
"""

from unittest.mock import patch

import pytest
from bs4 import BeautifulSoup

from accessdocs.accessibility_checker import AccessibilityChecker
from accessdocs.config import AccessDocsConfig
from accessdocs.generator import (
    AccessibleDocGenerator,
    generate_docs,
    parse_frontmatter,
    render_markdown,
)
from accessdocs.html_validator import HTMLValidator
from accessdocs.issues import IssueKind


class NullValidator(HTMLValidator):
    def validate(self, html):
        return []


GUIDE = """---
title: User Guide
description: How to use the tool
language: fr
---

Intro paragraph.

## Install

See [the site](https://example.com).

```python
print("hi")
```
"""


@pytest.fixture
def site(tmp_path):
    """A small documentation tree with one top-level and one nested page."""
    docs = tmp_path / 'docs'
    (docs / 'api').mkdir(parents=True)
    (docs / 'guide.md').write_text(GUIDE, encoding='utf-8')
    (docs / 'api' / 'reference.md').write_text('# Reference\n\nText.\n', encoding='utf-8')
    return tmp_path


def make_generator(site, **overrides):
    config = AccessDocsConfig(
        input_dir=str(site / 'docs'),
        output_dir=str(site / 'build'),
        **overrides,
    )
    checker = AccessibilityChecker(config, validator=NullValidator())
    return AccessibleDocGenerator(config=config, checker=checker)


class TestFrontmatter:
    """Tests for front matter parsing."""

    def test_valid(self):
        """Test valid front matter is parsed and stripped."""
        data, body = parse_frontmatter("---\ntitle: Guide\ntags: [a, b]\n---\n# Body\n")
        assert data == {'title': 'Guide', 'tags': ['a', 'b']}
        assert body == "# Body\n"

    def test_absent(self):
        """Test documents without front matter are unchanged."""
        data, body = parse_frontmatter("# Just content\n")
        assert data == {}
        assert body == "# Just content\n"

    def test_malformed(self, caplog):
        """Test malformed front matter is ignored with a warning."""
        data, body = parse_frontmatter("---\ntitle: [unclosed\n---\nBody\n")
        assert data == {}
        assert body == "Body\n"
        assert 'malformed front matter' in caplog.text

    def test_not_a_mapping(self):
        """Test front matter that is not a mapping is ignored."""
        data, body = parse_frontmatter("---\n- one\n- two\n---\nBody\n")
        assert data == {}
        assert body == "Body\n"

    def test_separator_later_in_document_is_not_frontmatter(self):
        """Test separator later in document is not frontmatter."""
        text = "Intro\n\n---\ntitle: x\n---\n"
        assert parse_frontmatter(text) == ({}, text)

    def test_empty_block_is_stripped(self):
        """Test an empty front matter block is removed from the body."""
        assert parse_frontmatter("---\n---\n# Body\n") == ({}, "# Body\n")
        assert parse_frontmatter("---\n\n---\nBody\n") == ({}, "Body\n")


class TestRenderMarkdown:
    """Tests for Markdown rendering."""

    def test_extensions(self):
        """Test tables and fenced code are rendered."""
        html = render_markdown("| A | B |\n|---|---|\n| 1 | 2 |\n\n```\ncode\n```\n")
        assert '<table>' in html
        assert '<pre><code>' in html

    def test_heading_permalinks(self):
        """Test headings get an id and a permalink anchor."""
        soup = BeautifulSoup(render_markdown("## Hello, World!  Foo\n"), 'html.parser')

        heading = soup.find('h2')
        assert heading['id'] == 'hello-world-foo'
        anchor = heading.find('a', class_='header-anchor')
        assert anchor['href'] == '#hello-world-foo'
        assert anchor.get_text() == '#'


class TestRenderPage:
    """Tests for single page rendering."""

    def test_page_is_enhanced_and_templated(self, site):
        """Test page is enhanced and templated."""
        generator = make_generator(site)

        frontmatter, page, _ = generator.render_page(GUIDE)
        soup = BeautifulSoup(page, 'html.parser')

        assert frontmatter['title'] == 'User Guide'
        assert soup.html['lang'] == 'fr'
        assert soup.title.string == 'User Guide'
        heading = soup.find('h2', id='install')
        assert heading['id'] == 'install'
        assert heading['tabindex'] == '-1'
        link = soup.find('a', href='https://example.com')
        assert link['aria-label'] == 'the site (external link)'
        assert 'noopener' in link['rel']
        assert soup.find('pre')['role'] == 'region'

    def test_permalinks_labelled(self, site):
        """Test permalink anchors are named and reachable by keyboard."""
        generator = make_generator(site)

        _, page, issues = generator.render_page("## Getting Started\n\nText.\n")

        anchor = BeautifulSoup(page, 'html.parser').find('a', class_='header-anchor')
        assert anchor['href'] == '#getting-started'
        assert anchor['aria-label'] == 'Permalink to "getting-started"'
        assert anchor['title'] == 'Permalink to "getting-started"'
        assert anchor['tabindex'] == '0'
        assert not [issue for issue in issues if issue.type == IssueKind.KEYBOARD]

    def test_images_lazy_loaded(self, site, caplog):
        """Test images are lazy loaded."""
        generator = make_generator(site, check_accessibility=False)

        _, page, _ = generator.render_page("![](diagram.png)\n")

        img = BeautifulSoup(page, 'html.parser').find('img')
        assert img['loading'] == 'lazy'
        assert 'empty alt text' in caplog.text

    def test_audit_disabled(self, site):
        """Test the audit is skipped when disabled."""
        generator = make_generator(site, check_accessibility=False)
        with patch.object(AccessibilityChecker, 'check') as check:
            _, _, issues = generator.render_page(GUIDE)
        check.assert_not_called()
        assert issues == []

    def test_audit_reports_issues(self, site):
        """Test audit reports issues."""
        generator = make_generator(site)
        _, _, issues = generator.render_page("# Title\n\n#### Skipped levels\n")
        assert any(issue.type == IssueKind.HEADING for issue in issues)


class TestGenerateDocs:
    """End-to-end builds on a temporary tree."""

    def test_build(self, site):
        """Test a full build writes pages, the index and assets."""
        result = make_generator(site).generate_docs()

        build = site / 'build'
        assert result.success is True
        assert result.files_processed == 2
        assert (build / 'guide.html').is_file()
        assert (build / 'api' / 'reference.html').is_file()
        assert (build / 'index.html').is_file()
        assert (build / 'assets' / 'css' / 'base.css').is_file()
        assert (build / 'assets' / 'css' / 'themes' / 'dark.css').is_file()
        assert (build / 'assets' / 'js' / 'accessibility.js').is_file()
        assert str(build / 'index.html') in result.outputs
        assert result.failed_files == {}

    def test_index_grouped_by_directory(self, site):
        """Test index grouped by directory."""
        make_generator(site).generate_docs()

        soup = BeautifulSoup((site / 'build' / 'index.html').read_text(), 'html.parser')
        assert soup.title.string == 'Documentation Index'
        assert soup.find('h2', string='api') is not None
        hrefs = [a['href'] for a in soup.select('nav[aria-label="Documentation pages"] a')]
        assert hrefs == ['api/reference.html', 'guide.html']
        assert soup.find('a', href='guide.html').get_text() == 'User Guide'

    def test_index_md_takes_precedence(self, site):
        """Test index.md replaces the generated index."""
        (site / 'docs' / 'index.md').write_text('---\ntitle: Welcome\n---\nHello\n')

        make_generator(site).generate_docs()

        soup = BeautifulSoup((site / 'build' / 'index.html').read_text(), 'html.parser')
        assert soup.title.string == 'Welcome'

    def test_index_disabled(self, site):
        """Test the generated index can be turned off."""
        make_generator(site, generate_index=False).generate_docs()
        assert not (site / 'build' / 'index.html').exists()

    def test_issues_collected_per_file(self, site):
        """Test issues collected per file."""
        (site / 'docs' / 'broken.md').write_text('# Top\n\n#### Deep\n')

        result = make_generator(site).generate_docs()

        broken = str(site / 'docs' / 'broken.md')
        assert result.success is True
        assert broken in result.issues
        assert result.total_issues >= 1

    def test_missing_input_directory(self, tmp_path):
        """Test missing input directory."""
        config = AccessDocsConfig(input_dir=str(tmp_path / 'missing'), output_dir=str(tmp_path / 'out'))
        result = AccessibleDocGenerator(config=config).generate_docs()
        assert result.success is False
        assert 'Input directory not found' in result.error

    def test_unreadable_file_does_not_stop_build(self, site):
        """Test unreadable file does not stop build."""
        (site / 'docs' / 'binary.md').write_bytes(b'\xff\xfe\x00bad')

        result = make_generator(site).generate_docs()

        assert result.success is True
        assert str(site / 'docs' / 'binary.md') in result.failed_files
        assert (site / 'build' / 'guide.html').is_file()

    def test_custom_assets_copied(self, site):
        """Test custom assets copied."""
        custom = site / 'extra'
        (custom / 'img').mkdir(parents=True)
        (custom / 'img' / 'logo.svg').write_text('<svg/>')

        make_generator(site, custom_assets=str(custom)).generate_docs()

        assert (site / 'build' / 'assets' / 'img' / 'logo.svg').is_file()
        assert (site / 'build' / 'assets' / 'css' / 'base.css').is_file()

    def test_convenience_function(self, site):
        """Test generate_docs with overrides."""
        config = AccessDocsConfig(check_accessibility=False)
        result = generate_docs(config, input_dir=str(site / 'docs'), output_dir=str(site / 'out'))
        assert result.success is True
        assert (site / 'out' / 'guide.html').is_file()

    def test_convenience_function_unknown_option(self):
        """Test generate_docs rejects unknown options."""
        with pytest.raises(TypeError):
            generate_docs(colour='blue')
