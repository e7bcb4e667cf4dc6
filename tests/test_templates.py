"""
Tests for the page template.
"""

from bs4 import BeautifulSoup

from accessdocs.config import AccessDocsConfig
from accessdocs.templates import apply_template


def render(content='<p>Body</p>', frontmatter=None, **config):
    html = apply_template(content, frontmatter, AccessDocsConfig(**config))
    return BeautifulSoup(html, 'html.parser')


class TestApplyTemplate:
    """Tests for apply_template."""

    def test_defaults(self):
        """Test the default page structure."""
        soup = render()
        assert soup.html['lang'] == 'en'
        assert soup.title.string == 'Documentation'
        assert soup.find('link', id='theme-stylesheet')['href'] == '/assets/css/themes/light.css'
        assert soup.select_one('a.skip-link')['href'] == '#main-content'
        main = soup.find('main')
        assert main['id'] == 'main-content'
        assert main['tabindex'] == '-1'
        assert main.find('p').string == 'Body'

    def test_frontmatter(self):
        """Test front matter values in the page."""
        soup = render(frontmatter={
            'title': 'Guide', 'description': 'About things', 'language': 'de', 'theme': 'dark',
        })
        assert soup.html['lang'] == 'de'
        assert soup.title.string == 'Guide'
        assert soup.find('h1').string == 'Guide'
        assert soup.find('meta', attrs={'name': 'description'})['content'] == 'About things'
        assert soup.find('link', id='theme-stylesheet')['href'].endswith('/dark.css')
        assert soup.find('option', selected=True)['value'] == 'dark'

    def test_title_is_escaped(self):
        """Test title is escaped."""
        html = apply_template('<p>x</p>', {'title': '<script>alert(1)</script>'})
        assert '<script>alert(1)</script>' not in html
        assert '&lt;script&gt;' in html

    def test_content_is_not_escaped(self):
        """Test content is not escaped."""
        soup = render('<table role="table"><tr role="row"><td role="cell">1</td></tr></table>')
        assert soup.find('table')['role'] == 'table'

    def test_config_theme_and_nav(self):
        """Test config theme and nav."""
        soup = render(theme='sepia', nav_links=[{'url': '/api/', 'title': 'API'}],
                      footer_text='Licensed under MIT', assets_dir='static/')
        nav = soup.find('nav', attrs={'aria-label': 'Main Navigation'})
        assert [a['href'] for a in nav.find_all('a')] == ['/', '/api/']
        assert soup.find('link', id='theme-stylesheet')['href'] == '/static/css/themes/sepia.css'
        assert 'Licensed under MIT' in soup.find('footer').get_text()

    def test_theme_selector_excludes_high_contrast(self):
        """Test theme selector excludes high contrast."""
        soup = render()
        values = [option['value'] for option in soup.select('#theme-selector option')]
        assert values == ['light', 'dark', 'sepia']

    def test_custom_css(self):
        """Test a custom stylesheet is linked."""
        soup = render(custom_css='/extra.css')
        assert soup.find('link', href='/extra.css') is not None
