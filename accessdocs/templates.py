"""
Default page template for accessible documentation.

Wraps enhanced Markdown output in a complete HTML document with a skip
link, banner navigation, reader controls (contrast, font size, theme), a
table of contents sidebar, the main landmark and a footer.
"""

from typing import Any, Dict, Optional

from jinja2 import Environment, select_autoescape

from .config import AccessDocsConfig

THEMES = ('light', 'dark', 'sepia', 'high-contrast')

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="{{ language }}">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <meta name="description" content="{{ description }}">
    <title>{{ title }}</title>
    <link rel="stylesheet" href="{{ assets_url }}/css/base.css">
    <link rel="stylesheet" href="{{ assets_url }}/css/themes/{{ theme }}.css" id="theme-stylesheet">
    <link rel="stylesheet" href="{{ assets_url }}/css/themes/high-contrast.css" disabled id="high-contrast-stylesheet">
{% if custom_css %}
    <link rel="stylesheet" href="{{ custom_css }}">
{% endif %}
</head>
<body>
    <a href="#main-content" class="skip-link">Skip to main content</a>

    <header role="banner">
        <div class="container">
            <nav aria-label="Main Navigation">
                <ul>
                    <li><a href="/">Home</a></li>
{% for link in nav_links %}
                    <li><a href="{{ link.url }}">{{ link.title }}</a></li>
{% endfor %}
                </ul>
            </nav>

            <div class="a11y-controls">
                <button id="toggle-high-contrast" aria-pressed="false">High Contrast</button>
                <div class="font-size-controls">
                    <button id="decrease-font" aria-label="Decrease font size">A-</button>
                    <button id="reset-font" aria-label="Reset font size">A</button>
                    <button id="increase-font" aria-label="Increase font size">A+</button>
                </div>
                <select id="theme-selector" aria-label="Select theme">
{% for option in themes if option != 'high-contrast' %}
                    <option value="{{ option }}"{% if option == theme %} selected{% endif %}>{{ option|capitalize }}</option>
{% endfor %}
                </select>
            </div>
        </div>
    </header>

    <div class="container">
        <aside class="sidebar" role="complementary" aria-label="Table of Contents">
            <nav aria-label="Table of Contents">
                <div id="toc"></div>
            </nav>
        </aside>

        <main id="main-content" tabindex="-1">
            <article>
                <h1>{{ title }}</h1>
                {{ content|safe }}
            </article>
        </main>
    </div>

    <footer role="contentinfo">
        <div class="container">
            <p>Created with AccessDocs - Accessible Documentation Generator</p>
{% if footer_text %}
            <p>{{ footer_text }}</p>
{% endif %}
        </div>
    </footer>

    <script src="{{ assets_url }}/js/accessibility.js"></script>
    <script src="{{ assets_url }}/js/toc.js"></script>
</body>
</html>
"""

_environment = Environment(
    autoescape=select_autoescape(default_for_string=True),
    trim_blocks=True,
    lstrip_blocks=True,
)
_page = _environment.from_string(PAGE_TEMPLATE)


def apply_template(content: str, frontmatter: Optional[Dict[str, Any]] = None,
                   config: Optional[AccessDocsConfig] = None) -> str:
    """
    Render a complete HTML page around enhanced content.

    Args:
        content: Enhanced HTML fragment (inserted unescaped)
        frontmatter: Document metadata (title, description, language, theme)
        config: Build configuration (theme, navigation, footer)

    Returns:
        Complete HTML document
    """
    frontmatter = frontmatter or {}
    config = config or AccessDocsConfig()

    return _page.render(
        content=content,
        title=frontmatter.get('title') or 'Documentation',
        description=frontmatter.get('description') or '',
        language=frontmatter.get('language') or 'en',
        theme=frontmatter.get('theme') or config.theme or 'light',
        themes=THEMES,
        assets_url='/' + config.assets_dir.strip('/'),
        custom_css=config.custom_css,
        nav_links=config.nav_links or [],
        footer_text=config.footer_text,
    )
