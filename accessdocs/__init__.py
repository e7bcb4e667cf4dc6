"""
AccessDocs

Static documentation generator focused on accessibility: Markdown in,
WCAG-oriented HTML out.

Features:
- ARIA enhancement of rendered pages:
  - Landmarks, skip link and document language
  - Heading ids for anchor navigation
  - Labelled tables, forms, code blocks and links
- Accessibility audit of every page:
  - WCAG rule engine (pluggable)
  - Heading hierarchy, color contrast, ARIA usage
  - Keyboard and screen reader hazards
  - HTML validity via the Nu HTML Checker
- JSON/YAML configuration, preview server and watch mode

Usage:
    accessdocs init my-project
    accessdocs build -i docs -o build
    accessdocs check build/index.html
"""

__version__ = '1.0.0'

from .exceptions import (
    AccessDocsError,
    ConfigurationError,
    ValidatorError,
)

from .config import (
    AccessDocsConfig,
    load_config,
    create_default_config,
)

from .issues import (
    AccessibilityIssue,
    AccessibilityReport,
    IssueKind,
)

from .aria_enhancer import (
    AriaEnhancer,
    EnhancerOptions,
    enhance_html,
    slugify_heading,
)

from .wcag_engine import (
    WCAGEngine,
    BuiltinWCAGEngine,
    WCAGRule,
)

from .html_validator import (
    HTMLValidator,
    NuHTMLValidator,
    ValidationMessage,
)

from .accessibility_checker import (
    AccessibilityChecker,
    check_accessibility,
)

from .templates import apply_template

from .generator import (
    AccessibleDocGenerator,
    FileResult,
    GenerationResult,
    generate_docs,
    parse_frontmatter,
)

__all__ = [
    # Errors
    'AccessDocsError',
    'ConfigurationError',
    'ValidatorError',
    # Configuration
    'AccessDocsConfig',
    'load_config',
    'create_default_config',
    # Issues
    'AccessibilityIssue',
    'AccessibilityReport',
    'IssueKind',
    # Enhancement
    'AriaEnhancer',
    'EnhancerOptions',
    'enhance_html',
    'slugify_heading',
    # Auditing
    'WCAGEngine',
    'BuiltinWCAGEngine',
    'WCAGRule',
    'HTMLValidator',
    'NuHTMLValidator',
    'ValidationMessage',
    'AccessibilityChecker',
    'check_accessibility',
    # Generation
    'apply_template',
    'AccessibleDocGenerator',
    'FileResult',
    'GenerationResult',
    'generate_docs',
    'parse_frontmatter',
]
