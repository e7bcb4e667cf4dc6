#!/usr/bin/env python3
"""
AccessDocs CLI

Command-line interface for building and testing accessible documentation.

Usage:
    accessdocs init [directory]
    accessdocs build [-c CONFIG] [-i INPUT] [-o OUTPUT] [-w]
    accessdocs test [-c CONFIG] [-i INPUT] [-o OUTPUT] [-l LEVEL] [--strict]
    accessdocs check FILE [-f text|json] [-o OUTPUT]
    accessdocs serve [-c CONFIG] [-p PORT] [-o OUTPUT] [-w]
"""

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .accessibility_checker import AccessibilityChecker
from .config import AccessDocsConfig, create_default_config, load_config
from .exceptions import ConfigurationError
from .generator import AccessibleDocGenerator, GenerationResult

logger = logging.getLogger(__name__)

SAMPLE_DOCUMENT = """---
title: Getting Started with AccessDocs
description: Learn how to create accessible documentation using AccessDocs
language: en
---

# Getting Started with AccessDocs

AccessDocs is a documentation generator focused on creating highly accessible
documentation that works with screen readers and other assistive technologies.

## Basic Usage

1. Add your Markdown content to the `docs` directory.
2. Build your documentation:

```bash
accessdocs build
```

3. Preview your documentation:

```bash
accessdocs serve
```

## Accessibility Features

- **Screen Reader Optimization**: content is structured for screen reader navigation
- **Keyboard Navigation**: full keyboard support with visible focus indicators
- **High Contrast Mode**: toggle between standard and high contrast views
- **Font Size Controls**: adjust text size for readability
- **WCAG Checks**: every page is audited against WCAG guidelines
"""


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(message)s'
    )


def parse_args(args: list = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    # -v is accepted before or after the command
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        '-v', '--verbose',
        action='store_true',
        default=argparse.SUPPRESS,
        help='Enable verbose output'
    )

    parser = argparse.ArgumentParser(
        prog='accessdocs',
        description='Generate accessible documentation from Markdown',
        epilog='Example: accessdocs build -i docs -o build',
        parents=[common],
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    subparsers.required = True

    # init
    init_parser = subparsers.add_parser(
        'init', parents=[common], help='Initialize a new documentation project')
    init_parser.add_argument(
        'directory',
        nargs='?',
        default='.',
        help='Project directory (default: current directory)'
    )
    init_parser.add_argument(
        '--format',
        choices=['json', 'yaml'],
        default='json',
        help='Configuration file format (default: json)'
    )

    # build
    build_parser = subparsers.add_parser('build', parents=[common], help='Build documentation')
    _add_config_arg(build_parser)
    _add_input_arg(build_parser)
    _add_output_arg(build_parser)
    _add_watch_arg(build_parser)

    # test
    test_parser = subparsers.add_parser(
        'test', parents=[common], help='Test documentation for accessibility issues')
    _add_config_arg(test_parser)
    _add_input_arg(test_parser)
    _add_output_arg(test_parser)
    test_parser.add_argument(
        '-l', '--level',
        choices=['A', 'AA', 'AAA'],
        default=None,
        help='WCAG level reported (default: from configuration, AA)'
    )
    test_parser.add_argument(
        '--strict',
        action='store_true',
        help='Exit with status 1 when any accessibility issue is found'
    )

    # check
    check_parser = subparsers.add_parser(
        'check', parents=[common], help='Check a single HTML file for accessibility issues')
    check_parser.add_argument(
        'file',
        type=str,
        help='Path to HTML file'
    )
    _add_config_arg(check_parser)
    check_parser.add_argument(
        '-f', '--format',
        choices=['text', 'json'],
        default='text',
        help='Report format (default: text)'
    )
    check_parser.add_argument(
        '-o', '--output',
        type=str,
        default=None,
        help='Write the report to a file instead of stdout'
    )
    check_parser.add_argument(
        '--strict',
        action='store_true',
        help='Exit with status 1 when any accessibility issue is found'
    )

    # serve
    serve_parser = subparsers.add_parser('serve', parents=[common], help='Serve documentation')
    _add_config_arg(serve_parser)
    serve_parser.add_argument(
        '-p', '--port',
        type=int,
        default=3000,
        help='Port to serve on (default: 3000)'
    )
    _add_output_arg(serve_parser)
    _add_watch_arg(serve_parser)

    return parser.parse_args(args)


def _add_config_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('-c', '--config', type=str, default=None,
                        help='Path to configuration file')


def _add_input_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('-i', '--input', type=str, default=None,
                        help='Input directory')


def _add_output_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('-o', '--output', type=str, default=None,
                        help='Output directory')


def _add_watch_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('-w', '--watch', action='store_true',
                        help='Watch for changes and rebuild')


def load_cli_config(parsed: argparse.Namespace) -> AccessDocsConfig:
    """Load configuration and apply command-line overrides."""
    config = load_config(getattr(parsed, 'config', None))
    if getattr(parsed, 'input', None):
        config.input_dir = parsed.input
    if getattr(parsed, 'output', None):
        config.output_dir = parsed.output
    if getattr(parsed, 'watch', False):
        config.watch = True
    if getattr(parsed, 'verbose', False):
        config.verbose = True
    return config


def print_summary(result: GenerationResult) -> None:
    print(f"\nDocumentation built successfully ({result.files_processed} files)")
    for source, error in result.failed_files.items():
        print(f"  Failed: {source}: {error}")
    if result.total_issues:
        print(f"  Accessibility issues: {result.total_issues} in {len(result.issues)} file(s)")


# =============================================================================
# Commands
# =============================================================================

def cmd_init(parsed: argparse.Namespace) -> int:
    project = Path(parsed.directory).resolve()
    config = AccessDocsConfig()

    for directory in (
        project / config.input_dir,
        project / 'assets' / 'css',
        project / 'assets' / 'js',
        project / 'assets' / 'images',
    ):
        directory.mkdir(parents=True, exist_ok=True)

    suffix = 'json' if parsed.format == 'json' else 'yaml'
    config_path = project / f'accessdocs.config.{suffix}'
    if config_path.exists():
        logger.warning(f"Configuration file already exists, leaving it unchanged: {config_path}")
    else:
        create_default_config(config_path, parsed.format)

    sample_path = project / config.input_dir / 'getting-started.md'
    if not sample_path.exists():
        sample_path.write_text(SAMPLE_DOCUMENT, encoding='utf-8')

    print("\nProject initialized successfully!")
    print(f"  Configuration: {config_path}")
    print(f"  Sample page:   {sample_path}")
    print("\nNext steps:")
    print(f"  1. Add your Markdown files to the {config.input_dir} directory")
    print(f"  2. Customize your configuration in {config_path.name}")
    print("  3. Build your documentation with: accessdocs build")
    print("  4. Preview your documentation with: accessdocs serve")
    return 0


def cmd_build(parsed: argparse.Namespace) -> int:
    config = load_cli_config(parsed)
    generator = AccessibleDocGenerator(config=config)

    result = generator.generate_docs()
    if not result.success:
        logger.error(f"Failed to build documentation: {result.error}")
        return 1
    print_summary(result)

    if config.watch:
        from .watcher import watch
        watch(config.input_dir, generator.generate_docs)
    return 0


def cmd_test(parsed: argparse.Namespace) -> int:
    config = load_cli_config(parsed)
    if parsed.level:
        config.wcag_level = parsed.level
    config.enable_all_checks()

    generator = AccessibleDocGenerator(config=config)
    result = generator.generate_docs()
    if not result.success:
        logger.error(f"Failed to test documentation: {result.error}")
        return 1

    print(f"\nAccessibility testing completed (WCAG {config.wcag_level})")
    print(f"  Files checked: {result.files_processed}")
    print(f"  Total issues:  {result.total_issues}")
    for source, issues in result.issues.items():
        print(f"\n{source}:")
        for issue in issues:
            print(f"  [{issue.type.value}] {issue.message}")

    if parsed.strict and result.total_issues:
        return 1
    return 0


def cmd_check(parsed: argparse.Namespace) -> int:
    file_path = Path(parsed.file)
    if not file_path.is_file():
        logger.error(f"Input file not found: {file_path}")
        return 1

    config = load_config(parsed.config)
    report = AccessibilityChecker(config).check_file(file_path)
    content = report.to_json() if parsed.format == 'json' else report.to_text()

    if parsed.output:
        Path(parsed.output).write_text(content, encoding='utf-8')
        logger.info(f"Report written to {parsed.output}")
    else:
        print(content)

    if parsed.strict and report.total_issues:
        return 1
    return 0


def cmd_serve(parsed: argparse.Namespace) -> int:
    from . import server

    config = load_cli_config(parsed)
    generator = AccessibleDocGenerator(config=config)

    if not Path(config.output_dir).exists():
        result = generator.generate_docs()
        if not result.success:
            logger.error(f"Failed to build documentation: {result.error}")
            return 1
        print_summary(result)

    observer = None
    if config.watch:
        from .watcher import start_watcher
        observer = start_watcher(config.input_dir, generator.generate_docs)

    try:
        server.start(config.output_dir, parsed.port, checker=generator.checker)
    except OSError as e:
        logger.error(f"Could not start server on port {parsed.port}: {e}")
        return 1
    finally:
        if observer is not None:
            observer.stop()
            observer.join()
    return 0


COMMANDS = {
    'init': cmd_init,
    'build': cmd_build,
    'test': cmd_test,
    'check': cmd_check,
    'serve': cmd_serve,
}


def main(args: list = None) -> int:
    """
    Main entry point for CLI.

    Args:
        args: Command-line arguments (default: sys.argv)

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parsed = parse_args(args)
    setup_logging(getattr(parsed, 'verbose', False))

    try:
        return COMMANDS[parsed.command](parsed)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1


if __name__ == '__main__':
    sys.exit(main())
