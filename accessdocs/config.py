"""
Configuration loading for accessdocs.

Configuration files may be JSON or YAML. Keys are accepted in camelCase
(``checkWCAG``, ``indicateExternalLinks``) or snake_case
(``check_wcag``, ``indicate_external_links``).

Lookup order:
1. An explicit path (``--config``)
2. The ``ACCESSDOCS_CONFIG_PATH`` environment variable
3. The first existing file of ``CONFIG_FILENAMES`` in the working directory
"""

import json
import logging
import os
import re
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = 'ACCESSDOCS_CONFIG_PATH'

CONFIG_FILENAMES = (
    'accessdocs.config.json',
    'accessdocs.config.yaml',
    'accessdocs.config.yml',
    '.accessdocsrc',
    '.accessdocsrc.json',
    '.accessdocsrc.yaml',
)

WCAG_LEVELS = ('A', 'AA', 'AAA')


@dataclass
class AccessDocsConfig:
    """Configuration options for a documentation build."""
    # General settings
    input_dir: str = "docs"
    output_dir: str = "build"
    assets_dir: str = "assets"
    # Theme settings
    theme: str = "light"
    custom_css: Optional[str] = None
    # Navigation
    generate_index: bool = True
    nav_links: List[Dict[str, str]] = field(default_factory=list)
    # Accessibility settings
    wcag_level: str = "AA"
    indicate_external_links: bool = True
    check_accessibility: bool = True
    check_wcag: bool = True
    check_heading_hierarchy: bool = True
    check_color_contrast: bool = True
    validate_html: bool = True
    check_aria: bool = True
    check_keyboard_accessibility: bool = True
    check_screen_reader_announcements: bool = True
    # External markup validator
    validator_url: str = "https://validator.w3.org/nu/"
    validator_timeout: float = 10
    # Advanced settings
    custom_assets: Optional[str] = None
    footer_text: str = ""
    # Build settings
    watch: bool = False
    verbose: bool = False

    def enable_all_checks(self) -> None:
        """Turn on every accessibility check."""
        self.check_accessibility = True
        self.check_wcag = True
        self.check_heading_hierarchy = True
        self.check_color_contrast = True
        self.validate_html = True
        self.check_aria = True
        self.check_keyboard_accessibility = True
        self.check_screen_reader_announcements = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AccessDocsConfig':
        """Build a config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            name = normalize_key(key)
            if name not in known:
                logger.warning(f"Ignoring unknown configuration option: {key}")
                continue
            values[name] = value

        config = cls(**values)
        if config.wcag_level not in WCAG_LEVELS:
            logger.warning(f"Unknown WCAG level {config.wcag_level!r}, expected one of {', '.join(WCAG_LEVELS)}")
        return config


def normalize_key(key: str) -> str:
    """Convert a camelCase option name to snake_case (checkWCAG -> check_wcag)."""
    return re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', key).lower()


def read_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a JSON or YAML configuration file.

    Files without a .json suffix are parsed as YAML, which also accepts
    JSON content.

    Raises:
        ConfigurationError: If the file is missing or cannot be parsed
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        text = path.read_text(encoding='utf-8')
        if path.suffix.lower() == '.json':
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Error parsing configuration file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")
    return data


def find_config_file(cwd: Union[str, Path, None] = None) -> Optional[Path]:
    """Return the first configuration file present in ``cwd``."""
    base = Path(cwd) if cwd else Path.cwd()
    for filename in CONFIG_FILENAMES:
        candidate = base / filename
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Union[str, Path, None] = None,
                cwd: Union[str, Path, None] = None) -> AccessDocsConfig:
    """
    Load configuration merged over the defaults.

    Args:
        path: Explicit configuration file; missing or invalid files raise
        cwd: Directory searched for a configuration file

    Returns:
        AccessDocsConfig instance

    Raises:
        ConfigurationError: If an explicitly requested file cannot be loaded
    """
    explicit = path or os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        data = read_config_file(explicit)
        logger.info(f"Loaded configuration from {explicit}")
        return AccessDocsConfig.from_dict(data)

    discovered = find_config_file(cwd)
    if discovered is None:
        return AccessDocsConfig()

    try:
        data = read_config_file(discovered)
    except ConfigurationError as e:
        logger.warning(f"{e}; using default configuration")
        return AccessDocsConfig()

    logger.info(f"Loaded configuration from {discovered.name}")
    return AccessDocsConfig.from_dict(data)


def create_default_config(output_path: Union[str, Path], fmt: str = 'json') -> Path:
    """
    Write the default configuration to a file.

    Args:
        output_path: Destination file
        fmt: 'json' or 'yaml'

    Returns:
        Path of the written file
    """
    output_path = Path(output_path)
    data = AccessDocsConfig().to_dict()

    if fmt == 'json':
        content = json.dumps(data, indent=2) + '\n'
    elif fmt == 'yaml':
        content = yaml.safe_dump(data, sort_keys=False)
    else:
        raise ConfigurationError(f"Unsupported configuration format: {fmt}")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding='utf-8')
    return output_path
