"""
Tests for configuration loading.
"""

import json

import pytest
import yaml

from accessdocs.config import (
    CONFIG_ENV_VAR,
    AccessDocsConfig,
    create_default_config,
    load_config,
    normalize_key,
)
from accessdocs.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def no_config_env(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


class TestAccessDocsConfig:
    """Tests for AccessDocsConfig dataclass."""

    def test_defaults(self):
        """Test default configuration values."""
        config = AccessDocsConfig()
        assert config.input_dir == 'docs'
        assert config.output_dir == 'build'
        assert config.theme == 'light'
        assert config.wcag_level == 'AA'
        assert config.nav_links == []
        assert config.check_wcag is True
        assert config.validate_html is True
        assert config.validator_url == 'https://validator.w3.org/nu/'

    def test_enable_all_checks(self):
        """Test enable all checks."""
        config = AccessDocsConfig(check_accessibility=False, check_aria=False, validate_html=False)
        config.enable_all_checks()
        assert config.check_accessibility is True
        assert config.check_aria is True
        assert config.validate_html is True

    def test_from_dict_ignores_unknown_keys(self, caplog):
        """Test from dict ignores unknown keys."""
        config = AccessDocsConfig.from_dict({'theme': 'dark', 'generateSimplifiedView': True})
        assert config.theme == 'dark'
        assert 'generateSimplifiedView' in caplog.text


class TestNormalizeKey:
    """Tests for camelCase option names."""

    @pytest.mark.parametrize('key,expected', [
        ('checkWCAG', 'check_wcag'),
        ('validateHTML', 'validate_html'),
        ('checkARIA', 'check_aria'),
        ('indicateExternalLinks', 'indicate_external_links'),
        ('checkScreenReaderAnnouncements', 'check_screen_reader_announcements'),
        ('input_dir', 'input_dir'),
    ])
    def test_normalize(self, key, expected):
        """Test camelCase keys are converted to snake_case."""
        assert normalize_key(key) == expected


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_file(self, tmp_path):
        """Test defaults are used when no file exists."""
        config = load_config(cwd=tmp_path)
        assert config == AccessDocsConfig()

    def test_discovered_json_camel_case(self, tmp_path):
        """Test a discovered JSON file with camelCase keys."""
        (tmp_path / 'accessdocs.config.json').write_text(json.dumps({
            'inputDir': 'content',
            'checkWCAG': False,
            'navLinks': [{'url': '/api/', 'title': 'API'}],
        }))

        config = load_config(cwd=tmp_path)

        assert config.input_dir == 'content'
        assert config.check_wcag is False
        assert config.nav_links == [{'url': '/api/', 'title': 'API'}]

    def test_discovered_rc_yaml(self, tmp_path):
        """Test a discovered .accessdocsrc YAML file."""
        (tmp_path / '.accessdocsrc').write_text("theme: sepia\nwcag_level: AAA\n")
        config = load_config(cwd=tmp_path)
        assert config.theme == 'sepia'
        assert config.wcag_level == 'AAA'

    def test_json_file_takes_precedence(self, tmp_path):
        """Test JSON file takes precedence."""
        (tmp_path / 'accessdocs.config.json').write_text('{"theme": "dark"}')
        (tmp_path / '.accessdocsrc.yaml').write_text('theme: sepia\n')
        assert load_config(cwd=tmp_path).theme == 'dark'

    def test_explicit_path(self, tmp_path):
        """Test loading an explicit config path."""
        path = tmp_path / 'custom.yml'
        path.write_text('outputDir: site\n')
        assert load_config(path).output_dir == 'site'

    def test_environment_variable(self, tmp_path, monkeypatch):
        """Test the config path environment variable."""
        path = tmp_path / 'env.json'
        path.write_text('{"footerText": "Hello"}')
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert load_config(cwd=tmp_path).footer_text == 'Hello'

    def test_explicit_missing_file(self, tmp_path):
        """Test explicit missing file."""
        with pytest.raises(ConfigurationError):
            load_config(tmp_path / 'missing.json')

    def test_explicit_invalid_file(self, tmp_path):
        """Test explicit invalid file."""
        path = tmp_path / 'bad.json'
        path.write_text('{not json')
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_discovered_invalid_file_falls_back(self, tmp_path, caplog):
        """Test discovered invalid file falls back."""
        (tmp_path / 'accessdocs.config.json').write_text('[1, 2, 3]')
        config = load_config(cwd=tmp_path)
        assert config == AccessDocsConfig()
        assert 'using default configuration' in caplog.text


class TestCreateDefaultConfig:
    """Tests for create_default_config."""

    def test_json(self, tmp_path):
        """Test writing the default JSON configuration."""
        path = create_default_config(tmp_path / 'accessdocs.config.json')
        data = json.loads(path.read_text())
        assert data['input_dir'] == 'docs'
        assert load_config(path) == AccessDocsConfig()

    def test_yaml(self, tmp_path):
        """Test writing the default YAML configuration."""
        path = create_default_config(tmp_path / 'accessdocs.config.yaml', fmt='yaml')
        data = yaml.safe_load(path.read_text())
        assert data['theme'] == 'light'

    def test_unknown_format(self, tmp_path):
        """Test an unknown configuration format is rejected."""
        with pytest.raises(ConfigurationError):
            create_default_config(tmp_path / 'config.toml', fmt='toml')
