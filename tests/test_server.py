"""
Tests for the preview server.
"""

import pytest

from accessdocs.issues import AccessibilityIssue, IssueKind
from accessdocs.server import create_app


class StaticChecker:
    def __init__(self, issues=None):
        self.issues = issues or []
        self.received = []

    def check(self, html):
        self.received.append(html)
        return self.issues


class FailingChecker:
    def check(self, html):
        raise RuntimeError("checker exploded")


@pytest.fixture
def site(tmp_path):
    (tmp_path / 'guide').mkdir()
    (tmp_path / 'index.html').write_text('<html><body>Home</body></html>')
    (tmp_path / 'page.html').write_text('<html><body>Page</body></html>')
    (tmp_path / 'guide' / 'index.html').write_text('<html><body>Guide</body></html>')
    return tmp_path


def client_for(site, checker=None):
    app = create_app(site, checker or StaticChecker())
    app.config['TESTING'] = True
    return app.test_client()


class TestServeFile:
    """Tests for static file serving."""

    def test_root_serves_index(self, site):
        """Test root serves index."""
        response = client_for(site).get('/')
        assert response.status_code == 200
        assert b'Home' in response.data

    def test_file(self, site):
        """Test a built file is served."""
        response = client_for(site).get('/page.html')
        assert response.status_code == 200
        assert b'Page' in response.data

    @pytest.mark.parametrize('url', ['/guide', '/guide/'])
    def test_directory_serves_its_index(self, site, url):
        """Test directory serves its index."""
        response = client_for(site).get(url)
        assert response.status_code == 200
        assert b'Guide' in response.data

    def test_extensionless_fallback(self, site):
        """Test extensionless fallback."""
        response = client_for(site).get('/some/client/route')
        assert response.status_code == 200
        assert b'Home' in response.data

    def test_missing_file_with_extension(self, site):
        """Test missing file with extension."""
        assert client_for(site).get('/missing.css').status_code == 404

    def test_path_traversal_rejected(self, site):
        """Test path traversal rejected."""
        assert client_for(site / 'guide').get('/../page.html').status_code == 404


class TestCheckAccessibilityEndpoint:
    """Tests for POST /api/check-accessibility."""

    def test_returns_issues(self, site):
        """Test issues are returned as JSON."""
        checker = StaticChecker([AccessibilityIssue(
            type=IssueKind.HEADING, message="Document has no headings")])

        response = client_for(site, checker).post(
            '/api/check-accessibility', data='<p>x</p>', content_type='text/html')

        assert response.status_code == 200
        assert response.get_json() == [{'type': 'heading', 'message': 'Document has no headings'}]
        assert checker.received == ['<p>x</p>']

    def test_no_issues(self, site):
        """Test an empty issue list."""
        response = client_for(site).post('/api/check-accessibility', data='<h1>x</h1>')
        assert response.get_json() == []

    def test_checker_failure(self, site):
        """Test checker errors return status 500."""
        response = client_for(site, FailingChecker()).post(
            '/api/check-accessibility', data='<p>x</p>')
        assert response.status_code == 500
        assert response.get_json() == {'error': 'checker exploded'}
