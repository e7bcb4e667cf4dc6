"""
Preview server for generated documentation.

Serves the built site and exposes an accessibility check endpoint:

    POST /api/check-accessibility   (body: HTML)  ->  JSON list of issues
"""

import logging
from pathlib import Path
from typing import Optional, Union

from flask import Flask, current_app, jsonify, request, send_from_directory
from werkzeug.exceptions import NotFound

from .accessibility_checker import AccessibilityChecker

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3000
DEFAULT_HOST = '127.0.0.1'


def create_app(doc_root: Union[str, Path], checker: Optional[AccessibilityChecker] = None) -> Flask:
    """
    Application factory for the preview server.

    Args:
        doc_root: Directory containing the built site
        checker: Checker used by the API endpoint (default configuration
            when omitted)
    """
    app = Flask(__name__)
    app.config['DOC_ROOT'] = str(Path(doc_root).resolve())
    app.config['ACCESSIBILITY_CHECKER'] = checker or AccessibilityChecker()

    app.add_url_rule('/api/check-accessibility', 'check_accessibility',
                     check_accessibility_endpoint, methods=['POST'])
    app.add_url_rule('/', 'serve_file', serve_file, defaults={'path': ''})
    app.add_url_rule('/<path:path>', 'serve_file', serve_file)

    return app


def serve_file(path: str):
    """Serve a built file; directories map to index.html."""
    root = Path(current_app.config['DOC_ROOT'])

    if not path or path.endswith('/') or (root / path).is_dir():
        path = path.rstrip('/') + '/index.html' if path.strip('/') else 'index.html'

    try:
        return send_from_directory(root, path)
    except NotFound:
        # Extension-less URLs fall back to the site index
        if '.' not in Path(path).name:
            return send_from_directory(root, 'index.html')
        raise


def check_accessibility_endpoint():
    checker = current_app.config['ACCESSIBILITY_CHECKER']
    try:
        html = request.get_data(as_text=True)
        issues = checker.check(html)
    except Exception as e:
        logger.error(f"Accessibility check request failed: {e}")
        return jsonify({'error': str(e)}), 500
    return jsonify([issue.to_dict() for issue in issues])


def start(doc_root: Union[str, Path], port: int = DEFAULT_PORT, host: str = DEFAULT_HOST,
          checker: Optional[AccessibilityChecker] = None) -> None:
    """
    Run the preview server until interrupted.

    Raises:
        OSError: If the port cannot be bound
    """
    app = create_app(doc_root, checker)
    logger.info(f"Server running at http://{host}:{port}")
    app.run(host=host, port=port, debug=False, use_reloader=False)
