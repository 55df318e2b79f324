# Load environment variables FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

import os
import time
import uuid
from typing import Optional

from flask import Flask, g, jsonify, request


def create_app(search_service=None):
    """
    Create and configure an instance of the Flask application.

    Args:
        search_service: Pre-built SearchService (tests); built from the
            environment when None

    Raises:
        ConfigurationError: Required provider credentials are missing
    """
    app = Flask(__name__, instance_relative_config=True)

    app.config.from_mapping(
        JSON_SORT_KEYS=False,
        HOST=os.environ.get('FLASK_HOST', '127.0.0.1'),
        PORT=int(os.environ.get('FLASK_PORT', '5000')),
        DEBUG=os.environ.get('FLASK_DEBUG', 'false').lower() in ('true', '1', 'yes'),
    )

    # =============================================================================
    # LOGGING
    # =============================================================================
    from .log import configure_logging, debug_log_event, log

    configure_logging(os.environ.get('LOG_DIR') or app.instance_path)

    @app.before_request
    def assign_request_id():
        g.request_id = uuid.uuid4().hex[:12]
        g.request_start = time.time()

    @app.after_request
    def debug_request_log(response):
        duration_ms: Optional[int] = None
        start_time = getattr(g, 'request_start', None)
        if start_time:
            duration_ms = int((time.time() - start_time) * 1000)
        debug_log_event({
            'event': 'request',
            'method': request.method,
            'path': request.path,
            'query': request.query_string.decode('utf-8', errors='ignore'),
            'status': response.status_code,
            'duration_ms': duration_ms
        })
        return response

    # =============================================================================
    # SEARCH ENGINE
    # =============================================================================
    if search_service is None:
        from .search import SearchService
        search_service = SearchService.from_env()
    app.extensions['search_service'] = search_service

    # =============================================================================
    # BLUEPRINTS & ROUTES
    # =============================================================================
    from .routes.search_api import search_bp

    app.register_blueprint(search_bp)

    @app.route('/api/health')
    def health():
        return jsonify({'status': 'ok'})

    log(f"MediaShelf ready on http://{app.config['HOST']}:{app.config['PORT']}")
    if app.config['DEBUG']:
        log("Debug mode is ON - do not use in production!")

    return app

# App instance should be created by the caller (run.py or WSGI entrypoint)
