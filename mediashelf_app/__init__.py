# Load environment variables FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

import os
import time
import uuid
from flask import Flask, jsonify, request
from flask import g


def create_app(settings=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)

    # =============================================================================
    # CONFIGURATION
    # =============================================================================
    from .config import Settings

    app.config.from_mapping(
        JSON_SORT_KEYS=False,
        SECRET_KEY=os.environ.get('SECRET_KEY', 'dev'),
        LOOKUP_SETTINGS=settings or Settings.from_env(),
        LOOKUP_SERVICE_FACTORY=None,
    )

    # Ensure instance folder exists
    os.makedirs(app.instance_path, exist_ok=True)

    # =============================================================================
    # LOGGING
    # =============================================================================
    from .log import log, debug_log_event

    @app.before_request
    def assign_request_id():
        g.request_id = uuid.uuid4().hex[:12]
        g.request_start = time.time()

    @app.after_request
    def debug_request_log(response):
        duration_ms = None
        start_time = getattr(g, 'request_start', None)
        if start_time:
            duration_ms = int((time.time() - start_time) * 1000)
        debug_log_event({
            'event': 'request',
            'request_id': getattr(g, 'request_id', None),
            'method': request.method,
            'path': request.path,
            'query': request.query_string.decode('utf-8', errors='ignore'),
            'status': response.status_code,
            'duration_ms': duration_ms,
            'remote_addr': request.remote_addr,
        })
        return response

    @app.teardown_request
    def debug_exception_log(error=None):
        if not error:
            return
        debug_log_event({
            'event': 'exception',
            'request_id': getattr(g, 'request_id', None),
            'path': request.path,
            'error_type': error.__class__.__name__,
            'error': str(error)
        })

    # =============================================================================
    # BLUEPRINTS & ROUTES
    # =============================================================================
    from .routes.lookup_api import lookup_api_bp
    from .routes.taxonomy_api import taxonomy_api_bp

    app.register_blueprint(lookup_api_bp)
    app.register_blueprint(taxonomy_api_bp)

    @app.route('/api/health')
    def health():
        from .database import check_database_connection
        return jsonify({'status': 'ok', 'database': check_database_connection()})

    # =============================================================================
    # INITIALIZATION
    # =============================================================================
    from .database import init_database
    from .lookup.service import build_adapters
    from .lookup.models import ContentKind

    init_database()

    lookup_settings = app.config['LOOKUP_SETTINGS']
    log("=" * 60)
    log("  MediaShelf - Catalog Lookup")
    log("=" * 60)
    for kind in ContentKind:
        names = []
        for adapter in build_adapters(kind, lookup_settings):
            status = "✅" if adapter.is_available else "❌"
            names.append(f"{status} {adapter.name}")
        log(f"📚 {kind.value}: {', '.join(names) or 'no sources enabled'}")

    # Set config for app.run()
    app.config['HOST'] = os.environ.get('FLASK_HOST', '127.0.0.1')
    app.config['PORT'] = int(os.environ.get('FLASK_PORT', '5000'))
    app.config['DEBUG'] = os.environ.get('FLASK_DEBUG', 'false').lower() in ('true', '1', 'yes')

    log(f"🌐 Server: http://{app.config['HOST']}:{app.config['PORT']}")
    if app.config['DEBUG']:
        log("⚠️  Debug mode is ON - do not use in production!")

    return app

# App instance should be created by the caller (run.py or WSGI entrypoint)
