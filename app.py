# app.py
from flask import Flask, jsonify, request, g
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix
import os
import logging
import time
import sys

from config import Config
from routes.bible import bible_bp
from routes.keys import keys_bp
from utils.api_keys import ApiKeyStore
from utils.corpus import CorpusService, CorpusStore, load_metadata

logger = logging.getLogger(__name__)


def configure_logging(level='INFO'):
    # Configure logging to output to stdout
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def create_app(overrides=None):
    """Build the Flask app.

    Loads the metadata and the API key file up front; a malformed one of
    either raises StorageError and the app is not created.
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    configure_logging(app.config['LOG_LEVEL'])

    data_dir = app.config['DATA_DIR']
    metadata_file = app.config.get('METADATA_FILE') or os.path.join(data_dir, 'metadata.json')
    api_keys_file = app.config.get('API_KEYS_FILE') or os.path.join(data_dir, 'api-keys.json')

    # Use ProxyFix to handle proxy headers properly
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    app.json.sort_keys = False  # Preserve book and chapter order in JSON responses
    app.json.compact = True

    CORS(app, resources={
        r"/api/*": {
            "origins": app.config['CORS_ORIGINS'],
            "methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["Content-Type", "X-API-Key"]
        }
    })

    app.url_map.strict_slashes = False

    try:
        logger.info(f"Loading corpus catalog from {metadata_file}")
        metadata = load_metadata(metadata_file)
        api_keys = ApiKeyStore(api_keys_file)
    except Exception as e:
        logger.error(f"Error initializing storage: {str(e)}")
        raise

    store = CorpusStore(data_dir, metadata)
    app.extensions['api_keys'] = api_keys
    app.extensions['corpus_service'] = CorpusService(store, api_keys)
    logger.info(f"Serving {len(metadata.translations)} translations from {data_dir}")

    app.register_blueprint(bible_bp, url_prefix='/api')
    app.register_blueprint(keys_bp, url_prefix='/api')

    @app.before_request
    def before_request():
        g.start_time = time.time()

    @app.after_request
    def after_request(response):
        # Log request duration
        duration = time.time() - g.get('start_time', time.time())
        logger.info(f"Request to {request.path} took {duration:.2f} seconds")
        return response

    @app.route('/health', methods=['GET'])
    def health():
        return jsonify({
            'status': 'healthy',
            'translations': len(store.translation_ids()),
            'loaded': store.loaded_count(),
            'timestamp': time.time()
        })

    return app


if __name__ == '__main__':
    print("Starting Flask server...")
    app = create_app()
    app.run(debug=True, port=app.config['PORT'])
