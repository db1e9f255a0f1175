"""Flask application factory for the Kudos Board REST API."""

from flask import Flask, jsonify

from kudos.config import get_db_conn_info
from kudos_api import routes
from kudos_api.store import KudosStore


def _allow_cors(response):
    response.headers['Access-Control-Allow-Origin'] = '*'
    response.headers['Access-Control-Allow-Methods'] = 'GET, POST, PUT, DELETE, OPTIONS'
    response.headers['Access-Control-Allow-Headers'] = 'Content-Type'
    return response


def create_app(*, test_config=None, store=None):
    """Create and configure the API application.

    :param test_config: Optional config dictionary applied after app creation.
    :type test_config: dict | None
    :param store: Optional data-layer override (defaults to PostgreSQL).
    :type store: kudos_api.store.KudosStore | None
    :returns: Configured Flask app instance.
    :rtype: flask.Flask
    """
    app = Flask(__name__)
    app.config.from_mapping(DATABASE_CONN_INFO=get_db_conn_info())
    if test_config:
        app.config.update(test_config)
    app.extensions['kudos_store'] = store or KudosStore(app.config['DATABASE_CONN_INFO'])

    @app.route('/')
    def index():
        return jsonify({'message': 'Welcome to Kudos Board API'})

    @app.errorhandler(500)
    def internal_error(_exc):
        return jsonify({'error': 'Something went wrong!'}), 500

    app.after_request(_allow_cors)
    app.register_blueprint(routes.bp)
    return app
