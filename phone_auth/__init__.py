from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_cors import CORS
from datetime import datetime
import os
from dotenv import load_dotenv

load_dotenv()

db = SQLAlchemy()
migrate = Migrate()
limiter = Limiter(key_func=get_remote_address, default_limits=["100 per 15 minutes"])


def _database_url():
    url = os.getenv('DATABASE_URL', 'sqlite:///phone_auth.db')
    # Some hosts still hand out postgres:// URLs
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


def create_app(config_name='development', overrides=None):
    app = Flask(__name__)

    # Config
    app.config['SQLALCHEMY_DATABASE_URI'] = _database_url()
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['JWT_SECRET_KEY'] = os.getenv('JWT_SECRET_KEY', 'dev-secret')
    app.config['JWT_ACCESS_TOKEN_EXPIRES'] = int(os.getenv('JWT_ACCESS_TOKEN_EXPIRES', 604800))
    app.config['CODE_TTL_SECONDS'] = int(os.getenv('CODE_TTL_SECONDS', 300))
    app.config['SEND_CODE_INTERVAL_SECONDS'] = int(os.getenv('SEND_CODE_INTERVAL_SECONDS', 60))
    app.config['REDIS_URL'] = os.getenv('REDIS_URL')
    app.config['RATELIMIT_STORAGE_URI'] = os.getenv('RATELIMIT_STORAGE_URI', 'memory://')
    app.config['SMS_PROVIDER'] = os.getenv('SMS_PROVIDER', 'log')
    app.config['VONAGE_API_KEY'] = os.getenv('VONAGE_API_KEY')
    app.config['VONAGE_API_SECRET'] = os.getenv('VONAGE_API_SECRET')
    app.config['SMS_SENDER_ID'] = os.getenv('SMS_SENDER_ID', 'PhoneAuth')

    if config_name == 'testing':
        app.config['TESTING'] = True
        app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite:///:memory:'
        app.config['RATELIMIT_ENABLED'] = False
        app.config['REDIS_URL'] = None
        app.config['SMS_PROVIDER'] = 'log'

    if overrides:
        app.config.update(overrides)

    app.logger.setLevel(os.getenv('LOG_LEVEL', 'INFO').upper())

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    CORS(app)

    from phone_auth import models

    with app.app_context():
        try:
            db.create_all()
        except Exception as e:
            app.logger.warning(f"Could not create database tables: {e}")

    app.extensions['auth_service'] = _build_auth_service(app)

    from phone_auth.routes import register_routes
    register_routes(app)

    _register_error_handlers(app)

    @app.route('/health', methods=['GET'])
    @limiter.exempt
    def health():
        return {'status': 'ok', 'timestamp': datetime.utcnow().isoformat()}, 200

    return app


def _build_auth_service(app):
    """Construct the stores and collaborators once and wire them into the service."""
    from phone_auth.services.auth_service import AuthService
    from phone_auth.services.code_store import VerificationCodeStore
    from phone_auth.services.user_store import UserStore
    from phone_auth.services.rate_limiter import build_rate_limiter
    from phone_auth.services.sms import build_sms_sender

    return AuthService(
        users=UserStore(db.session),
        codes=VerificationCodeStore(db.session, ttl_seconds=app.config['CODE_TTL_SECONDS']),
        rate_limiter=build_rate_limiter(app.config),
        sms_sender=build_sms_sender(app.config),
        secret_key=app.config['JWT_SECRET_KEY'],
        token_ttl_seconds=app.config['JWT_ACCESS_TOKEN_EXPIRES'],
    )


def _register_error_handlers(app):
    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'error': 'Route not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(429)
    def too_many_requests(e):
        return jsonify({'success': False, 'error': 'Too many requests, please try again later'}), 429

    @app.errorhandler(500)
    def internal_error(e):
        db.session.rollback()
        app.logger.error(f"Unhandled error: {getattr(e, 'original_exception', e)}")
        return jsonify({'error': 'Internal server error'}), 500
