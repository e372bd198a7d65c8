"""Routes package for the phone authentication service."""


def register_routes(app):
    """Register all route blueprints with the application."""
    from .auth import auth_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
