# Register all blueprints here
def register_blueprints(app):
    from .landlords import landlords_bp
    from .tenants import tenants_bp
    from .requests import requests_bp
    from .admin import admin_bp
    from .public import public_bp

    app.register_blueprint(landlords_bp)
    app.register_blueprint(tenants_bp)
    app.register_blueprint(requests_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(public_bp)


def iso_or_none(value):
    return value.isoformat() if value else None
