"""routes package: central Blueprint registration"""


def register_blueprints(app):
    from routes.contact import contact_bp
    from routes.auth import auth_bp
    from routes.admin import admin_bp

    app.register_blueprint(contact_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
