from .index import index_bp
from .admin import admin_bp
from .api import api_bp

def register_blueprints(app):
    app.register_blueprint(index_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(api_bp)
