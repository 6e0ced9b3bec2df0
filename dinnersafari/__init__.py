from flask import Flask
from .config import Config
from .extensions import db


def create_app(config_object=None):
    app = Flask(__name__)
    app.config.from_object(config_object or Config)

    db.init_app(app)

    return app
