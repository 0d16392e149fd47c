import logging

from flask import Flask
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from .config import Config, TestingConfig

# Initialize SQLAlchemy outside the create_app function
db = SQLAlchemy()

def create_app(config_class=Config, config_name=None):
    # map friendly names to classes
    if config_name:
        if config_name == 'testing':
            config_class = TestingConfig
        else:
            config_class = config_name   # allow import path string fallback

    # 1. Application Setup
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))
    logging.getLogger('rentmatch').setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # The dashboards live on a separate origin
    CORS(app, resources={r"/api/*": {"origins": app.config.get('CORS_ORIGINS', [])}})

    # 2. Database Initialization
    db.init_app(app)

    # 3. Register Blueprints (Routes) and JSON error handlers
    from .routes import register_blueprints
    from .errors import register_error_handlers
    register_blueprints(app)
    register_error_handlers(app)

    # 4. Import Models (Required to create the database tables)
    from . import models

    # 5. Database Table Creation (Inside application context)
    with app.app_context():
        db.create_all()

    return app
