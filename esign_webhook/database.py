from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def init_db(app):
    """Registra os models e cria as tabelas quando AUTO_CREATE_TABLES está ativo (dev/testes)"""
    from esign_webhook import models  # noqa: F401

    if app.config.get('AUTO_CREATE_TABLES'):
        with app.app_context():
            db.create_all()
