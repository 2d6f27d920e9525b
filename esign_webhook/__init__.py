from flask import Flask
from flask_cors import CORS
from flask_migrate import Migrate
import logging
import os
from esign_webhook.config import Config, WebhookSettings
from esign_webhook.database import db, init_db

MIGRATIONS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'migrations')

migrate = Migrate()


def configure_logging(level='INFO'):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app.config.get('LOG_LEVEL', 'INFO'))

    # Configurar CORS
    # O callback vem do servidor do provider, não de um browser; liberar tudo para ferramentas que fazem OPTIONS
    from esign_webhook.routes.webhooks import CORS_HEADERS, CORS_METHODS
    CORS(app,
         resources={
             r"/signature-webhook": {"origins": "*"},
             r"/api/v1/webhooks/*": {"origins": "*"},
         },
         supports_credentials=False,
         send_wildcard=True,
         allow_headers=CORS_HEADERS,
         methods=CORS_METHODS)

    # Inicializar banco de dados
    db.init_app(app)

    # Inicializar Flask-Migrate
    migrate.init_app(app, db, directory=MIGRATIONS_DIR)

    init_db(app)

    # Serviços do webhook, construídos uma única vez com a configuração explícita
    from esign_webhook.services.notification_service import ContractNotifier
    from esign_webhook.services.reconciliation_service import SignatureReconciler
    from esign_webhook.services.signature_webhook_service import SignatureWebhookHandler
    from esign_webhook.utils.email import EmailService

    settings = WebhookSettings.from_mapping(app.config)
    app.extensions['signature_webhook'] = SignatureWebhookHandler(
        settings=settings,
        reconciler=SignatureReconciler(),
        notifier=ContractNotifier(EmailService(settings.email)),
    )

    # Rotas de webhooks
    from esign_webhook.routes import webhooks
    app.register_blueprint(webhooks.webhooks_bp)

    # Health check endpoint
    from esign_webhook.routes import health
    app.register_blueprint(health.bp)

    return app
