"""
Prontidão do serviço de webhook: tabela de contratos acessível e configuração de notificação.
"""
from flask import Blueprint, jsonify, current_app
from datetime import datetime
from sqlalchemy.exc import SQLAlchemyError
from esign_webhook.database import db
from esign_webhook.models import GeneratedContract
import logging

logger = logging.getLogger(__name__)
bp = Blueprint('health', __name__, url_prefix='/api')


def _settings_summary():
    handler = current_app.extensions['signature_webhook']
    return {
        'email_provider': handler.settings.email.provider or None,
        'email_enabled': handler.notifier.email_service.enabled,
        'signature_verification': bool(handler.settings.webhook_secret),
    }


@bp.route('/health', methods=['GET'])
def health_check():
    """
    O webhook só consegue reconciliar se generated_contracts puder ser lido.
    Email desabilitado não derruba o serviço, apenas é reportado.
    """
    checks = _settings_summary()

    try:
        db.session.query(GeneratedContract.id).limit(1).all()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Health check: generated_contracts inacessível: {str(e)}")
        checks['generated_contracts'] = 'unavailable'
        return jsonify({
            'status': 'unhealthy',
            'checks': checks,
            'error': str(e),
            'timestamp': datetime.utcnow().isoformat()
        }), 503

    checks['generated_contracts'] = 'ok'
    return jsonify({
        'status': 'healthy',
        'checks': checks,
        'timestamp': datetime.utcnow().isoformat()
    }), 200
