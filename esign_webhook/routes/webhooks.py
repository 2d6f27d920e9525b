"""
Rotas para webhooks - endpoint público chamado pelo provider de assinatura eletrônica.
"""
from flask import Blueprint, request, jsonify, current_app
from esign_webhook.services.integrations.signature.exceptions import SignatureWebhookError
import logging

logger = logging.getLogger(__name__)
webhooks_bp = Blueprint('webhooks', __name__)

# Métodos aceitos na rota; tudo que não é POST/OPTIONS responde 405 em texto
ROUTE_METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']

CORS_HEADERS = ['authorization', 'x-client-info', 'apikey', 'content-type', 'x-signature']
CORS_METHODS = ['POST', 'OPTIONS']


def _text_response(message, status):
    return message, status, {'Content-Type': 'text/plain; charset=utf-8'}


@webhooks_bp.after_request
def add_cors_headers(response):
    """Cabeçalhos CORS fixos em toda resposta do webhook, inclusive OPTIONS sem preflight"""
    response.headers['Access-Control-Allow-Origin'] = '*'
    response.headers['Access-Control-Allow-Methods'] = ', '.join(CORS_METHODS)
    response.headers['Access-Control-Allow-Headers'] = ', '.join(CORS_HEADERS)
    return response


@webhooks_bp.route('/signature-webhook', methods=ROUTE_METHODS)
@webhooks_bp.route('/api/v1/webhooks/signature', methods=ROUTE_METHODS)
def handle_signature_webhook():
    """
    Endpoint único para webhooks de assinatura.

    Não requer autenticação de usuário; quando SIGNATURE_WEBHOOK_SECRET está
    configurado, valida o header X-Signature.
    """
    if request.method == 'OPTIONS':
        return _text_response('ok', 200)

    if request.method != 'POST':
        return _text_response('Method not allowed', 405)

    raw_body = request.get_data(cache=True)
    payload = request.get_json(force=True, silent=True)
    logger.info(f"Webhook de assinatura recebido: {payload if payload is not None else raw_body[:500]!r}")

    handler = current_app.extensions['signature_webhook']

    try:
        result = handler.handle(
            payload,
            raw_body=raw_body,
            signature=request.headers.get('X-Signature')
        )
    except SignatureWebhookError as e:
        log = logger.error if e.http_status >= 500 else logger.warning
        log(f"Webhook de assinatura rejeitado ({e.http_status}): {e.message}")
        return _text_response(e.message, e.http_status)
    except Exception as e:
        logger.exception(f"Erro ao processar webhook de assinatura: {str(e)}")
        return _text_response('Internal error', 500)

    if result.applied:
        logger.info(
            f"Webhook processado: contrato {result.contract.id} "
            f"{result.previous_status} -> {result.status}"
        )
    else:
        logger.info(f"Webhook sem efeito: contrato {result.contract.id} permanece {result.status}")

    return jsonify({'success': True}), 200
