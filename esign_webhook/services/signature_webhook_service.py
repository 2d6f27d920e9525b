"""
Orquestra o processamento de um webhook de assinatura:
verificação HMAC -> normalização -> mapeamento de status -> reconciliação -> notificação.
"""
from typing import Any, Optional
import hashlib
import hmac
import logging

from esign_webhook.config import WebhookSettings
from esign_webhook.services.integrations.signature.exceptions import InvalidWebhookSignature
from esign_webhook.services.integrations.signature.normalizer import PayloadNormalizer
from esign_webhook.services.integrations.signature.status_mapper import map_vendor_status
from esign_webhook.services.notification_service import ContractNotifier
from esign_webhook.services.reconciliation_service import ReconciliationResult, SignatureReconciler

logger = logging.getLogger(__name__)


class SignatureWebhookHandler:

    def __init__(
        self,
        settings: WebhookSettings,
        reconciler: SignatureReconciler,
        notifier: ContractNotifier,
        normalizer: Optional[PayloadNormalizer] = None
    ):
        self.settings = settings
        self.reconciler = reconciler
        self.notifier = notifier
        self.normalizer = normalizer or PayloadNormalizer()

    def verify_signature(self, raw_body: bytes, signature: Optional[str]) -> None:
        """
        Valida o header X-Signature ('sha256=<hex>') quando há segredo configurado.

        Sem segredo ou sem header, nenhuma verificação é feita.
        """
        secret = self.settings.webhook_secret
        if not secret or not signature:
            return

        expected = 'sha256=' + hmac.new(secret.encode('utf-8'), raw_body or b'', hashlib.sha256).hexdigest()
        if not hmac.compare_digest(expected, signature.strip()):
            logger.warning("Assinatura HMAC do webhook inválida")
            raise InvalidWebhookSignature()

    def handle(self, payload: Any, raw_body: bytes = b'', signature: Optional[str] = None) -> ReconciliationResult:
        """
        Processa o webhook.

        Raises:
            InvalidWebhookSignature, MissingDocumentIdentifier, UnknownDocument, PersistenceFailure
        """
        self.verify_signature(raw_body, signature)

        event = self.normalizer.normalize(payload)
        status = map_vendor_status(event.vendor_status)
        logger.info(
            f"Evento {event.event_type or '-'} para documento {event.document_id}: "
            f"'{event.vendor_status}' -> {status.value}"
        )

        result = self.reconciler.reconcile(event, status)

        # Notificação nunca desfaz nem falha a reconciliação
        if result.is_terminal_transition:
            self.notifier.notify(result, event)

        return result
