"""
Notificações por email disparadas após a reconciliação de um contrato.
"""
from datetime import datetime
from typing import Optional, Tuple
import logging

from esign_webhook.models import ContractStatus, GeneratedContract
from esign_webhook.services.integrations.signature.exceptions import NotificationFailure
from esign_webhook.services.integrations.signature.normalizer import NormalizedEvent
from esign_webhook.services.reconciliation_service import ReconciliationResult
from esign_webhook.utils.email import EmailService

logger = logging.getLogger(__name__)


class ContractNotifier:
    """
    Envia emails de contrato assinado (cliente) e cancelado (franqueado).

    Best-effort: qualquer falha é logada e engolida. O status já reconciliado
    nunca depende do resultado do envio.
    """

    def __init__(self, email_service: EmailService):
        self.email_service = email_service

    def notify(self, result: ReconciliationResult, event: NormalizedEvent) -> bool:
        """
        Notifica a parte interessada na transição, se houver.

        Returns:
            True se um email foi enviado
        """
        if not result.is_terminal_transition:
            return False

        try:
            if result.status == ContractStatus.SIGNED.value:
                return self._notify_signed(result.contract, event)
            return self._notify_cancelled(result.contract, event)
        except NotificationFailure as e:
            logger.error(f"Notificação do contrato {result.contract.id} falhou: {e.message}")
        except Exception as e:
            logger.exception(f"Erro inesperado ao notificar contrato {result.contract.id}: {str(e)}")
        return False

    def _notify_signed(self, contract: GeneratedContract, event: NormalizedEvent):
        email, name = self._recipient(contract, 'client')
        signed_at = contract.signed_at or datetime.utcnow()
        signer_name = event.signer_name or name

        return self._deliver(
            contract,
            email,
            lambda: self.email_service.send_document_signed_email(
                to_email=email,
                client_name=name or 'Cliente',
                contract_number=self._contract_number(contract),
                signed_at=signed_at.strftime('%d/%m/%Y'),
                signer_name=signer_name,
            )
        )

    def _notify_cancelled(self, contract: GeneratedContract, event: NormalizedEvent):
        email, name = self._recipient(contract, 'franchisee')

        return self._deliver(
            contract,
            email,
            lambda: self.email_service.send_document_cancelled_email(
                to_email=email,
                recipient_name=name or 'Franqueado',
                contract_number=self._contract_number(contract),
                reason=event.vendor_status or 'cancelled',
            )
        )

    def _deliver(self, contract, email, send) -> bool:
        if not email:
            raise NotificationFailure(f'Nenhum destinatário para o contrato {contract.id}')

        if not self.email_service.enabled:
            logger.info(f"Envio de email desabilitado; notificação do contrato {contract.id} não enviada")
            return False

        if not send():
            raise NotificationFailure(f'Provider de email recusou o envio para {email}')

        logger.info(f"Notificação do contrato {contract.id} enviada para {email}")
        return True

    @staticmethod
    def _recipient(contract: GeneratedContract, role: str) -> Tuple[Optional[str], Optional[str]]:
        """Signatário com o papel informado; senão, contato da locação"""
        signer = contract.signer_for_role(role)
        if signer and signer.get('email'):
            return signer['email'], signer.get('name')

        rental = contract.rental
        if rental is None:
            return None, None
        if role == 'client':
            return rental.client_email, rental.client_name
        return rental.franchisee_email, rental.franchisee_name

    @staticmethod
    def _contract_number(contract: GeneratedContract) -> str:
        if contract.rental and contract.rental.contract_number:
            return contract.rental.contract_number
        return str(contract.rental_id)
