"""
Reconciliação do status dos contratos a partir dos eventos de webhook.
"""
from dataclasses import dataclass
from datetime import datetime
import logging

from sqlalchemy.exc import SQLAlchemyError

from esign_webhook.database import db
from esign_webhook.models import GeneratedContract, ContractStatus, TERMINAL_STATUSES
from esign_webhook.services.integrations.signature.exceptions import PersistenceFailure, UnknownDocument
from esign_webhook.services.integrations.signature.normalizer import NormalizedEvent

logger = logging.getLogger(__name__)

# Eventos que indicam que um signatário individual concluiu a assinatura
SIGNER_SIGNED_EVENTS = frozenset({'signer_signed', 'signer.signed'})


@dataclass
class ReconciliationResult:
    contract: GeneratedContract
    previous_status: str
    status: str
    applied: bool

    @property
    def is_terminal_transition(self) -> bool:
        return self.applied and self.status in TERMINAL_STATUSES


class SignatureReconciler:
    """
    Aplica eventos normalizados ao GeneratedContract correspondente.

    Garantias:
    - contrato em estado terminal (signed/cancelled) nunca é alterado;
    - a escrita é um único UPDATE por id, tudo ou nada;
    - entregas concorrentes do mesmo evento convergem (o UPDATE só afeta
      linhas ainda não terminais).
    """

    def find_contract(self, document_id: str) -> GeneratedContract:
        try:
            contract = (
                GeneratedContract.query
                .filter_by(external_document_id=document_id)
                .order_by(GeneratedContract.created_at.desc())
                .first()
            )
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Erro ao buscar contrato {document_id}: {str(e)}")
            raise PersistenceFailure() from e

        if contract is None:
            raise UnknownDocument(document_id)
        return contract

    def reconcile(self, event: NormalizedEvent, status: ContractStatus) -> ReconciliationResult:
        """
        Reconcilia o contrato do evento com o status canônico.

        Args:
            event: Evento normalizado (documento, signatário, URL de download)
            status: Status canônico já mapeado

        Returns:
            ReconciliationResult com applied=False quando o evento foi ignorado

        Raises:
            UnknownDocument: nenhum contrato com esse external_document_id
            PersistenceFailure: erro de banco; nada foi gravado
        """
        contract = self.find_contract(event.document_id)
        previous_status = contract.status

        if contract.is_terminal():
            logger.info(
                f"Contrato {contract.id} já está {previous_status}; "
                f"evento '{event.vendor_status}' ignorado"
            )
            return ReconciliationResult(contract, previous_status, previous_status, applied=False)

        now = datetime.utcnow()
        values = {
            'status': status.value,
            'updated_at': now,
            'last_webhook_payload': event.raw_payload or None,
        }

        if status is ContractStatus.SIGNED:
            values['signed_at'] = now
            if event.download_url:
                values['document_url'] = event.download_url

        if event.signer_email and (status is ContractStatus.SIGNED or event.event_type in SIGNER_SIGNED_EVENTS):
            signers = contract.mark_signer_signed(event.signer_email, now)
            if signers is not None:
                values['signers'] = signers

        applied = self._apply(contract.id, values)
        if not applied:
            # Outra entrega levou o contrato a estado terminal entre a leitura e o UPDATE
            db.session.refresh(contract)
            logger.info(f"Contrato {contract.id} alterado concorrentemente para {contract.status}; evento ignorado")
            return ReconciliationResult(contract, previous_status, contract.status, applied=False)

        db.session.refresh(contract)
        logger.info(f"Contrato {contract.id}: {previous_status} -> {contract.status}")
        return ReconciliationResult(contract, previous_status, contract.status, applied=True)

    def _apply(self, contract_id, values) -> bool:
        """UPDATE atômico por id, protegido contra sobrescrever estado terminal"""
        try:
            rowcount = (
                GeneratedContract.query
                .filter(
                    GeneratedContract.id == contract_id,
                    GeneratedContract.status.notin_(sorted(TERMINAL_STATUSES)),
                )
                .update(values, synchronize_session=False)
            )
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Erro ao atualizar contrato {contract_id}: {str(e)}")
            raise PersistenceFailure() from e

        return rowcount > 0
