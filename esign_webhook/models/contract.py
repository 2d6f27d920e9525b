import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from esign_webhook.database import db

JSONType = JSON().with_variant(JSONB(), 'postgresql')


class ContractStatus(str, Enum):
    """Status do contrato gerado"""
    DRAFT = "draft"
    GENERATED = "generated"
    SENT = "sent"
    SIGNED = "signed"
    CANCELLED = "cancelled"


# Estados absorventes: nenhum evento de webhook altera o contrato depois deles
TERMINAL_STATUSES = frozenset({ContractStatus.SIGNED.value, ContractStatus.CANCELLED.value})


class GeneratedContract(db.Model):
    __tablename__ = 'generated_contracts'

    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)
    rental_id = db.Column(db.Uuid, db.ForeignKey('rentals.id'), nullable=False)

    # ID atribuído pelo provider de assinatura (chave dos webhooks)
    external_document_id = db.Column(db.String(255), index=True)

    # Status
    status = db.Column(db.String(50), nullable=False, default=ContractStatus.DRAFT.value)
    # draft, generated, sent, signed, cancelled

    # Signatários: [{"name": ..., "email": ..., "role": "client", "signed_at": None}]
    signers = db.Column(JSONType, default=list)

    signed_at = db.Column(db.DateTime)
    document_url = db.Column(db.String(1000))
    last_webhook_payload = db.Column(JSONType)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow)

    rental = db.relationship('Rental', back_populates='contracts')

    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def signer_for_role(self, role: str) -> Optional[Dict[str, Any]]:
        """Retorna o primeiro signatário com o papel informado ('client', 'franchisee', ...)"""
        for signer in self.signers or []:
            if (signer.get('role') or '').lower() == role:
                return signer
        return None

    def mark_signer_signed(self, email: str, signed_at: datetime) -> Optional[List[Dict[str, Any]]]:
        """
        Monta a nova lista de signatários com o signatário do email marcado como assinado.

        Não altera o objeto: o resultado entra no UPDATE atômico do reconciliador.

        Returns:
            Nova lista, ou None se nenhum signatário com esse email ainda estava pendente
        """
        if not email or not self.signers:
            return None

        email = email.lower()
        changed = False
        signers = []
        for signer in self.signers:
            signer = dict(signer)
            if (signer.get('email') or '').lower() == email and not signer.get('signed_at'):
                signer['signed_at'] = signed_at.isoformat()
                changed = True
            signers.append(signer)

        return signers if changed else None

    def to_dict(self):
        return {
            'id': str(self.id),
            'rental_id': str(self.rental_id),
            'external_document_id': self.external_document_id,
            'status': self.status,
            'signers': self.signers,
            'signed_at': self.signed_at.isoformat() if self.signed_at else None,
            'document_url': self.document_url,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
