import uuid
from datetime import datetime
from esign_webhook.database import db


class Rental(db.Model):
    """Locação à qual o contrato pertence. Somente leitura para o webhook."""
    __tablename__ = 'rentals'

    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)
    contract_number = db.Column(db.String(50), nullable=False)

    client_name = db.Column(db.String(255))
    client_email = db.Column(db.String(255))
    franchisee_name = db.Column(db.String(255))
    franchisee_email = db.Column(db.String(255))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    contracts = db.relationship('GeneratedContract', back_populates='rental')

    def to_dict(self):
        return {
            'id': str(self.id),
            'contract_number': self.contract_number,
            'client_name': self.client_name,
            'client_email': self.client_email,
            'franchisee_name': self.franchisee_name,
            'franchisee_email': self.franchisee_email,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
