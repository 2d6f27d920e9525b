"""
Pytest fixtures: Flask app em SQLite em memória, contratos e email stub
"""

import itertools
from unittest.mock import MagicMock

import pytest

from esign_webhook import create_app
from esign_webhook.config import TestingConfig
from esign_webhook.database import db
from esign_webhook.models import GeneratedContract, Rental
from esign_webhook.utils.email import EmailService

_contract_numbers = itertools.count(1)

DEFAULT_SIGNERS = [
    {'name': 'João Silva', 'email': 'joao@teste.com', 'role': 'client', 'signed_at': None},
    {'name': 'Franquia Centro', 'email': 'franquia@teste.com', 'role': 'franchisee', 'signed_at': None},
]


@pytest.fixture
def app():
    """App de teste com contexto ativo durante todo o teste"""
    app = create_app(TestingConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def webhook_handler(app):
    return app.extensions['signature_webhook']


@pytest.fixture
def email_service(webhook_handler):
    """Substitui o EmailService do notificador por um mock habilitado"""
    service = MagicMock(spec=EmailService)
    service.enabled = True
    service.send_document_signed_email.return_value = True
    service.send_document_cancelled_email.return_value = True
    webhook_handler.notifier.email_service = service
    return service


@pytest.fixture
def make_contract(app):
    """Factory de GeneratedContract com a locação associada"""

    def _make(external_document_id='req_1', status='sent', signers=None, **rental_fields):
        rental_data = {
            'contract_number': f'LOC-{next(_contract_numbers):04d}',
            'client_name': 'João Silva',
            'client_email': 'joao@teste.com',
            'franchisee_name': 'Franquia Centro',
            'franchisee_email': 'franquia@teste.com',
        }
        rental_data.update(rental_fields)
        rental = Rental(**rental_data)

        contract = GeneratedContract(
            rental=rental,
            external_document_id=external_document_id,
            status=status,
            signers=[dict(s) for s in (DEFAULT_SIGNERS if signers is None else signers)],
        )
        db.session.add_all([rental, contract])
        db.session.commit()
        return contract

    return _make
