"""
Testes para a normalização de payloads de webhook
"""
import pytest
from esign_webhook.services.integrations.signature.exceptions import MissingDocumentIdentifier
from esign_webhook.services.integrations.signature.normalizer import (
    BeSignPayloadShape,
    GenericPayloadShape,
    NormalizedEvent,
    PayloadNormalizer,
    PayloadShape,
    normalize_payload,
)


class TestGenericShape:
    """Testes para o formato genérico"""

    def test_signature_request_id_has_priority(self):
        event = normalize_payload({
            'signature_request_id': 'A',
            'document_id': 'B',
            'id': 'C',
            'status': 'signed',
        })
        assert event.document_id == 'A'

    def test_document_id_before_id(self):
        event = normalize_payload({'document_id': 'B', 'id': 'C', 'status': 'sent'})
        assert event.document_id == 'B'

    def test_id_as_last_fallback(self):
        event = normalize_payload({'event': 'document.created', 'id': 'besign_doc_001', 'status': 'pending'})
        assert event.document_id == 'besign_doc_001'
        assert event.event_type == 'document.created'

    def test_empty_identifier_falls_through(self):
        event = normalize_payload({'signature_request_id': '', 'document_id': 'B'})
        assert event.document_id == 'B'

    def test_numeric_identifier_is_stringified(self):
        event = normalize_payload({'id': 123, 'status': 'signed'})
        assert event.document_id == '123'

    def test_full_signed_payload(self):
        event = normalize_payload({
            'event': 'document_signed',
            'signature_request_id': 'req_1',
            'status': 'signed',
            'signed_at': '2024-01-01T00:00:00Z',
            'signer': {'name': 'João Silva', 'email': 'joao@teste.com'},
        })
        assert event.vendor_status == 'signed'
        assert event.event_type == 'document_signed'
        assert event.signed_at == '2024-01-01T00:00:00Z'
        assert event.signer_name == 'João Silva'
        assert event.signer_email == 'joao@teste.com'
        assert event.shape == 'generic'

    def test_missing_status_is_empty_string(self):
        event = normalize_payload({'document_id': 'req_2'})
        assert event.vendor_status == ''

    def test_download_url_on_completion(self):
        event = normalize_payload({
            'id': 'besign_doc_001',
            'status': 'completed',
            'completed_at': '2024-01-02T10:00:00Z',
            'document': {'download_url': 'https://example.com/doc_signed.pdf'},
        })
        assert event.download_url == 'https://example.com/doc_signed.pdf'
        assert event.signed_at == '2024-01-02T10:00:00Z'

    def test_download_url_ignored_when_not_completion(self):
        event = normalize_payload({
            'id': 'besign_doc_001',
            'status': 'sent',
            'document': {'download_url': 'https://example.com/doc.pdf'},
        })
        assert event.download_url is None

    def test_signer_email_flat_field(self):
        event = normalize_payload({'document_id': 'd1', 'signer_email': 'maria@teste.com'})
        assert event.signer_email == 'maria@teste.com'

    def test_event_object_uses_type(self):
        event = normalize_payload({'id': 'env-1', 'event': {'type': 'envelope.closed'}})
        assert event.event_type == 'envelope.closed'

    def test_raw_payload_kept(self):
        payload = {'document_id': 'd1', 'status': 'signed'}
        assert normalize_payload(payload).raw_payload == payload


class TestBeSignShape:
    """Testes para o formato BeSign"""

    def _payload(self, status):
        return {
            'dataHoraNotificacao': '01-01-2024 10:00:00',
            'documento': {'identificador': 'bs-1'},
            'contato': {'identificador': 'ct-1', 'status': status},
        }

    @pytest.mark.parametrize('raw_status, vendor_status', [
        ('ASSINADO', 'signed'),
        ('CANCELADO', 'rejected'),
        ('EXPIRADO', 'expired'),
        ('PENDENTE', 'PENDENTE'),
    ])
    def test_status_translation(self, raw_status, vendor_status):
        event = normalize_payload(self._payload(raw_status))
        assert event.document_id == 'bs-1'
        assert event.vendor_status == vendor_status
        assert event.shape == 'besign'

    def test_signed_at_only_when_signed(self):
        assert normalize_payload(self._payload('ASSINADO')).signed_at == '01-01-2024 10:00:00'
        assert normalize_payload(self._payload('EXPIRADO')).signed_at is None

    def test_besign_identifier_wins_over_top_level_id(self):
        payload = self._payload('ASSINADO')
        payload['id'] = 'notif_1'
        event = normalize_payload(payload)
        assert event.document_id == 'bs-1'
        assert event.vendor_status == 'signed'
        assert event.shape == 'besign'


class TestMissingIdentifier:
    """Testes para payloads sem identificador"""

    def test_status_only(self):
        with pytest.raises(MissingDocumentIdentifier):
            normalize_payload({'status': 'signed'})

    @pytest.mark.parametrize('payload', [None, [], ['req_1'], 'req_1', 42])
    def test_non_object_payload(self, payload):
        with pytest.raises(MissingDocumentIdentifier):
            normalize_payload(payload)

    def test_nested_identifier_objects_are_ignored(self):
        with pytest.raises(MissingDocumentIdentifier):
            normalize_payload({'id': {'value': 'x'}, 'documento': {}})

    def test_error_message(self):
        with pytest.raises(MissingDocumentIdentifier) as exc:
            normalize_payload({})
        assert exc.value.http_status == 400
        assert exc.value.message == 'Missing document ID'


class TestPayloadNormalizer:
    """Testes para a composição de formatos"""

    def test_custom_shape_is_pure_addition(self):
        class EnvelopeShape(PayloadShape):
            name = 'envelope'

            def match(self, payload):
                envelope = payload.get('envelope') or {}
                if not envelope.get('uuid'):
                    return None
                return NormalizedEvent(
                    document_id=envelope['uuid'],
                    vendor_status=envelope.get('state', ''),
                    shape=self.name,
                )

        normalizer = PayloadNormalizer([GenericPayloadShape(), BeSignPayloadShape(), EnvelopeShape()])
        event = normalizer.normalize({'envelope': {'uuid': 'u-1', 'state': 'completed'}})
        assert event.document_id == 'u-1'
        assert event.shape == 'envelope'

    def test_first_match_wins(self):
        normalizer = PayloadNormalizer([BeSignPayloadShape(), GenericPayloadShape()])
        event = normalizer.normalize({
            'id': 'generic-1',
            'documento': {'identificador': 'bs-1'},
            'contato': {'status': 'ASSINADO'},
        })
        assert event.document_id == 'bs-1'
