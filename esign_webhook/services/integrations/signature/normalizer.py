"""
Normalização dos payloads de webhook dos providers de assinatura.

Cada formato de payload conhecido é um PayloadShape. O normalizador tenta os
formatos em ordem e o primeiro que reconhecer o payload vence. Para suportar
um novo provider basta adicionar um PayloadShape à lista.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional
import logging

from .exceptions import MissingDocumentIdentifier
from .status_mapper import is_completion_status

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizedEvent:
    """Evento canônico extraído de um webhook"""
    document_id: str
    vendor_status: str
    event_type: Optional[str] = None
    signed_at: Optional[str] = None
    download_url: Optional[str] = None
    signer_name: Optional[str] = None
    signer_email: Optional[str] = None
    shape: Optional[str] = None
    raw_payload: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


def _scalar(value: Any) -> Optional[str]:
    """Converte valor escalar não vazio para string; ignora vazios, dicts e listas"""
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    value = str(value).strip()
    return value or None


def _dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


class PayloadShape(ABC):
    """Formato de payload de um provider"""

    name = 'base'

    @abstractmethod
    def match(self, payload: Dict[str, Any]) -> Optional[NormalizedEvent]:
        """
        Tenta reconhecer o payload.

        Returns:
            NormalizedEvent se o payload tem o formato, senão None
        """
        pass


class GenericPayloadShape(PayloadShape):
    """
    Formato genérico (D4Sign/BeSign v2 e eventos de compatibilidade).

    Exemplo:
        {
            "event": "document_signed",
            "signature_request_id": "req_1",
            "status": "signed",
            "signed_at": "2024-01-01T00:00:00Z",
            "signer": {"name": "João", "email": "joao@ex.com"},
            "document": {"download_url": "https://..."}
        }
    """

    name = 'generic'

    # Ordem de prioridade do identificador
    ID_FIELDS = ('signature_request_id', 'document_id', 'id')

    def match(self, payload):
        document_id = None
        for key in self.ID_FIELDS:
            document_id = _scalar(payload.get(key))
            if document_id:
                break

        if not document_id:
            return None

        vendor_status = _scalar(payload.get('status')) or ''
        signer = _dict(payload.get('signer'))

        event = payload.get('event')
        if isinstance(event, dict):
            event = event.get('type')

        download_url = None
        if is_completion_status(vendor_status):
            download_url = _scalar(_dict(payload.get('document')).get('download_url'))

        return NormalizedEvent(
            document_id=document_id,
            vendor_status=vendor_status,
            event_type=_scalar(event),
            signed_at=(
                _scalar(payload.get('signed_at'))
                or _scalar(payload.get('completed_at'))
                or _scalar(signer.get('signed_at'))
            ),
            download_url=download_url,
            signer_name=_scalar(signer.get('name')) or _scalar(payload.get('signer_name')),
            signer_email=_scalar(signer.get('email')) or _scalar(payload.get('signer_email')),
            shape=self.name,
            raw_payload=payload,
        )


class BeSignPayloadShape(PayloadShape):
    """
    Formato de notificação do BeSign.

    Exemplo:
        {
            "dataHoraNotificacao": "01-01-2024 10:00:00",
            "documento": {"identificador": "abc"},
            "contato": {"identificador": "xyz", "status": "ASSINADO"}
        }
    """

    name = 'besign'

    STATUS_MAP = {
        'ASSINADO': 'signed',
        'CANCELADO': 'rejected',
        'EXPIRADO': 'expired',
    }

    def match(self, payload):
        document_id = _scalar(_dict(payload.get('documento')).get('identificador'))
        if not document_id:
            return None

        raw_status = _scalar(_dict(payload.get('contato')).get('status')) or ''
        vendor_status = self.STATUS_MAP.get(raw_status, raw_status)

        signed_at = None
        if is_completion_status(vendor_status):
            signed_at = _scalar(payload.get('dataHoraNotificacao'))

        return NormalizedEvent(
            document_id=document_id,
            vendor_status=vendor_status,
            event_type=f'besign.{raw_status.lower()}' if raw_status else None,
            signed_at=signed_at,
            shape=self.name,
            raw_payload=payload,
        )


# BeSign primeiro: documento.identificador é mais específico que um "id" solto
DEFAULT_SHAPES = (
    BeSignPayloadShape(),
    GenericPayloadShape(),
)


class PayloadNormalizer:
    """Aplica os PayloadShape em ordem; o primeiro que reconhecer vence"""

    def __init__(self, shapes: Iterable[PayloadShape] = DEFAULT_SHAPES):
        self.shapes = tuple(shapes)

    def normalize(self, payload: Any) -> NormalizedEvent:
        """
        Normaliza o payload do webhook.

        Raises:
            MissingDocumentIdentifier: payload não é um objeto ou nenhum formato
                encontrou identificador de documento
        """
        if not isinstance(payload, dict):
            raise MissingDocumentIdentifier()

        for shape in self.shapes:
            event = shape.match(payload)
            if event is not None:
                logger.debug(f"Payload reconhecido pelo formato {shape.name}: documento {event.document_id}")
                return event

        raise MissingDocumentIdentifier()


_default_normalizer = PayloadNormalizer()


def normalize_payload(payload: Any) -> NormalizedEvent:
    """Atalho para o normalizador com os formatos padrão"""
    return _default_normalizer.normalize(payload)
