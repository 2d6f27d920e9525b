"""
Módulo de integração com providers de assinatura eletrônica (lado webhook).
"""
from .exceptions import (
    SignatureWebhookError,
    MissingDocumentIdentifier,
    UnknownDocument,
    PersistenceFailure,
    NotificationFailure,
    InvalidWebhookSignature,
)
from .normalizer import NormalizedEvent, PayloadNormalizer, PayloadShape, normalize_payload
from .status_mapper import map_vendor_status

__all__ = [
    'SignatureWebhookError',
    'MissingDocumentIdentifier',
    'UnknownDocument',
    'PersistenceFailure',
    'NotificationFailure',
    'InvalidWebhookSignature',
    'NormalizedEvent',
    'PayloadNormalizer',
    'PayloadShape',
    'normalize_payload',
    'map_vendor_status',
]
