"""
Mapeamento de status do provider de assinatura para o status canônico do contrato.
"""
from typing import Any
from esign_webhook.models import ContractStatus

VENDOR_STATUS_MAP = {
    'signed': ContractStatus.SIGNED,
    'completed': ContractStatus.SIGNED,
    'rejected': ContractStatus.CANCELLED,
    'expired': ContractStatus.CANCELLED,
}

# Status desconhecido nunca leva o contrato a um estado terminal
DEFAULT_STATUS = ContractStatus.SENT


def map_vendor_status(vendor_status: Any) -> ContractStatus:
    """
    Mapeia status do provider para sent, signed ou cancelled.

    Função total: qualquer entrada (None, string vazia, valores não-string)
    retorna um status válido. A comparação é exata, sem normalizar caixa.
    """
    if not isinstance(vendor_status, str):
        return DEFAULT_STATUS
    return VENDOR_STATUS_MAP.get(vendor_status, DEFAULT_STATUS)


def is_completion_status(vendor_status: Any) -> bool:
    """True para eventos de conclusão (signed/completed)"""
    return map_vendor_status(vendor_status) is ContractStatus.SIGNED
