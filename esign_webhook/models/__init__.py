from .rental import Rental
from .contract import GeneratedContract, ContractStatus, TERMINAL_STATUSES

__all__ = [
    'Rental',
    'GeneratedContract',
    'ContractStatus',
    'TERMINAL_STATUSES',
]
