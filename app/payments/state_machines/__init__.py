"""
State enums for payment models.
"""

from payments.state_machines.states import (
    AccountType,
    CapabilityStatus,
    ConnectStatus,
    DirectChargeState,
)

__all__ = [
    "AccountType",
    "CapabilityStatus",
    "ConnectStatus",
    "DirectChargeState",
]
