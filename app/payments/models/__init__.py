"""
Payment domain models.

- ConnectedAccount: A seller's Stripe Connect account and its flags
- DirectCharge: A buyer payment collected through Stripe Checkout
"""

from payments.models.connected_account import (
    ConnectedAccount,
    derive_connect_status,
)
from payments.models.direct_charge import DirectCharge

__all__ = [
    "ConnectedAccount",
    "DirectCharge",
    "derive_connect_status",
]
