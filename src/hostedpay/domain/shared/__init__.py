"""Shared domain utilities.

This package is domain-accessible and should not depend on application code.
"""

from .payment_ports import BrowserSessionProtocol, PaymentGatewayProtocol, Sleep

__all__ = ["BrowserSessionProtocol", "PaymentGatewayProtocol", "Sleep"]
