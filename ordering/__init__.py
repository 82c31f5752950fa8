"""
Ordering package: turning a customer's draft into an `orders` row.

Public API:
- Models: CustomerContext, OrderDraft, OrderStatus
- (ordering.submission) submit_order, InvalidOrderError
- (ordering.display) describe_estimate, delivery_display_text

Only models are re-exported here; datastore imports them.
"""
from .models import CustomerContext, OrderDraft, OrderStatus

__all__ = ["CustomerContext",
           "OrderDraft",
           "OrderStatus",
           ]
