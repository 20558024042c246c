"""
Constantes relacionadas con el estado de las órdenes.
"""
from enum import Enum


class UnleashedOrderStatus(str, Enum):
    """Estados de Sales Order en Unleashed."""
    OPEN = "Open"
    PARKED = "Parked"
    BACKORDERED = "Backordered"
    PLACED = "Placed"
    PICKING = "Picking"
    PICKED = "Picked"
    PACKED = "Packed"
    DISPATCHED = "Dispatched"
    COMPLETE = "Complete"
    DELETED = "Deleted"


class ShopOrderStatus(str, Enum):
    """Estados de orden en la tienda."""
    UNPAID = "Unpaid"
    PAID = "Paid"
    PROCESSING = "Processing"
    SENT = "Sent"
    COMPLETE = "Complete"
    MEMBER_CANCELLED = "MemberCancelled"


# Conversión Unleashed -> tienda. Debe cubrir todo UnleashedOrderStatus.
DEFAULT_ORDER_STATUS_MAP = {
    UnleashedOrderStatus.OPEN.value: ShopOrderStatus.UNPAID.value,
    UnleashedOrderStatus.PARKED.value: ShopOrderStatus.PAID.value,
    UnleashedOrderStatus.BACKORDERED.value: ShopOrderStatus.PROCESSING.value,
    UnleashedOrderStatus.PLACED.value: ShopOrderStatus.PROCESSING.value,
    UnleashedOrderStatus.PICKING.value: ShopOrderStatus.PROCESSING.value,
    UnleashedOrderStatus.PICKED.value: ShopOrderStatus.PROCESSING.value,
    UnleashedOrderStatus.PACKED.value: ShopOrderStatus.PROCESSING.value,
    UnleashedOrderStatus.DISPATCHED.value: ShopOrderStatus.SENT.value,
    UnleashedOrderStatus.COMPLETE.value: ShopOrderStatus.COMPLETE.value,
    UnleashedOrderStatus.DELETED.value: ShopOrderStatus.MEMBER_CANCELLED.value,
}
