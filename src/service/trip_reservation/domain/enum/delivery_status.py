from enum import StrEnum


class DeliveryStatus(StrEnum):
    IN_TRANSIT = 'in_transit'
    DELIVERED = 'delivered'
