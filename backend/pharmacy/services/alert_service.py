"""
Inventory alerts derived from a catalog snapshot.

Each medicine gets at most one tag, first match wins:
    expired     expiry_date < today
    nearExpiry  today <= expiry_date <= today + NEAR_EXPIRY_DAYS
    lowStock    quantity <= LOW_STOCK_THRESHOLD
Nothing is stored; tags are recomputed on every read.
"""
import enum
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from pharmacy.core.config import settings


class AlertTag(str, enum.Enum):
    EXPIRED = "expired"
    NEAR_EXPIRY = "nearExpiry"
    LOW_STOCK = "lowStock"


# Sort order of the alert list
_PRECEDENCE = {AlertTag.EXPIRED: 0, AlertTag.NEAR_EXPIRY: 1, AlertTag.LOW_STOCK: 2}


def classify(
    medicine,
    today: date,
    near_expiry_days: Optional[int] = None,
    low_stock_threshold: Optional[int] = None,
) -> Optional[AlertTag]:
    if near_expiry_days is None:
        near_expiry_days = settings.NEAR_EXPIRY_DAYS
    if low_stock_threshold is None:
        low_stock_threshold = settings.LOW_STOCK_THRESHOLD

    expiry = medicine.expiry_date
    if expiry < today:
        return AlertTag.EXPIRED
    if expiry <= today + timedelta(days=near_expiry_days):
        return AlertTag.NEAR_EXPIRY
    if medicine.quantity <= low_stock_threshold:
        return AlertTag.LOW_STOCK
    return None


def _message(medicine, tag: AlertTag, today: date) -> str:
    if tag == AlertTag.EXPIRED:
        return f"{medicine.name} expired on {medicine.expiry_date.isoformat()}"
    if tag == AlertTag.NEAR_EXPIRY:
        days = (medicine.expiry_date - today).days
        return f"{medicine.name} expires in {days} day{'s' if days != 1 else ''}"
    return f"{medicine.name} is low on stock ({medicine.quantity} left)"


def build_alerts(medicines: Iterable, today: date) -> List[Dict]:
    """Alert-tagged medicines: expired first, then near expiry, then low stock."""
    tagged = []
    for medicine in medicines:
        tag = classify(medicine, today)
        if tag is not None:
            tagged.append((tag, medicine))

    tagged.sort(key=lambda pair: (_PRECEDENCE[pair[0]], pair[1].expiry_date, pair[1].name))
    return [
        {
            "id": medicine.id,
            "medicineId": medicine.id,
            "name": medicine.name,
            "type": tag.value,
            "message": _message(medicine, tag, today),
            "quantity": medicine.quantity,
            "expiryDate": medicine.expiry_date.isoformat(),
        }
        for tag, medicine in tagged
    ]


def inventory_stats(medicines: Iterable, today: date) -> Dict[str, int]:
    """Dashboard counters. Counts are exclusive, so healthy = total - the rest."""
    stats = {"totalMedicines": 0, "lowStock": 0, "expired": 0, "nearExpiry": 0}
    for medicine in medicines:
        stats["totalMedicines"] += 1
        tag = classify(medicine, today)
        if tag is not None:
            stats[tag.value] += 1
    return stats
