from pharmacy.models.user import User, Role
from pharmacy.models.medicine import Medicine
from pharmacy.models.sale import Sale
from pharmacy.models.purchase import Purchase, PurchaseStatus

__all__ = ["User", "Role", "Medicine", "Sale", "Purchase", "PurchaseStatus"]
