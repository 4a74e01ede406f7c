from agency_os.models.user import User, UserRole, AGENT_ROLES
from agency_os.models.creator import Creator, CreatorCompensationType
from agency_os.models.sale import Sale, SaleType, SaleStatus
from agency_os.models.payment import Payment
from agency_os.models.monthly_financial import MonthlyFinancial

__all__ = [
    "User",
    "UserRole",
    "AGENT_ROLES",
    "Creator",
    "CreatorCompensationType",
    "Sale",
    "SaleType",
    "SaleStatus",
    "Payment",
    "MonthlyFinancial",
]
