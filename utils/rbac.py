import logging
from typing import Iterable

# Canonical role names
ROLE_CUSTOMER = "customer"
ROLE_GUEST = "guest"
ROLE_OWNER = "owner"
ROLE_EMPLOYEE = "employee"
ROLE_ADMIN = "admin"

# Employee roles allowed to manage a store's orders
ORDER_STAFF_EMPLOYEE_ROLES = (
    "Operations Manager",
    "Front Desk",
    "Inventory & Supplies",
    "Printer Operator",
)

logger = logging.getLogger(__name__)


class AccessError(Exception):
    """Store access refused. ``status_code`` is 400, 401, 403 or 404."""

    def __init__(self, message: str, status_code: int = 403):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def is_authenticated(user) -> bool:
    return bool(user is not None and getattr(user, "is_authenticated", False))


def is_admin(user) -> bool:
    if not is_authenticated(user):
        return False
    return bool(getattr(user, "is_superuser", False) or getattr(user, "role", None) == ROLE_ADMIN)


def get_managed_store(user, allow_employee_roles: Iterable[str] = ORDER_STAFF_EMPLOYEE_ROLES):
    """
    Resolve the store the user is allowed to manage.

    Owners resolve to the store they own; employees to their assigned store,
    provided their employee role is in ``allow_employee_roles``.

    Raises:
        AccessError: 401 anonymous, 403 wrong role, 404 no store
    """
    from marketplace.catalog.domain.models import PrintStore

    if not is_authenticated(user):
        raise AccessError("Unauthorized", 401)

    if user.role == ROLE_OWNER:
        store = PrintStore.objects.filter(owner=user).order_by("created_at").first()
        if store is None:
            raise AccessError("No print store found for owner", 404)
        return store

    if user.role == ROLE_EMPLOYEE and user.employee_role in tuple(allow_employee_roles):
        if not user.assigned_store_id:
            raise AccessError("Store id is required", 400)
        store = PrintStore.objects.filter(pk=user.assigned_store_id).first()
        if store is None:
            raise AccessError("Assigned store not found", 404)
        return store

    logger.warning("Store access denied: user_id=%s role=%s", getattr(user, "id", None), user.role)
    raise AccessError("Not authorized to access store resources", 403)


def can_manage_store(user, store) -> bool:
    """True for admins, the store's owner, and allowed employees assigned to it."""
    if not is_authenticated(user):
        return False
    if is_admin(user):
        return True
    if user.role == ROLE_OWNER:
        return store.owner_id == user.pk
    if user.role == ROLE_EMPLOYEE:
        return user.employee_role in ORDER_STAFF_EMPLOYEE_ROLES and user.assigned_store_id == store.pk
    return False
