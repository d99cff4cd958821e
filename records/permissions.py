"""
Custom permission classes for role and department based access control.
"""
from django.conf import settings
from rest_framework.permissions import BasePermission

ADMIN_ROLES = {"admin"}


def is_admin(user) -> bool:
    return bool(user and user.is_authenticated and getattr(user, "role", None) in ADMIN_ROLES)


def belongs_to_department(user, slug: str) -> bool:
    """True when ``user`` is a member of the department ``slug``."""
    if not (user and user.is_authenticated):
        return False
    return user.department_memberships.filter(department__slug=slug).exists()


class IsAdminRole(BasePermission):
    """Allow access only to users with an administrative role."""
    message = "Réservé aux administrateurs"

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return is_admin(getattr(request, "user", None))


class DepartmentAccess(BasePermission):
    """Members of one department only; administrators always pass.

    Subclasses name the setting holding the department slug so that the
    slug can be changed per deployment.
    """
    department_setting = ""
    message = "Accès refusé: vous n'appartenez pas à ce département"

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        if is_admin(user):
            return True
        return belongs_to_department(user, getattr(settings, self.department_setting))


class MaternityAccess(DepartmentAccess):
    department_setting = "MATERNITY_DEPARTMENT"


class MedicineAccess(DepartmentAccess):
    department_setting = "MEDICINE_DEPARTMENT"
