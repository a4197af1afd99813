from rest_framework.exceptions import NotAuthenticated
from rest_framework.permissions import BasePermission

# ViewSet action → entitlement name
ACTION_ENTITLEMENTS = {
    "create": "Create",
    "list": "Read",
    "retrieve": "Read",
    "update": "Update",
    "partial_update": "Update",
    "destroy": "Delete",
}


class EntitlementRequired(NotAuthenticated):
    default_detail = "Missing entitlement for this operation."
    default_code = "entitlement_required"


class HasEntitlement(BasePermission):
    """
    Grants access when the token carries `<Entity>.<Entitlement>`,
    `<Entity>.*` or `*`; role 'admin' holds every entitlement.
    A missing entitlement answers 401, not 403.
    """

    def has_permission(self, request, view):
        user = request.user
        if not (user and getattr(user, "is_authenticated", False)):
            return False

        entitlement = ACTION_ENTITLEMENTS.get(getattr(view, "action", None))
        if entitlement is None:
            return False

        if not user.has_entitlement(view.entity_name, entitlement):
            raise EntitlementRequired(f"Entitlement '{view.entity_name}.{entitlement}' is required.")
        return True
