from rest_framework.routers import DefaultRouter

from .views.entity_views import (
    DunningLettersViewSet,
    PrescriptionViewSet,
    TreatmentViewSet,
)

# (prefix, ViewSet)
RESOURCES = [
    ("dunningletters", DunningLettersViewSet),
    ("prescription",   PrescriptionViewSet),
    ("treatment",      TreatmentViewSet),
]

def build_router() -> DefaultRouter:
    router = DefaultRouter(trailing_slash=False)
    for prefix, viewset in RESOURCES:
        router.register(prefix, viewset, basename=prefix.replace('-', '_'))
    return router
