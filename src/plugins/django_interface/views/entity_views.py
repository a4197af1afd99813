# ╭────────────────────────────────────────────────────────────────────────────╮
# │  ViewSets REST: DunningLetters / Prescription / Treatment                 │
# │                                                                            │
# │  • Tenant + user   → always taken from the token, never from the request  │
# │  • List contract   → pageSize, pageNumber, filters, searchTerm, sort*     │
# │  • Entitlements    → HasEntitlement (401 when missing)                    │
# │  • Latency trace   → decorator `track_http`                                │
# ╰────────────────────────────────────────────────────────────────────────────╯
from __future__ import annotations

import uuid
from collections.abc import Mapping

import structlog
from django.conf import settings
from rest_framework import status, viewsets
from rest_framework.response import Response

from clinic_records.adapters.config.composition_root import get_entity_service
from clinic_records.adapters.observability.decorators import track_http
from clinic_records.core.application.dtos.context_dto import RequestContext
from clinic_records.core.application.dtos.filter_dto import parse_filters
from clinic_records.core.application.dtos.patch_dto import PATCH_DOCUMENT_MISSING
from clinic_records.core.application.services.entity_access_service import EntityAccessService
from clinic_records.core.application.services.query_resolver import QueryResolver
from clinic_records.core.domain.events.exceptions import PatchError
from clinic_records.core.domain.schema.definitions import DUNNING_LETTERS, PRESCRIPTION, TREATMENT
from plugins.django_interface.permissions import HasEntitlement

from ..serializers.entity_serializers import (
    DunningLetterSerializer,
    PrescriptionSerializer,
    TreatmentSerializer,
)

UUID_REGEX = r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"


# ╭──────────────────────────────────────────────────────────────────────────╮
# │ Base ViewSet                                                             │
# ╰──────────────────────────────────────────────────────────────────────────╯
class EntityViewSet(viewsets.ViewSet):
    """
    Generic CRUD surface over one EntityAccessService. Subclasses only set
    `entity_name` and `serializer_class`.
    """
    permission_classes = [HasEntitlement]
    lookup_value_regex = UUID_REGEX

    entity_name: str = ""
    serializer_class = None

    @property
    def service(self) -> EntityAccessService:
        return get_entity_service(self.entity_name)

    @staticmethod
    def _context(request) -> RequestContext:
        ctx = RequestContext(tenant_id=request.user.tenant_id, user_id=request.user.id)
        structlog.contextvars.bind_contextvars(tenant_id=str(ctx.tenant_id), user_id=str(ctx.user_id))
        return ctx

    # ------------------------------------------------------------------ reads
    def list(self, request):
        params = request.query_params
        page, page_size = QueryResolver.validate_pagination(
            params.get("pageNumber", 1),
            params.get("pageSize", settings.DEFAULT_PAGE_SIZE),
        )
        filters = parse_filters(params.get("filters"))

        res = self.service.get(
            self._context(request),
            filters=filters,
            search_term=params.get("searchTerm"),
            page_number=page,
            page_size=page_size,
            sort_field=params.get("sortField") or None,
            sort_order=params.get("sortOrder") or "asc",
        )
        payload = {
            "items": self.serializer_class(res.items, many=True).data,
            "total_count": res.total,
            "page_number": res.page,
            "page_size": res.page_size,
            "total_pages": res.total_pages,
        }
        return Response(payload, status=status.HTTP_200_OK)

    def retrieve(self, request, pk=None):
        projection = self.service.get_by_id(
            self._context(request),
            uuid.UUID(pk),
            fields=request.query_params.get("fields"),
        )
        data = self.serializer_class(projection.entity, fields=projection.fields).data
        return Response(data, status=status.HTTP_200_OK)

    # ------------------------------------------------------------------ writes
    def create(self, request):
        new_id = self.service.create(self._context(request), request.data)
        return Response({"id": str(new_id)}, status=status.HTTP_200_OK)

    def update(self, request, pk=None):
        ok = self.service.update(self._context(request), uuid.UUID(pk), request.data)
        return Response({"status": ok}, status=status.HTTP_200_OK)

    def partial_update(self, request, pk=None):
        document = request.data
        if document is None or (isinstance(document, Mapping) and not document):
            raise PatchError(PATCH_DOCUMENT_MISSING)
        ok = self.service.patch(self._context(request), uuid.UUID(pk), document)
        return Response({"status": ok}, status=status.HTTP_200_OK)

    def destroy(self, request, pk=None):
        ok = self.service.delete(self._context(request), uuid.UUID(pk))
        return Response({"status": ok}, status=status.HTTP_200_OK)


# ───────────────────────────────────────────────────────────────────────────
class DunningLettersViewSet(EntityViewSet):
    entity_name = DUNNING_LETTERS
    serializer_class = DunningLetterSerializer

    @track_http("DunningLettersViewSet_list")
    def list(self, request):
        return super().list(request)

    @track_http("DunningLettersViewSet_retrieve")
    def retrieve(self, request, pk=None):
        return super().retrieve(request, pk)

    @track_http("DunningLettersViewSet_create")
    def create(self, request):
        return super().create(request)

    @track_http("DunningLettersViewSet_update")
    def update(self, request, pk=None):
        return super().update(request, pk)

    @track_http("DunningLettersViewSet_partial_update")
    def partial_update(self, request, pk=None):
        return super().partial_update(request, pk)

    @track_http("DunningLettersViewSet_destroy")
    def destroy(self, request, pk=None):
        return super().destroy(request, pk)


# ───────────────────────────────────────────────────────────────────────────
class PrescriptionViewSet(EntityViewSet):
    entity_name = PRESCRIPTION
    serializer_class = PrescriptionSerializer

    @track_http("PrescriptionViewSet_list")
    def list(self, request):
        return super().list(request)

    @track_http("PrescriptionViewSet_retrieve")
    def retrieve(self, request, pk=None):
        return super().retrieve(request, pk)

    @track_http("PrescriptionViewSet_create")
    def create(self, request):
        return super().create(request)

    @track_http("PrescriptionViewSet_update")
    def update(self, request, pk=None):
        return super().update(request, pk)

    @track_http("PrescriptionViewSet_partial_update")
    def partial_update(self, request, pk=None):
        return super().partial_update(request, pk)

    @track_http("PrescriptionViewSet_destroy")
    def destroy(self, request, pk=None):
        return super().destroy(request, pk)


# ───────────────────────────────────────────────────────────────────────────
class TreatmentViewSet(EntityViewSet):
    entity_name = TREATMENT
    serializer_class = TreatmentSerializer

    @track_http("TreatmentViewSet_list")
    def list(self, request):
        return super().list(request)

    @track_http("TreatmentViewSet_retrieve")
    def retrieve(self, request, pk=None):
        return super().retrieve(request, pk)

    @track_http("TreatmentViewSet_create")
    def create(self, request):
        return super().create(request)

    @track_http("TreatmentViewSet_update")
    def update(self, request, pk=None):
        return super().update(request, pk)

    @track_http("TreatmentViewSet_partial_update")
    def partial_update(self, request, pk=None):
        return super().partial_update(request, pk)

    @track_http("TreatmentViewSet_destroy")
    def destroy(self, request, pk=None):
        return super().destroy(request, pk)
