from django.apps import AppConfig


class ClinicRecordsConfig(AppConfig):
    name = "clinic_records_api"
    verbose_name = "Clinic Records API"

    def ready(self):
        from django.conf import settings

        # ─── DI container ──────────────────────────────────────────
        from clinic_records.adapters.config.composition_root import (
            setup_di_container_from_settings as build_container,
        )

        build_container(settings)
