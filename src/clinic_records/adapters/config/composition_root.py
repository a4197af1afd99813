from dependency_injector import containers, providers

container = None


def setup_di_container_from_settings(settings):
    """Builds the DI container once Django settings and apps are loaded."""
    global container  # noqa: PLW0603
    if container is not None:
        import structlog
        structlog.get_logger().debug("di.already_initialized")
        return container

    # ------- imports that touch Django models -------
    import structlog
    from django.utils import timezone

    from clinic_records.adapters.observability.audit_log import AuditTrailListener
    from clinic_records.adapters.repositories.django_entity_repo_impl import DjangoEntityRepoImpl

    # Commands / queries
    from clinic_records.core.application.commands.entity_commands import (
        CreateEntityCommand,
        DeleteEntityCommand,
        PatchEntityCommand,
        UpdateEntityCommand,
    )

    # CQRS buses
    from clinic_records.core.application.cqrs import CommandBusImpl, QueryBusImpl

    # Handlers
    from clinic_records.core.application.handlers.entity_command_handlers import (
        CreateEntityHandler,
        DeleteEntityHandler,
        PatchEntityHandler,
        UpdateEntityHandler,
    )
    from clinic_records.core.application.handlers.entity_query_handlers import (
        GetEntityHandler,
        ListEntitiesHandler,
    )
    from clinic_records.core.application.queries.entity_queries import GetEntityQuery, ListEntitiesQuery

    # Services
    from clinic_records.core.application.services.entity_access_service import EntityAccessService
    from clinic_records.core.application.services.entity_registry import EntityRegistry, default_definitions
    from clinic_records.core.application.services.patch_merger import PatchMerger
    from clinic_records.core.application.services.query_resolver import QueryResolver
    from clinic_records.core.domain.entities.dunning_letter_entity import DunningLetterEntity
    from clinic_records.core.domain.entities.prescription_entity import PrescriptionEntity
    from clinic_records.core.domain.entities.treatment_entity import TreatmentEntity
    from clinic_records.core.domain.events.events import EntityEvent
    from clinic_records.core.domain.schema.definitions import DUNNING_LETTERS, PRESCRIPTION, TREATMENT
    from clinic_records.core.domain.services.event_dispatcher import EventDispatcher
    from plugins.django_interface.models import DunningLetter, Prescription, Treatment

    # ─────────────────────────────────────────────────────────
    # DI container
    # ─────────────────────────────────────────────────────────
    class Container(containers.DeclarativeContainer):
        # Infra
        clock            = providers.Object(timezone.now)
        event_dispatcher = providers.Singleton(EventDispatcher)
        audit_listener   = providers.Singleton(AuditTrailListener)

        # CQRS
        command_bus = providers.Singleton(CommandBusImpl, dispatcher=event_dispatcher)
        query_bus   = providers.Singleton(QueryBusImpl)

        # Schema registry & query/patch engines
        registry = providers.Singleton(EntityRegistry, definitions=providers.Callable(default_definitions))
        resolver = providers.Singleton(QueryResolver)
        merger   = providers.Singleton(PatchMerger)

        # Repositories, keyed by entity name
        dunning_letter_repo = providers.Singleton(DjangoEntityRepoImpl, model=DunningLetter, entity_cls=DunningLetterEntity)
        prescription_repo   = providers.Singleton(DjangoEntityRepoImpl, model=Prescription,  entity_cls=PrescriptionEntity)
        treatment_repo      = providers.Singleton(DjangoEntityRepoImpl, model=Treatment,     entity_cls=TreatmentEntity)
        repositories = providers.Dict({
            DUNNING_LETTERS: dunning_letter_repo,
            PRESCRIPTION:    prescription_repo,
            TREATMENT:       treatment_repo,
        })

        # Handlers (commands)
        create_entity_handler = providers.Factory(CreateEntityHandler, registry=registry, repositories=repositories, clock=clock)
        update_entity_handler = providers.Factory(UpdateEntityHandler, registry=registry, repositories=repositories, clock=clock)
        patch_entity_handler  = providers.Factory(
            PatchEntityHandler,
            registry=registry,
            repositories=repositories,
            merger=merger,
            clock=clock,
        )
        delete_entity_handler = providers.Factory(DeleteEntityHandler, registry=registry, repositories=repositories, clock=clock)

        # Handlers (queries)
        list_entities_handler = providers.Factory(
            ListEntitiesHandler,
            registry=registry,
            repositories=repositories,
            resolver=resolver,
        )
        get_entity_handler    = providers.Factory(GetEntityHandler, registry=registry, repositories=repositories)

        # Per-entity services
        dunning_letters_service = providers.Singleton(
            EntityAccessService,
            definition=providers.Callable(EntityRegistry.get, registry, DUNNING_LETTERS),
            command_bus=command_bus,
            query_bus=query_bus,
        )
        prescription_service = providers.Singleton(
            EntityAccessService,
            definition=providers.Callable(EntityRegistry.get, registry, PRESCRIPTION),
            command_bus=command_bus,
            query_bus=query_bus,
        )
        treatment_service = providers.Singleton(
            EntityAccessService,
            definition=providers.Callable(EntityRegistry.get, registry, TREATMENT),
            command_bus=command_bus,
            query_bus=query_bus,
        )
        entity_services = providers.Dict({
            DUNNING_LETTERS: dunning_letters_service,
            PRESCRIPTION:    prescription_service,
            TREATMENT:       treatment_service,
        })

        def init(self):
            cmd_bus = self.command_bus()
            cmd_bus.register(CreateEntityCommand, self.create_entity_handler())
            cmd_bus.register(UpdateEntityCommand, self.update_entity_handler())
            cmd_bus.register(PatchEntityCommand,  self.patch_entity_handler())
            cmd_bus.register(DeleteEntityCommand, self.delete_entity_handler())

            qry_bus = self.query_bus()
            qry_bus.register(ListEntitiesQuery, self.list_entities_handler())
            qry_bus.register(GetEntityQuery,    self.get_entity_handler())

            self.event_dispatcher().subscribe(EntityEvent, self.audit_listener())

    # ------- instantiation -------
    container = Container()
    Container.init(container)
    return container


def get_entity_service(entity_name: str):
    """Returns the EntityAccessService registered for `entity_name`."""
    if container is None:
        from django.conf import settings
        setup_di_container_from_settings(settings)
    definition = container.registry().get(entity_name)
    return container.entity_services()[definition.name]
