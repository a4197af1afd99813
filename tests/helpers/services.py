from clinic_records.adapters.config import composition_root
from clinic_records.core.application.commands.entity_commands import (
    CreateEntityCommand,
    DeleteEntityCommand,
    PatchEntityCommand,
    UpdateEntityCommand,
)
from clinic_records.core.application.cqrs import CommandBusImpl, QueryBusImpl
from clinic_records.core.application.handlers.entity_command_handlers import (
    CreateEntityHandler,
    DeleteEntityHandler,
    PatchEntityHandler,
    UpdateEntityHandler,
)
from clinic_records.core.application.handlers.entity_query_handlers import GetEntityHandler, ListEntitiesHandler
from clinic_records.core.application.queries.entity_queries import GetEntityQuery, ListEntitiesQuery
from clinic_records.core.application.services.entity_access_service import EntityAccessService
from clinic_records.core.application.services.entity_registry import EntityRegistry, default_definitions
from clinic_records.core.application.services.patch_merger import PatchMerger
from clinic_records.core.application.services.query_resolver import QueryResolver
from clinic_records.core.domain.events.events import DomainEvent
from clinic_records.core.domain.services.event_dispatcher import EventDispatcher


def build_service(entity_name, events=None, clock=None):
    """
    Wires one EntityAccessService over the Django repositories with a private
    dispatcher; published events are appended to `events` when given.
    """
    registry = EntityRegistry(default_definitions())
    repos = composition_root.container.repositories()
    dispatcher = EventDispatcher()
    if events is not None:
        dispatcher.subscribe(DomainEvent, events.append)

    extra = {"clock": clock} if clock else {}
    commands = CommandBusImpl(dispatcher)
    commands.register(CreateEntityCommand, CreateEntityHandler(registry, repos, **extra))
    commands.register(UpdateEntityCommand, UpdateEntityHandler(registry, repos, **extra))
    commands.register(PatchEntityCommand, PatchEntityHandler(registry, repos, PatchMerger(), **extra))
    commands.register(DeleteEntityCommand, DeleteEntityHandler(registry, repos, **extra))

    queries = QueryBusImpl()
    queries.register(ListEntitiesQuery, ListEntitiesHandler(registry, repos, QueryResolver()))
    queries.register(GetEntityQuery, GetEntityHandler(registry, repos))

    return EntityAccessService(registry.get(entity_name), commands, queries)
