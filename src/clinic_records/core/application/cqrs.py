from __future__ import annotations

import math
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar

import structlog

from clinic_records.core.domain.events.events import DomainEvent
from clinic_records.core.domain.services.event_dispatcher import EventDispatcher

# ───────────────────────────────────────────────
# Generic CQRS with pagination and timing logs
# ───────────────────────────────────────────────

C = TypeVar("C")  # Command type
Q = TypeVar("Q")  # Query type
R = TypeVar("R")  # Query result type
T = TypeVar("T")  # PagedResult item type

logger = structlog.get_logger(__name__)


# ───────────────────────────────────────────────
# DTOs
# ───────────────────────────────────────────────
@dataclass(frozen=True)
class CommandDTO:
    """Base for every write command (Create/Update/Patch/Delete)."""
    pass


@dataclass(frozen=True)
class PaginatedQueryDTO(Generic[Q]):
    """Paginated query: filters + page coordinates."""
    filters: Q
    page: int = 1
    page_size: int = 10


@dataclass(frozen=True)
class PagedResult(Generic[T]):
    """Standard paginated result."""
    items: Sequence[T]
    total: int
    page: int
    page_size: int
    total_pages: int = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "total_pages", math.ceil(self.total / self.page_size) if self.page_size else 0)


@dataclass(frozen=True)
class CommandResult(Generic[R]):
    """Handler output: the value returned to the caller plus events to publish."""
    value: R
    events: tuple[DomainEvent, ...] = ()


# ───────────────────────────────────────────────
# Handler protocols
# ───────────────────────────────────────────────
class CommandHandler(Protocol, Generic[C]):
    def handle(self, command: C) -> Any:
        """Processes a command and applies state changes."""
        ...


class QueryHandler(Protocol, Generic[Q, R]):
    def handle(self, query: Q) -> R:
        """Processes a query and returns a result."""
        ...


# ───────────────────────────────────────────────
# Buses with logging
# ───────────────────────────────────────────────
class CommandBus:
    """Command dispatcher with timing."""
    def __init__(self) -> None:
        self._handlers: dict[type, CommandHandler] = {}

    def register(self, command_type: type[C], handler: CommandHandler[C]) -> None:
        self._handlers[command_type] = handler
        logger.debug("command_handler.registered", command=command_type.__name__)

    def dispatch(self, command: C) -> Any:
        handler = self._handlers.get(type(command))
        if not handler:
            raise ValueError(f"No handler for command: {type(command).__name__}")
        start = time.perf_counter()
        logger.info("command.executing", command=type(command).__name__)
        result = handler.handle(command)
        elapsed = time.perf_counter() - start
        logger.info("command.executed", command=type(command).__name__, duration=f"{elapsed:.3f}s")
        return result


class QueryBus:
    """Query dispatcher with timing."""
    def __init__(self) -> None:
        self._handlers: dict[type, QueryHandler] = {}

    def register(self, query_type: type, handler: QueryHandler[Any, Any]) -> None:
        self._handlers[query_type] = handler
        logger.debug("query_handler.registered", query=query_type.__name__)

    def dispatch(self, query: Any) -> Any:
        handler = self._handlers.get(type(query))
        if not handler:
            raise ValueError(f"No handler for query: {type(query).__name__}")
        start = time.perf_counter()
        logger.info("query.executing", query=type(query).__name__)
        result = handler.handle(query)
        elapsed = time.perf_counter() - start
        logger.info("query.executed", query=type(query).__name__, duration=f"{elapsed:.3f}s")
        return result


class CommandBusImpl(CommandBus):
    """
    CommandBus that publishes the domain events carried by a handler's
    CommandResult and hands back only its value.
    """
    def __init__(self, dispatcher: EventDispatcher):
        super().__init__()
        self.dispatcher = dispatcher

    def dispatch(self, command: Any) -> Any:
        result = super().dispatch(command)

        if isinstance(result, CommandResult):
            for evt in result.events:
                self.dispatcher.dispatch(evt)
            return result.value
        return result


class QueryBusImpl(QueryBus):
    """Default QueryBus; everything lives in the base class."""
    pass
