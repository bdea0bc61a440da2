"""Write model for the submit RSVP feature.

Each submission runs the state machine inside one transaction. Known RSVP
failures roll the transaction back and come back as failed outcomes; anything
unexpected is treated as a persistence failure.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from functools import partial

import sentry_sdk
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.guests.dtos import RSVPResultDTO
from src.guests.errors import RSVPError, RSVPErrorKind
from src.guests.features.submit_rsvp.dtos import (
    CombinedRequest,
    LegacyRSVPRequest,
    Stage1Request,
    Stage2Request,
)
from src.guests.features.submit_rsvp.state_machine import (
    FAILURE_MESSAGE,
    RSVPOutcome,
    RSVPStateMachine,
)
from src.guests.repository.storage import RSVPStorage, SqlRSVPStorage
from src.rooms.auto_assignment import RoomAssignmentService, SqlAutoRoomAssignment

logger = logging.getLogger(__name__)


class RSVPWriteModel(ABC):
    """Abstract base class for RSVP write operations."""

    @abstractmethod
    async def process_stage1(self, request: Stage1Request) -> RSVPOutcome:
        """Record attendance, ceremonies and plus-one for a guest."""
        raise NotImplementedError

    @abstractmethod
    async def process_stage2(self, request: Stage2Request) -> RSVPOutcome:
        """Record travel, accommodation, children and meals for a confirmed guest."""
        raise NotImplementedError

    @abstractmethod
    async def process_combined(self, request: CombinedRequest) -> RSVPOutcome:
        raise NotImplementedError

    @abstractmethod
    async def process_legacy(self, request: LegacyRSVPRequest) -> RSVPOutcome:
        raise NotImplementedError


class SqlRSVPWriteModel(RSVPWriteModel):
    """SQL implementation of RSVP write operations."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        storage_factory: Callable[[AsyncSession], RSVPStorage] = SqlRSVPStorage,
        room_assignment_factory: Callable[[AsyncSession], RoomAssignmentService] | None = SqlAutoRoomAssignment,
    ) -> None:
        self.session_overwrite = session_overwrite
        self.storage_factory = storage_factory
        self.room_assignment_factory = room_assignment_factory

    async def _run(
        self,
        step: Callable[[RSVPStateMachine], Awaitable[RSVPOutcome]],
        guest_id: int,
    ) -> RSVPOutcome:
        try:
            async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
                machine = RSVPStateMachine(
                    storage=self.storage_factory(session),
                    room_assignment=(
                        self.room_assignment_factory(session) if self.room_assignment_factory else None
                    ),
                )
                return await step(machine)
        except RSVPError as e:
            logger.info("RSVP for guest %s rejected: %s", guest_id, e)
            return RSVPOutcome.failure(e)
        except Exception as e:
            logger.exception("Error processing RSVP for guest %s", guest_id)
            sentry_sdk.capture_exception(e)
            return RSVPOutcome(
                result=RSVPResultDTO(
                    success=False,
                    message=FAILURE_MESSAGE,
                    error_kind=RSVPErrorKind.PERSISTENCE.value,
                )
            )

    async def process_stage1(self, request: Stage1Request) -> RSVPOutcome:
        return await self._run(lambda machine: machine.stage1(request), request.guest_id)

    async def process_stage2(self, request: Stage2Request) -> RSVPOutcome:
        return await self._run(lambda machine: machine.stage2(request), request.guest_id)

    async def process_combined(self, request: CombinedRequest) -> RSVPOutcome:
        return await self._run(lambda machine: machine.combined(request), request.guest_id)

    async def process_legacy(self, request: LegacyRSVPRequest) -> RSVPOutcome:
        return await self._run(lambda machine: machine.legacy(request), request.guest_id)


def get_rsvp_write_model() -> RSVPWriteModel:
    """Dependency to get RSVP write model instance."""
    return SqlRSVPWriteModel()
