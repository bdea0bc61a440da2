import logging
from collections.abc import Awaitable, Callable

from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import JSONResponse

from src.guests.errors import GuestNotFoundError, RSVPErrorKind
from src.guests.features.submit_rsvp.dtos import (
    CombinedRequest,
    LegacyRSVPRequest,
    Stage1Request,
    Stage2Request,
)
from src.guests.features.submit_rsvp.state_machine import RSVPOutcome
from src.guests.features.submit_rsvp.write_model import RSVPWriteModel, get_rsvp_write_model
from src.guests.responses import RSVPSubmitResponse
from src.guests.tokens import RSVPTokenCodec, get_token_codec
from src.guests.urls import (
    SUBMIT_COMBINED_URL,
    SUBMIT_LEGACY_URL,
    SUBMIT_STAGE1_URL,
    SUBMIT_STAGE2_URL,
)
from src.notifications.dispatcher import NotificationDispatcher, get_notification_dispatcher

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_TOKEN_MESSAGE = "Invalid or expired RSVP link"

STATUS_BY_ERROR_KIND = {
    RSVPErrorKind.NOT_FOUND.value: 404,
    RSVPErrorKind.INVALID_STATE.value: 409,
    RSVPErrorKind.VALIDATION.value: 400,
    RSVPErrorKind.PERSISTENCE.value: 500,
}


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


async def _submit(
    token: str,
    request: Stage1Request | Stage2Request | LegacyRSVPRequest,
    process: Callable[..., Awaitable[RSVPOutcome]],
    codec: RSVPTokenCodec,
    dispatcher: NotificationDispatcher,
    background_tasks: BackgroundTasks,
) -> RSVPSubmitResponse | JSONResponse:
    payload = codec.verify_token(token)
    if payload is None:
        return _failure(400, INVALID_TOKEN_MESSAGE)

    # the link decides who is answering, the body has to agree with it
    if (payload.guest_id, payload.event_id) != (request.guest_id, request.event_id):
        logger.warning(
            "RSVP body for guest %s/event %s does not match token for guest %s/event %s",
            request.guest_id,
            request.event_id,
            payload.guest_id,
            payload.event_id,
        )
        return _failure(404, GuestNotFoundError.public_message)

    outcome = await process(request)
    response = RSVPSubmitResponse.from_result(outcome.result)
    if not outcome.result.success:
        return JSONResponse(
            status_code=STATUS_BY_ERROR_KIND.get(outcome.result.error_kind, 500),
            content=response.model_dump(mode="json", by_alias=True, exclude_none=True),
        )

    background_tasks.add_task(dispatcher.dispatch, outcome.event, outcome.effects)
    return response


@router.post(SUBMIT_STAGE1_URL, response_model=RSVPSubmitResponse, response_model_exclude_none=True)
async def submit_stage1(
    token: str,
    rsvp_data: Stage1Request,
    background_tasks: BackgroundTasks,
    write_model: RSVPWriteModel = Depends(get_rsvp_write_model),
    codec: RSVPTokenCodec = Depends(get_token_codec),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    """Record whether the guest is coming, plus ceremonies and plus-one."""
    return await _submit(token, rsvp_data, write_model.process_stage1, codec, dispatcher, background_tasks)


@router.post(SUBMIT_STAGE2_URL, response_model=RSVPSubmitResponse, response_model_exclude_none=True)
async def submit_stage2(
    token: str,
    rsvp_data: Stage2Request,
    background_tasks: BackgroundTasks,
    write_model: RSVPWriteModel = Depends(get_rsvp_write_model),
    codec: RSVPTokenCodec = Depends(get_token_codec),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    """Record travel, accommodation, children and meal choices for a confirmed guest."""
    return await _submit(token, rsvp_data, write_model.process_stage2, codec, dispatcher, background_tasks)


@router.post(SUBMIT_COMBINED_URL, response_model=RSVPSubmitResponse, response_model_exclude_none=True)
async def submit_combined(
    token: str,
    rsvp_data: CombinedRequest,
    background_tasks: BackgroundTasks,
    write_model: RSVPWriteModel = Depends(get_rsvp_write_model),
    codec: RSVPTokenCodec = Depends(get_token_codec),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    """Both stages in a single request."""
    return await _submit(token, rsvp_data, write_model.process_combined, codec, dispatcher, background_tasks)


@router.post(SUBMIT_LEGACY_URL, response_model=RSVPSubmitResponse, response_model_exclude_none=True)
async def submit_legacy(
    token: str,
    rsvp_data: LegacyRSVPRequest,
    background_tasks: BackgroundTasks,
    write_model: RSVPWriteModel = Depends(get_rsvp_write_model),
    codec: RSVPTokenCodec = Depends(get_token_codec),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    return await _submit(token, rsvp_data, write_model.process_legacy, codec, dispatcher, background_tasks)
