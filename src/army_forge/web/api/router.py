from __future__ import annotations

from fastapi import APIRouter, Request, Response

from army_forge.domain.actions import AddUnit, DeselectOption, RemoveUnit, SelectOption, SetCombined
from army_forge.sim.reducer import ActionResult, apply_action
from army_forge.view.catalog import build_catalog
from army_forge.web.api import mappers, schemas
from army_forge.web.session import get_or_create_session, reset_session

router = APIRouter(prefix="/api")


def _from_result(result: ActionResult) -> schemas.ApiResponse:
    payload = schemas.ApiResponse(
        ok=result.ok,
        message=result.message,
        message_kind=result.message_kind,
        events=[schemas.UiEventEntry(kind=event.kind, message=event.message) for event in result.ui_events],
    )
    if result.state is not None:
        payload.state = mappers.build_state_response(result.state)
    return payload


async def _dispatch(request: Request, response: Response, action) -> schemas.ApiResponse:
    session_id, session = get_or_create_session(request.cookies.get("session_id"))
    response.set_cookie("session_id", session_id, httponly=True)
    async with session.lock:
        return _from_result(apply_action(session.state, action))


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/catalog", response_model=schemas.CatalogResponse)
async def get_catalog(request: Request, response: Response):
    session_id, session = get_or_create_session(request.cookies.get("session_id"))
    async with session.lock:
        data = build_catalog(session.state.army_book)
    response.set_cookie("session_id", session_id, httponly=True)
    return data


@router.get("/list", response_model=schemas.ListStateResponse)
async def get_list(request: Request, response: Response):
    session_id, session = get_or_create_session(request.cookies.get("session_id"))
    async with session.lock:
        data = mappers.build_state_response(session.state)
    response.set_cookie("session_id", session_id, httponly=True)
    return data


@router.post("/list/reset", response_model=schemas.ApiResponse)
async def reset_list(request: Request, response: Response):
    session_id, session = get_or_create_session(request.cookies.get("session_id"))
    response.set_cookie("session_id", session_id, httponly=True)
    async with session.lock:
        reset_session(session)
        return schemas.ApiResponse(
            ok=True,
            message="List reset",
            message_kind="info",
            state=mappers.build_state_response(session.state),
        )


@router.post("/list/units", response_model=schemas.ApiResponse)
async def add_unit(payload: schemas.AddUnitRequest, request: Request, response: Response):
    return await _dispatch(request, response, AddUnit(definition_id=payload.unit_id))


@router.delete("/list/units/{unit_id}", response_model=schemas.ApiResponse)
async def remove_unit(unit_id: str, request: Request, response: Response):
    return await _dispatch(request, response, RemoveUnit(unit_id=unit_id))


@router.post("/list/units/{unit_id}/combined", response_model=schemas.ApiResponse)
async def set_combined(unit_id: str, payload: schemas.CombinedRequest, request: Request, response: Response):
    return await _dispatch(request, response, SetCombined(unit_id=unit_id, combined=payload.combined))


@router.post("/list/units/{unit_id}/options", response_model=schemas.ApiResponse)
async def select_option(unit_id: str, payload: schemas.OptionRequest, request: Request, response: Response):
    action = SelectOption(unit_id=unit_id, section_id=payload.section_id, option_id=payload.option_id)
    return await _dispatch(request, response, action)


@router.delete("/list/units/{unit_id}/options/{section_id}/{option_id}", response_model=schemas.ApiResponse)
async def deselect_option(unit_id: str, section_id: str, option_id: str, request: Request, response: Response):
    action = DeselectOption(unit_id=unit_id, section_id=section_id, option_id=option_id)
    return await _dispatch(request, response, action)
