"""
Notes API Endpoints.

REST endpoints for the current user's notes. The user id always comes from
the session, never from the request.
"""

from fastapi import APIRouter, Query, Response

from notecode.backend.core.dependencies import CurrentUser, RequestId, Storage
from notecode.backend.core.exceptions import NotFoundError
from notecode.backend.schemas.base import ApiResponse, ResponseMetadata
from notecode.backend.schemas.note import NoteCreate, NoteResponse, NoteUpdate

router = APIRouter()


def _note_list(notes: list, request_id: str) -> ApiResponse[list[NoteResponse]]:
    return ApiResponse(
        data=[NoteResponse.model_validate(note) for note in notes],
        metadata=ResponseMetadata(request_id=request_id),
    )


def _note(note, request_id: str) -> ApiResponse[NoteResponse]:
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List notes",
    description="All notes of the current user, most recently modified first.",
)
async def list_notes(
    user: CurrentUser,
    storage: Storage,
    request_id: RequestId,
) -> ApiResponse[list[NoteResponse]]:
    notes = await storage.get_notes_by_user_id(user.id)
    return _note_list(notes, request_id)


@router.get(
    "/search",
    response_model=ApiResponse[list[NoteResponse]],
    summary="Search notes",
    description="Case-insensitive substring search over note titles.",
)
async def search_notes(
    user: CurrentUser,
    storage: Storage,
    request_id: RequestId,
    q: str = Query(
        default="",
        max_length=100,
        description="Text to look for in titles. Empty returns every note.",
    ),
) -> ApiResponse[list[NoteResponse]]:
    notes = await storage.search_notes(user.id, q)
    return _note_list(notes, request_id)


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
)
async def create_note(
    data: NoteCreate,
    user: CurrentUser,
    storage: Storage,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    note = await storage.create_note(user.id, data)
    return _note(note, request_id)


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
)
async def get_note(
    note_id: str,
    user: CurrentUser,
    storage: Storage,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    note = await storage.get_note_by_id(note_id, user.id)
    if note is None:
        raise NotFoundError("Note not found")
    return _note(note, request_id)


@router.patch(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    description="Only the fields that are sent are changed.",
)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    user: CurrentUser,
    storage: Storage,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    note = await storage.update_note(note_id, user.id, data)
    return _note(note, request_id)


@router.delete(
    "/{note_id}",
    status_code=204,
    summary="Delete a note",
    description="Permanently delete a note. Succeeds even if the note is already gone.",
)
async def delete_note(
    note_id: str,
    user: CurrentUser,
    storage: Storage,
) -> Response:
    await storage.delete_note(note_id, user.id)
    return Response(status_code=204)
