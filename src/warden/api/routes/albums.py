"""Albums API endpoints.

POST /api/albums/create - Create album
POST /api/albums/update - Replace album fields
POST /api/albums/delete - Delete album
POST /api/albums/items/add - Add an archive item to an album
POST /api/albums/items/remove - Remove an archive item from an album
POST /api/albums/items/reorder - Set item positions inside an album

Albums are administrative; callers are filtered before they reach this
service.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from warden.api.app import get_db_session
from warden.db.repo import DbSession
from warden.models.types import (
    AlbumCreateRequest,
    AlbumDeleteRequest,
    AlbumFields,
    AlbumItemAddRequest,
    AlbumItemOut,
    AlbumItemRemoveRequest,
    AlbumItemResponse,
    AlbumOut,
    AlbumReorderRequest,
    AlbumResponse,
    AlbumUpdateRequest,
    MessageResponse,
    ReorderResponse,
)
from warden.records.albums import (
    AlbumInput,
    ItemOrder,
    add_album_item,
    create_album,
    delete_album,
    remove_album_item,
    reorder_album_items,
    update_album,
)

router = APIRouter()


def _album_input(body: AlbumFields) -> AlbumInput:
    return AlbumInput(**body.model_dump(include=set(AlbumFields.model_fields)))


@router.post("/albums/create", response_model=AlbumResponse)
def create_album_endpoint(
    body: AlbumCreateRequest,
    session: DbSession = Depends(get_db_session),
) -> AlbumResponse:
    album = create_album(session, body.actor_id, _album_input(body))
    return AlbumResponse(album=AlbumOut.model_validate(album))


@router.post("/albums/update", response_model=AlbumResponse)
def update_album_endpoint(
    body: AlbumUpdateRequest,
    session: DbSession = Depends(get_db_session),
) -> AlbumResponse:
    """Replace an album; omitted optional fields reset to defaults."""
    album = update_album(session, body.album_id, body.actor_id, _album_input(body))
    return AlbumResponse(album=AlbumOut.model_validate(album))


@router.post("/albums/delete", response_model=MessageResponse)
def delete_album_endpoint(
    body: AlbumDeleteRequest,
    session: DbSession = Depends(get_db_session),
) -> MessageResponse:
    delete_album(session, body.album_id, body.actor_id)
    return MessageResponse(message="Album deleted successfully")


@router.post("/albums/items/add", response_model=AlbumItemResponse)
def add_album_item_endpoint(
    body: AlbumItemAddRequest,
    session: DbSession = Depends(get_db_session),
) -> AlbumItemResponse:
    """Add an archive item to an album.

    Raises:
        NotFound: Album or item missing (404).
        AlreadyExists: Item already in the album (409).
    """
    row = add_album_item(session, body.album_id, body.item_id, body.actor_id, body.sort_order)
    return AlbumItemResponse(album_item=AlbumItemOut.model_validate(row))


@router.post("/albums/items/remove", response_model=MessageResponse)
def remove_album_item_endpoint(
    body: AlbumItemRemoveRequest,
    session: DbSession = Depends(get_db_session),
) -> MessageResponse:
    remove_album_item(session, body.album_id, body.item_id)
    return MessageResponse(message="Item removed from album")


@router.post("/albums/items/reorder", response_model=ReorderResponse)
def reorder_album_items_endpoint(
    body: AlbumReorderRequest,
    session: DbSession = Depends(get_db_session),
) -> ReorderResponse:
    """Apply new positions; item ids not in the album are skipped."""
    orders = [ItemOrder(item_id=o.item_id, sort_order=o.sort_order) for o in body.orders]
    moved = reorder_album_items(session, body.album_id, orders)
    return ReorderResponse(reordered=moved)
