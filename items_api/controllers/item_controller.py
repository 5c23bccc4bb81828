# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: item CRUD and the database status check."""
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from starlette.responses import Response

from items_api.core.dependencies import get_item_service
from items_api.core.logging import get_logger
from items_api.repositories import DataAccessError
from items_api.schemas import ConnectionStatus, ErrorResponse, ItemCreate, ItemUpdate, ItemUpdated
from items_api.services.item_service import ItemService

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Items"])

NOT_FOUND = "Item not found"
INTERNAL_ERROR = "Internal server error"

_ERROR_RESPONSES = {500: {"model": ErrorResponse, "description": "Data access failure"}}
_ITEM_RESPONSES = {**_ERROR_RESPONSES, 404: {"model": ErrorResponse, "description": NOT_FOUND}}


def _failed(what: str, exc: DataAccessError) -> HTTPException:
    logger.error("Error %s: %s", what, exc.message, extra={"operation": exc.operation})
    return HTTPException(status_code=500, detail=INTERNAL_ERROR)


@router.get("/status", response_model=ConnectionStatus, response_model_exclude_none=True,
            responses={500: {"model": ConnectionStatus}})
def connection_status(service: ItemService = Depends(get_item_service)):
    ok, body = service.connection_status()
    if ok:
        return body
    logger.error("Database connection error: %s", body["error"], extra={"operation": "ping"})
    return JSONResponse(status_code=500, content=body)


@router.get("/items", responses=_ERROR_RESPONSES)
def list_items(service: ItemService = Depends(get_item_service)):
    try:
        return service.list_items()
    except DataAccessError as exc:
        raise _failed("fetching items", exc)


@router.post("/items", status_code=201, responses=_ERROR_RESPONSES)
def create_item(body: ItemCreate, service: ItemService = Depends(get_item_service)):
    try:
        return service.create_item(body.model_dump())
    except DataAccessError as exc:
        raise _failed("creating item", exc)


@router.get("/items/{item_id}", responses=_ITEM_RESPONSES)
def get_item(item_id: str, service: ItemService = Depends(get_item_service)):
    try:
        item = service.get_item(item_id)
    except DataAccessError as exc:
        raise _failed("fetching item", exc)
    if item is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return item


@router.put("/items/{item_id}", response_model=ItemUpdated, responses=_ITEM_RESPONSES)
def update_item(item_id: str, body: ItemUpdate,
                service: ItemService = Depends(get_item_service)):
    try:
        return service.update_item(item_id, body.name, body.description)
    except KeyError:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    except DataAccessError as exc:
        raise _failed("updating item", exc)


@router.delete("/items/{item_id}", status_code=204, response_class=Response,
               responses=_ITEM_RESPONSES)
def delete_item(item_id: str, service: ItemService = Depends(get_item_service)):
    try:
        service.delete_item(item_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    except DataAccessError as exc:
        raise _failed("deleting item", exc)
    return Response(status_code=204)
