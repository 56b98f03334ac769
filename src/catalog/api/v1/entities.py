"""Generic entity endpoints, one set per registered collection.

Every write runs the existence guard before persisting and every read is
hydrated before it is serialized.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Request, status

from src.catalog.api.dependencies import ActorId, EntityServiceDep
from src.catalog.schemas.documents import encode_document
from src.catalog.schemas.pagination import EntityResponse, PaginatedResponse

router = APIRouter(tags=["entities"])

Payload = Annotated[dict[str, Any], Body(description="Entity fields")]


def _paginated(items: list, meta: Any, message: str) -> PaginatedResponse:
    return PaginatedResponse(
        message=message,
        data=encode_document(items),
        pagination=meta,
    )


@router.post(
    "/{collection}",
    response_model=EntityResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create entity",
    responses={
        201: {"description": "Entity created"},
        400: {"description": "A referenced entity is missing or inactive"},
        404: {"description": "Unknown collection"},
    },
)
async def create_entity(
    collection: str,
    payload: Payload,
    service: EntityServiceDep,
    actor_id: ActorId,
) -> EntityResponse:
    spec = service.registry.require(collection)
    document = await service.create(collection, payload, actor_id)
    return EntityResponse(
        message=f"{spec.label} created successfully",
        data=encode_document(document),
    )


@router.get(
    "/{collection}",
    response_model=PaginatedResponse,
    summary="List entities",
    description=(
        "Supports page, limit, search, status, sortBy, sortOrder and one "
        "integer filter per reference field."
    ),
)
async def list_entities(
    collection: str,
    request: Request,
    service: EntityServiceDep,
) -> PaginatedResponse:
    spec = service.registry.require(collection)
    items, meta = await service.list_entities(collection, request.query_params)
    return _paginated(items, meta, f"{spec.label} list retrieved successfully")


@router.get(
    "/{collection}/mine",
    response_model=PaginatedResponse,
    summary="List entities created by the acting user",
    responses={401: {"description": "No acting user"}},
)
async def list_own_entities(
    collection: str,
    request: Request,
    service: EntityServiceDep,
    actor_id: ActorId,
) -> PaginatedResponse:
    spec = service.registry.require(collection)
    items, meta = await service.list_by_creator(collection, actor_id, request.query_params)
    return _paginated(items, meta, f"{spec.label} list retrieved successfully")


@router.get(
    "/{collection}/by/{field}/{value}",
    response_model=PaginatedResponse,
    summary="List entities referencing one entity",
    responses={
        400: {"description": "Reference value is not an integer"},
        404: {"description": "Referenced entity not found or inactive"},
    },
)
async def list_entities_by_reference(
    collection: str,
    field: str,
    value: str,
    request: Request,
    service: EntityServiceDep,
) -> PaginatedResponse:
    spec = service.registry.require(collection)
    items, meta = await service.list_by_reference(collection, field, value, request.query_params)
    return _paginated(items, meta, f"{spec.label} list retrieved successfully")


@router.get(
    "/{collection}/{entity_id}",
    response_model=EntityResponse,
    summary="Get entity by object id or sequence id",
    responses={
        400: {"description": "Malformed identifier"},
        404: {"description": "Entity not found"},
    },
)
async def get_entity(
    collection: str,
    entity_id: str,
    service: EntityServiceDep,
) -> EntityResponse:
    spec = service.registry.require(collection)
    document = await service.get(collection, entity_id)
    return EntityResponse(
        message=f"{spec.label} retrieved successfully",
        data=encode_document(document),
    )


@router.put(
    "/{collection}/{entity_id}",
    response_model=EntityResponse,
    summary="Update entity",
    responses={
        400: {"description": "Malformed identifier or invalid reference"},
        404: {"description": "Entity not found"},
    },
)
async def update_entity(
    collection: str,
    entity_id: str,
    payload: Payload,
    service: EntityServiceDep,
    actor_id: ActorId,
) -> EntityResponse:
    spec = service.registry.require(collection)
    document = await service.update(collection, entity_id, payload, actor_id)
    return EntityResponse(
        message=f"{spec.label} updated successfully",
        data=encode_document(document),
    )


@router.delete(
    "/{collection}/{entity_id}",
    response_model=EntityResponse,
    summary="Deactivate entity",
    description="Soft delete: the active flag is cleared, the document is kept.",
)
async def delete_entity(
    collection: str,
    entity_id: str,
    service: EntityServiceDep,
    actor_id: ActorId,
) -> EntityResponse:
    spec = service.registry.require(collection)
    document = await service.deactivate(collection, entity_id, actor_id)
    return EntityResponse(
        message=f"{spec.label} deleted successfully",
        data=encode_document(document),
    )
