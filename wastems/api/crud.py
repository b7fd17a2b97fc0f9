"""Generic list/get/create/update/delete routes for one collection.

Domain routers declare their specific routes first and then call
register_crud_routes(), so literal paths such as /register are matched
before the catch-all /{item_id}.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Any

from fastapi import APIRouter, Depends, status

from wastems.api.dependencies import (
    ListQueryDep,
    ensure_self_or_roles,
    get_current_user,
    repository,
    require_roles,
)
from wastems.core.config import get_settings
from wastems.core.constants import ADMIN_ONLY, ULB_ADMIN_OR_ABOVE
from wastems.domain.entities import AuthenticatedUser
from wastems.domain.exceptions import ValidationException
from wastems.infrastructure.firebase.repositories import DocumentRepository
from wastems.schemas.common import CamelModel
from wastems.shared.listing import FilterPredicate, ListQuery, apply_list_query

logger = logging.getLogger(__name__)

Record = dict[str, Any]


@dataclass(frozen=True)
class CrudResource:
    """How one collection is exposed over HTTP.

    Attributes:
        collection: Store collection name.
        label: Singular human label used in messages ("Citizen").
        plural: Key of the list in list responses ("citizens").
        create_model: Body of POST; required fields mirror the collection table.
        update_model: Body of PUT; every field optional, unknown keys dropped.
        search_fields: Dotted paths matched by ?search=.
        filter_predicate: Categorical ?filter= test; None disables filtering.
        decorate: Adds derived (unstored) fields to each returned record.
        defaults: Initial state merged under the create body.
        prepare: Completes a create payload from the calling user.
        read_roles: Roles allowed to list/get; None means any authenticated user.
        get_roles: When set, GET /{id} is open to these roles for any record and to
            every other user for the record whose id is their own; read_roles
            then only guards the list.
        write_roles: Roles allowed to update, and to create unless create_roles is set.
        create_roles: Roles allowed to create; None falls back to write_roles.
        delete_roles: Roles allowed to delete.
    """

    collection: str
    label: str
    plural: str
    create_model: type[CamelModel]
    update_model: type[CamelModel]
    search_fields: tuple[str, ...]
    filter_predicate: FilterPredicate | None = None
    decorate: Callable[[Record], Record] | None = None
    defaults: Callable[[], Record] | None = None
    prepare: Callable[[Record, AuthenticatedUser], Record] | None = None
    read_roles: tuple[str, ...] | None = None
    get_roles: tuple[str, ...] | None = None
    write_roles: tuple[str, ...] = ULB_ADMIN_OR_ABOVE
    create_roles: tuple[str, ...] | None = None
    delete_roles: tuple[str, ...] = ADMIN_ONLY

    def present(self, record: Record) -> Record:
        return self.decorate(record) if self.decorate else record


async def list_page(
    repo: DocumentRepository,
    resource: CrudResource,
    query: ListQuery,
    records: list[Record] | None = None,
) -> Record:
    """Search, filter and paginate records (newest first when not given) into the list envelope.

    Without records at most MAX_LIST_FETCH documents are scanned; "truncated"
    is true when that cap was reached and older records are left out.
    """
    truncated = False
    if records is None:
        fetch_limit = get_settings().max_list_fetch
        records = await repo.list_recent(fetch_limit)
        truncated = len(records) >= fetch_limit
        if truncated:
            logger.warning("%s list capped at %d records", repo.collection, fetch_limit)
    page = apply_list_query(
        records,
        query,
        search_fields=resource.search_fields,
        predicate=resource.filter_predicate,
    )
    return {
        "success": True,
        "data": {
            resource.plural: [resource.present(r) for r in page.items],
            "pagination": page.pagination(),
            "truncated": truncated,
        },
    }


def register_crud_routes(router: APIRouter, resource: CrudResource, base: str = "") -> None:
    """Add list/get/create/update/delete for resource to router under base."""
    RepoDep = Annotated[
        DocumentRepository, Depends(repository(resource.collection, resource.label))
    ]
    reader = require_roles(*resource.read_roles) if resource.read_roles else get_current_user
    Reader = Annotated[AuthenticatedUser, Depends(reader)]
    Getter = Annotated[
        AuthenticatedUser, Depends(get_current_user if resource.get_roles else reader)
    ]
    Writer = Annotated[AuthenticatedUser, Depends(require_roles(*resource.write_roles))]
    Creator = Annotated[
        AuthenticatedUser,
        Depends(require_roles(*(resource.create_roles or resource.write_roles))),
    ]
    Deleter = Annotated[AuthenticatedUser, Depends(require_roles(*resource.delete_roles))]
    CreateBody = resource.create_model
    UpdateBody = resource.update_model
    item_path = f"{base}/{{item_id}}"
    name = resource.plural

    async def list_items(repo: RepoDep, query: ListQueryDep, _user: Reader) -> Record:
        return await list_page(repo, resource, query)

    async def get_item(item_id: str, repo: RepoDep, user: Getter) -> Record:
        if resource.get_roles:
            ensure_self_or_roles(user, item_id, resource.get_roles)
        record = await repo.get_or_404(item_id)
        return {"success": True, "data": resource.present(record)}

    async def create_item(body: CreateBody, repo: RepoDep, user: Creator) -> Record:
        data = {**(resource.defaults() if resource.defaults else {}), **body.to_document()}
        if resource.prepare:
            data = resource.prepare(data, user)
        record = await repo.create(data)
        return {
            "success": True,
            "message": f"{resource.label} created successfully",
            "data": resource.present(record),
        }

    async def update_item(
        item_id: str,
        body: UpdateBody,
        repo: RepoDep,
        _user: Writer,
    ) -> Record:
        changes = body.to_document(exclude_unset=True)
        if not changes:
            raise ValidationException("No updatable fields provided")
        record = await repo.update(item_id, changes)
        return {
            "success": True,
            "message": f"{resource.label} updated successfully",
            "data": resource.present(record),
        }

    async def delete_item(item_id: str, repo: RepoDep, _user: Deleter) -> Record:
        await repo.delete(item_id)
        return {"success": True, "message": f"{resource.label} deleted successfully"}

    router.add_api_route(base, list_items, methods=["GET"], name=f"list_{name}")
    router.add_api_route(
        base,
        create_item,
        methods=["POST"],
        status_code=status.HTTP_201_CREATED,
        name=f"create_{name}",
    )
    router.add_api_route(item_path, get_item, methods=["GET"], name=f"get_{name}")
    router.add_api_route(item_path, update_item, methods=["PUT"], name=f"update_{name}")
    router.add_api_route(item_path, delete_item, methods=["DELETE"], name=f"delete_{name}")
