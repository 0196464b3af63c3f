"""
Client and branch endpoints
"""
from fastapi import APIRouter, Depends, Query, status
from typing import List

from legal_vault.api.v1.deps import (
    get_client_service,
    get_current_actor,
    require_admin,
    require_admin_or_lawyer,
)
from legal_vault.db.schemas import (
    BranchCreate,
    BranchResponse,
    ClientCreate,
    ClientResponse,
    ClientUpdate,
)
from legal_vault.services.access_control import Actor
from legal_vault.services.client_service import ClientService

router = APIRouter()
branch_router = APIRouter()


@router.get("/", response_model=List[ClientResponse])
def list_clients(
    _: Actor = Depends(get_current_actor),
    clients: ClientService = Depends(get_client_service),
):
    return clients.list()


@router.get("/search", response_model=List[ClientResponse])
def search_clients(
    q: str = Query(..., min_length=1, description="Name or email"),
    _: Actor = Depends(get_current_actor),
    clients: ClientService = Depends(get_client_service),
):
    return clients.search(q)


@router.get("/{client_id}", response_model=ClientResponse)
def get_client(
    client_id: int,
    _: Actor = Depends(get_current_actor),
    clients: ClientService = Depends(get_client_service),
):
    return clients.get(client_id)


@router.post("/", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
def create_client(
    body: ClientCreate,
    actor: Actor = Depends(require_admin_or_lawyer),
    clients: ClientService = Depends(get_client_service),
):
    return clients.create(body, actor)


@router.put("/{client_id}", response_model=ClientResponse)
def update_client(
    client_id: int,
    body: ClientUpdate,
    _: Actor = Depends(require_admin_or_lawyer),
    clients: ClientService = Depends(get_client_service),
):
    return clients.update(client_id, body)


@branch_router.get("/", response_model=List[BranchResponse])
def list_branches(
    _: Actor = Depends(get_current_actor),
    clients: ClientService = Depends(get_client_service),
):
    return clients.list_branches()


@branch_router.post("/", response_model=BranchResponse, status_code=status.HTTP_201_CREATED)
def create_branch(
    body: BranchCreate,
    _: Actor = Depends(require_admin),
    clients: ClientService = Depends(get_client_service),
):
    return clients.create_branch(body)
