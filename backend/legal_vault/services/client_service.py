"""
Clients and branch offices
"""
from typing import List

from sqlalchemy import func, or_

from legal_vault.db.models import Branch, Client
from legal_vault.db.schemas import BranchCreate, ClientCreate, ClientUpdate
from legal_vault.services.access_control import Actor
from legal_vault.services.base import BaseService
from legal_vault.utils.exceptions import AlreadyExistsError, NotFoundError
from legal_vault.utils.helpers import apply_partial_update, like_pattern
from legal_vault.utils.validators import require_text


class ClientService(BaseService):

    def get(self, client_id: int) -> Client:
        client = self.db.get(Client, client_id)
        if not client:
            raise NotFoundError("Client", client_id)
        return client

    def list(self) -> List[Client]:
        return self.db.query(Client).order_by(Client.fullname.asc()).all()

    def search(self, term: str) -> List[Client]:
        pattern = like_pattern(term)
        return (
            self.db.query(Client)
            .filter(or_(Client.fullname.ilike(pattern), Client.email.ilike(pattern)))
            .order_by(Client.fullname.asc())
            .all()
        )

    def create(self, data: ClientCreate, actor: Actor) -> Client:
        values = data.model_dump()
        values["fullname"] = require_text(values["fullname"], "fullname")
        client = Client(**values, created_by=actor.user_id)
        self.db.add(client)
        self._commit("create client")
        self.db.refresh(client)
        return client

    def update(self, client_id: int, data: ClientUpdate) -> Client:
        client = self.get(client_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("fullname") is not None:
            changes["fullname"] = require_text(changes["fullname"], "fullname")
        if apply_partial_update(client, changes, required=("fullname",)):
            self._commit("update client")
            self.db.refresh(client)
        return client

    # ------------------------------------------------------------------
    # Branches
    # ------------------------------------------------------------------

    def list_branches(self) -> List[Branch]:
        return self.db.query(Branch).order_by(Branch.name.asc()).all()

    def create_branch(self, data: BranchCreate) -> Branch:
        name = require_text(data.name, "name")
        if self.db.query(Branch.id).filter(func.lower(Branch.name) == name.lower()).first():
            raise AlreadyExistsError("Branch", "name", name)
        branch = Branch(name=name, address=data.address)
        self.db.add(branch)
        self._commit("create branch", entity="Branch", unique_field="name", value=name)
        self.db.refresh(branch)
        return branch
