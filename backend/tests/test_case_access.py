"""Case visibility and share-access overlay"""
import pytest
from sqlalchemy import text
from sqlalchemy.dialects import postgresql

from conftest import actor_for, auth_headers
from legal_vault.db.models import UserRole
from legal_vault.services.access_control import (
    Actor,
    can_edit_access,
    can_view_case,
    is_case_visible,
    visible_case_filter,
)
from legal_vault.services.case_service import CaseService
from legal_vault.utils.exceptions import NotFoundError, ValidationError


class TestVisibility:

    def test_unowned_case_without_viewers_is_visible_to_everyone(self, db, make_case):
        case = make_case(owner=None, allowed_viewers=None)

        assert is_case_visible(case, 99)
        assert [c.id for c in CaseService(db).visible_to(99)] == [case.id]

    def test_owned_case_is_hidden_from_others(self, db, make_user, make_case):
        owner, other = make_user(), make_user()
        case = make_case(owner=owner)

        assert is_case_visible(case, owner.id)
        assert not is_case_visible(case, other.id)
        assert CaseService(db).visible_to(other.id) == []

    def test_allowed_viewer_sees_shared_case(self, db, make_user, make_case):
        owner, viewer, stranger = make_user(), make_user(), make_user()
        case = make_case(owner=owner, allowed_viewers=[viewer.id])
        service = CaseService(db)

        assert [c.id for c in service.visible_to(viewer.id)] == [case.id]
        assert service.visible_to(stranger.id) == []

    def test_admin_sees_everything(self, make_user, make_case):
        admin, owner = make_user(role=UserRole.admin), make_user()
        case = make_case(owner=owner)

        assert can_view_case(actor_for(admin), case)

    def test_only_admin_or_owner_edits_access(self, make_user, make_case):
        owner, viewer = make_user(), make_user()
        admin = make_user(role=UserRole.admin)
        case = make_case(owner=owner, allowed_viewers=[viewer.id])

        assert can_edit_access(actor_for(owner), case)
        assert can_edit_access(actor_for(admin), case)
        assert not can_edit_access(actor_for(viewer), case)

    def test_postgres_filter_checks_viewer_membership(self):
        sql = str(visible_case_filter(7, "postgresql").compile(dialect=postgresql.dialect()))

        assert "ANY (cases.allowed_viewers)" in sql
        assert "allowed_viewers IS NOT NULL" not in sql

    def test_nobody_but_admin_edits_access_of_unowned_case(self, make_case):
        case = make_case(owner=None)

        assert not can_edit_access(Actor(user_id=5, role=UserRole.lawyer), case)
        assert can_edit_access(Actor(user_id=5, role=UserRole.admin), case)


class TestShareAccess:

    def test_empty_list_stores_null(self, db, make_user, make_case):
        owner, viewer = make_user(), make_user()
        case = make_case(owner=owner, allowed_viewers=[viewer.id])

        updated = CaseService(db).share_access(case.id, [], owner.id)

        assert updated.allowed_viewers is None
        assert updated.last_updated_by == owner.id
        assert updated.last_updated is not None
        raw = db.execute(text("SELECT allowed_viewers FROM cases WHERE id = :id"), {"id": case.id}).scalar()
        assert raw is None

    def test_viewers_are_deduplicated(self, db, make_user, make_case):
        owner, a, b = make_user(), make_user(), make_user()
        case = make_case(owner=owner)

        updated = CaseService(db).share_access(case.id, [a.id, b.id, a.id, str(b.id)], owner.id)

        assert updated.allowed_viewers == [a.id, b.id]

    def test_new_viewers_are_notified(self, db, make_user, make_case):
        owner, viewer = make_user(), make_user()
        case = make_case(owner=owner)

        CaseService(db).share_access(case.id, [viewer.id], owner.id)

        assert [n.title for n in viewer.notifications] == ["Case shared with you"]

    def test_bad_viewer_ids_are_rejected(self, db, make_user, make_case):
        case = make_case(owner=make_user())
        with pytest.raises(ValidationError):
            CaseService(db).share_access(case.id, ["not-a-number"], 1)

    def test_missing_case_is_not_found(self, db):
        with pytest.raises(NotFoundError):
            CaseService(db).share_access(404, [1], 1)


class TestShareAccessEndpoint:

    def test_owner_shares_case(self, client, make_user, make_case):
        owner, viewer = make_user(role=UserRole.lawyer), make_user()
        case = make_case(owner=owner)

        response = client.patch(
            f"/api/v1/cases/{case.id}/access",
            json={"allowed_viewers": [viewer.id]},
            headers=auth_headers(owner),
        )

        assert response.status_code == 200
        assert response.json()["allowed_viewers"] == [viewer.id]

        response = client.get(f"/api/v1/cases/{case.id}", headers=auth_headers(viewer))
        assert response.status_code == 200

    def test_non_owner_is_forbidden(self, client, make_user, make_case):
        owner, viewer = make_user(role=UserRole.lawyer), make_user()
        case = make_case(owner=owner, allowed_viewers=[viewer.id])

        response = client.patch(
            f"/api/v1/cases/{case.id}/access",
            json={"allowed_viewers": []},
            headers=auth_headers(viewer),
        )

        assert response.status_code == 403
        assert response.json()["code"] == "forbidden"

    def test_missing_case_reports_not_found_before_permission(self, client, make_user):
        response = client.patch(
            "/api/v1/cases/404/access",
            json={"allowed_viewers": []},
            headers=auth_headers(make_user()),
        )

        assert response.status_code == 404

    def test_hidden_case_is_forbidden(self, client, make_user, make_case):
        case = make_case(owner=make_user(role=UserRole.lawyer))

        response = client.get(f"/api/v1/cases/{case.id}", headers=auth_headers(make_user()))

        assert response.status_code == 403

    def test_viewer_cannot_take_ownership(self, client, make_user, make_case):
        owner, viewer, outsider = make_user(role=UserRole.lawyer), make_user(), make_user()
        case = make_case(owner=owner, allowed_viewers=[viewer.id])

        response = client.put(
            f"/api/v1/cases/{case.id}", json={"user_id": viewer.id}, headers=auth_headers(viewer)
        )
        assert response.status_code == 403

        response = client.patch(
            f"/api/v1/cases/{case.id}/access",
            json={"allowed_viewers": [outsider.id]},
            headers=auth_headers(viewer),
        )
        assert response.status_code == 403

        response = client.get(f"/api/v1/cases/{case.id}", headers=auth_headers(owner))
        assert response.status_code == 200
        assert response.json()["user_id"] == owner.id
        assert response.json()["allowed_viewers"] == [viewer.id]

    def test_viewer_may_edit_other_fields(self, client, make_user, make_case):
        owner, viewer = make_user(role=UserRole.lawyer), make_user()
        case = make_case(owner=owner, allowed_viewers=[viewer.id])

        response = client.put(
            f"/api/v1/cases/{case.id}",
            json={"remarks": "Filed", "user_id": owner.id},
            headers=auth_headers(viewer),
        )

        assert response.status_code == 200
        assert response.json()["remarks"] == "Filed"

    def test_unowned_case_cannot_be_claimed(self, client, make_user, make_case):
        lawyer = make_user(role=UserRole.lawyer)
        admin = make_user(role=UserRole.admin)
        case = make_case(owner=None)

        response = client.put(
            f"/api/v1/cases/{case.id}", json={"user_id": lawyer.id}, headers=auth_headers(lawyer)
        )
        assert response.status_code == 403

        response = client.put(
            f"/api/v1/cases/{case.id}", json={"user_id": lawyer.id}, headers=auth_headers(admin)
        )
        assert response.status_code == 200
        assert response.json()["user_id"] == lawyer.id

    def test_owner_reassigns_case(self, client, make_user, make_case):
        owner, colleague = make_user(role=UserRole.lawyer), make_user(role=UserRole.lawyer)
        case = make_case(owner=owner)

        response = client.put(
            f"/api/v1/cases/{case.id}", json={"user_id": colleague.id}, headers=auth_headers(owner)
        )

        assert response.status_code == 200
        assert response.json()["user_id"] == colleague.id
