"""Case CRUD, counts, taxonomy and search"""
import pytest

from conftest import actor_for, auth_headers
from legal_vault.db.models import CaseStatus, UserRole
from legal_vault.db.schemas import CaseCreate, CaseTypeCreate, CaseUpdate
from legal_vault.services.case_service import CaseService
from legal_vault.utils.exceptions import AlreadyExistsError, NotFoundError, ValidationError


class TestCaseService:

    def test_create_sets_balance_to_fee_and_notifies(self, db, make_user):
        admin, lawyer = make_user(role=UserRole.admin), make_user(role=UserRole.lawyer)

        case = CaseService(db).create(CaseCreate(fee=2500, user_id=lawyer.id), actor_for(admin))

        assert float(case.balance) == 2500
        assert case.assigned_by == admin.id
        assert [n.title for n in admin.notifications] == ["New case created"]
        assert [n.title for n in lawyer.notifications] == ["Case assigned to you"]

    def test_create_with_missing_client(self, db, make_user):
        with pytest.raises(NotFoundError):
            CaseService(db).create(CaseCreate(client_id=404), actor_for(make_user()))

    def test_update_is_partial_and_stamps(self, db, make_user, make_case):
        lawyer = make_user(role=UserRole.lawyer)
        case = make_case(owner=lawyer, remarks="Initial", cabinet="A1")

        updated = CaseService(db).update(case.id, CaseUpdate(remarks=None), actor_for(lawyer))

        assert updated.remarks is None
        assert updated.cabinet == "A1"
        assert updated.last_updated is not None
        assert updated.last_updated_by == lawyer.id

    def test_update_does_not_touch_balance(self, db, make_user, make_case):
        lawyer = make_user(role=UserRole.lawyer)
        case = make_case(owner=lawyer, fee="1000")

        updated = CaseService(db).update(case.id, CaseUpdate(fee=3000), actor_for(lawyer))

        assert float(updated.fee) == 3000
        assert float(updated.balance) == 1000

    def test_self_assignment_sends_no_assignment_notice(self, db, make_user, make_case):
        admin, lawyer = make_user(role=UserRole.admin), make_user(role=UserRole.lawyer)
        case = make_case(owner=None)
        service = CaseService(db)

        updated = service.update(case.id, CaseUpdate(user_id=admin.id), actor_for(admin))
        assert updated.assigned_by == admin.id
        assert admin.notifications == []

        service.update(case.id, CaseUpdate(user_id=lawyer.id), actor_for(admin))
        assert [n.title for n in lawyer.notifications] == ["Case assigned to you"]

    def test_null_status_is_rejected(self, db, make_user, make_case):
        case = make_case(owner=make_user())
        with pytest.raises(ValidationError):
            CaseService(db).update(case.id, CaseUpdate(status=None), actor_for(make_user()))

    def test_counts(self, db, make_user, make_case):
        lawyer, other = make_user(role=UserRole.lawyer), make_user(role=UserRole.lawyer)
        make_case(owner=lawyer)
        make_case(owner=lawyer, status=CaseStatus.archived_completed)
        make_case(owner=other, status=CaseStatus.archived_dismissed)
        make_case(owner=None)
        service = CaseService(db)

        assert service.count_processing() == 2
        assert service.count_archived() == 2
        assert service.count_processing(lawyer.id) == 2
        assert service.count_archived(lawyer.id) == 1

    def test_fee_range_is_formatted(self, db):
        case_type = CaseService(db).create_type(CaseTypeCreate(name="Annulment", fee={"min": 1000, "max": 5000}))
        assert case_type.fee == "₱1,000 - ₱5,000"

    @pytest.mark.parametrize(
        "fee",
        [None, {"min": 10}, {"min": "ten", "max": 20}, {"min": 500, "max": 100}],
    )
    def test_bad_fee_range(self, db, fee):
        with pytest.raises(ValidationError):
            CaseService(db).create_type(CaseTypeCreate(name="Adoption", fee=fee))

    def test_category_names_are_unique_ignoring_case(self, db):
        service = CaseService(db)
        service.create_category("Criminal")
        with pytest.raises(AlreadyExistsError):
            service.create_category("CRIMINAL")

    def test_search_matches_owner_and_status(self, db, make_user, make_case):
        admin = make_user(role=UserRole.admin)
        lawyer = make_user(role=UserRole.lawyer, first_name="Imelda")
        case = make_case(owner=lawyer)
        make_case(owner=None, status=CaseStatus.dismissed)
        service = CaseService(db)

        assert [c.id for c in service.search("imel", actor_for(admin))] == [case.id]
        assert len(service.search("dismiss", actor_for(admin))) == 1


class TestCaseEndpoints:

    def test_admin_lists_all_and_lawyer_sees_visible(self, client, make_user, make_case):
        admin = make_user(role=UserRole.admin)
        lawyer, other = make_user(role=UserRole.lawyer), make_user(role=UserRole.lawyer)
        own = make_case(owner=lawyer)
        unowned = make_case(owner=None)
        make_case(owner=other)

        response = client.get("/api/v1/cases/", headers=auth_headers(admin))
        assert len(response.json()) == 3

        response = client.get("/api/v1/cases/", headers=auth_headers(lawyer))
        assert sorted(c["id"] for c in response.json()) == sorted([own.id, unowned.id])

    def test_create_requires_admin_or_lawyer(self, client, make_user):
        response = client.post("/api/v1/cases/", json={"fee": 100}, headers=auth_headers(make_user()))
        assert response.status_code == 403

        response = client.post(
            "/api/v1/cases/", json={"fee": 100}, headers=auth_headers(make_user(role=UserRole.lawyer))
        )
        assert response.status_code == 201
        assert response.json()["balance"] == 100
        assert response.json()["status"] == "Processing"

    def test_delete_is_admin_only(self, client, make_user, make_case):
        lawyer, admin = make_user(role=UserRole.lawyer), make_user(role=UserRole.admin)
        case = make_case(owner=lawyer)

        assert client.delete(f"/api/v1/cases/{case.id}", headers=auth_headers(lawyer)).status_code == 403
        assert client.delete(f"/api/v1/cases/{case.id}", headers=auth_headers(admin)).status_code == 200
        assert client.get(f"/api/v1/cases/{case.id}", headers=auth_headers(admin)).status_code == 404

    def test_case_type_endpoint(self, client, make_user):
        headers = auth_headers(make_user(role=UserRole.admin))
        category = client.post("/api/v1/cases/categories", json={"name": "Family"}, headers=headers).json()

        response = client.post(
            "/api/v1/cases/types",
            json={"name": "Annulment", "fee": {"min": 1000, "max": 5000}, "category_id": category["id"]},
            headers=headers,
        )
        assert response.status_code == 201
        assert response.json()["fee"] == "₱1,000 - ₱5,000"

        response = client.get("/api/v1/cases/types", params={"category_id": category["id"]}, headers=headers)
        assert [t["name"] for t in response.json()] == ["Annulment"]

    def test_dashboard_stats(self, client, make_user, make_case):
        admin, lawyer = make_user(role=UserRole.admin), make_user(role=UserRole.lawyer)
        make_case(owner=lawyer)
        make_case(owner=admin, status=CaseStatus.archived_completed)

        response = client.get("/api/v1/dashboard/stats", headers=auth_headers(admin))
        body = response.json()
        assert body["scope"] == "global"
        assert body["total_users"] == 2
        assert body["processing_cases"] == 1
        assert body["archived_cases"] == 1

        response = client.get("/api/v1/dashboard/stats", headers=auth_headers(lawyer))
        body = response.json()
        assert body["scope"] == "user"
        assert body["total_users"] is None
        assert body["processing_cases"] == 1
        assert body["archived_cases"] == 0

    def test_missing_token_is_unauthorized(self, client):
        response = client.get("/api/v1/cases/")
        assert response.status_code == 401
        assert response.json()["code"] == "unauthorized"
