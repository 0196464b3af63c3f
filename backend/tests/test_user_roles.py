"""Role-change policy and user management"""
import pytest

from conftest import actor_for, auth_headers
from legal_vault.db.models import User, UserRole, UserStatus
from legal_vault.db.schemas import UserCreate, UserUpdate
from legal_vault.services.user_service import UserService
from legal_vault.utils.exceptions import AlreadyExistsError, ForbiddenError, NotFoundError


class TestRolePolicy:

    def test_lawyer_bootstraps_first_admin(self, db, make_user):
        lawyer = make_user(role=UserRole.lawyer)

        promoted = UserService(db).update_role(actor_for(lawyer), lawyer.id, UserRole.admin)

        assert promoted.role == UserRole.admin

    def test_second_bootstrap_is_forbidden(self, db, make_user):
        first, second, target = (make_user(role=UserRole.lawyer) for _ in range(3))
        service = UserService(db)
        service.update_role(actor_for(first), first.id, UserRole.admin)

        with pytest.raises(ForbiddenError):
            service.update_role(actor_for(second), target.id, UserRole.admin)

        db.refresh(target)
        assert target.role == UserRole.lawyer
        assert db.query(User).filter(User.role == UserRole.admin).count() == 1

    def test_lawyer_cannot_grant_other_roles(self, db, make_user):
        lawyer, staff = make_user(role=UserRole.lawyer), make_user()

        with pytest.raises(ForbiddenError):
            UserService(db).update_role(actor_for(lawyer), staff.id, UserRole.paralegal)

    @pytest.mark.parametrize("role", [UserRole.staff, UserRole.paralegal])
    def test_other_roles_are_forbidden(self, db, make_user, role):
        requester = make_user(role=role)

        with pytest.raises(ForbiddenError):
            UserService(db).update_role(actor_for(requester), requester.id, UserRole.admin)

    def test_admin_may_set_any_role(self, db, make_user):
        admin, staff = make_user(role=UserRole.admin), make_user()

        updated = UserService(db).update_role(actor_for(admin), staff.id, UserRole.lawyer)

        assert updated.role == UserRole.lawyer
        assert updated.last_updated_by == admin.id

    def test_missing_target_is_not_found(self, db, make_user):
        admin = make_user(role=UserRole.admin)

        with pytest.raises(NotFoundError):
            UserService(db).update_role(actor_for(admin), 404, UserRole.lawyer)

    def test_missing_target_during_bootstrap_is_not_found(self, db, make_user):
        lawyer = make_user(role=UserRole.lawyer)

        with pytest.raises(NotFoundError):
            UserService(db).update_role(actor_for(lawyer), 404, UserRole.admin)


class TestUserService:

    def test_create_rejects_duplicate_email(self, db, make_user):
        admin = make_user(role=UserRole.admin, email="dana@example.com")
        payload = UserCreate(
            email="DANA@example.com", password="longenough", first_name="Dana", last_name="Cruz"
        )

        with pytest.raises(AlreadyExistsError):
            UserService(db).create(payload, actor_for(admin))

    def test_update_rehashes_only_when_password_given(self, db, make_user):
        user = make_user()
        old_hash = user.password_hash
        service = UserService(db)

        service.update(user.id, UserUpdate(phone="09171234567"), actor_for(user))
        assert user.password_hash == old_hash

        service.update(user.id, UserUpdate(password="brand-new-pass"), actor_for(user))
        assert user.password_hash != old_hash

    def test_status_change_requires_admin(self, db, make_user):
        user = make_user()

        with pytest.raises(ForbiddenError):
            UserService(db).update(user.id, UserUpdate(status=UserStatus.suspended), actor_for(user))

    def test_refused_role_change_leaves_profile_untouched(self, db, make_user):
        make_user(role=UserRole.admin)
        staff = make_user(first_name="Original")

        with pytest.raises(ForbiddenError):
            UserService(db).update(
                staff.id, UserUpdate(first_name="Changed", role=UserRole.admin), actor_for(staff)
            )

        db.refresh(staff)
        assert staff.first_name == "Original"


class TestUserEndpoints:

    def test_bootstrap_scenario(self, client, make_user):
        first = make_user(role=UserRole.lawyer)
        second = make_user(role=UserRole.lawyer)
        other = make_user()

        response = client.patch(
            f"/api/v1/users/{first.id}/role", json={"role": "Admin"}, headers=auth_headers(first)
        )
        assert response.status_code == 200
        assert response.json()["role"] == "Admin"

        response = client.patch(
            f"/api/v1/users/{other.id}/role", json={"role": "Admin"}, headers=auth_headers(second)
        )
        assert response.status_code == 403

    def test_admin_creates_user(self, client, make_user):
        admin = make_user(role=UserRole.admin)

        response = client.post(
            "/api/v1/users/",
            json={
                "email": "new.hire@example.com",
                "password": "longenough",
                "first_name": "New",
                "last_name": "Hire",
                "role": "Paralegal",
            },
            headers=auth_headers(admin),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["role"] == "Paralegal"
        assert body["status"] == "Active"
        assert "password_hash" not in body

    def test_non_admin_cannot_list_users(self, client, make_user):
        response = client.get("/api/v1/users/", headers=auth_headers(make_user()))
        assert response.status_code == 403

    def test_user_cannot_edit_someone_else(self, client, make_user):
        user, other = make_user(), make_user()

        response = client.put(
            f"/api/v1/users/{other.id}", json={"first_name": "Hacked"}, headers=auth_headers(user)
        )
        assert response.status_code == 403

    def test_search_and_count(self, client, make_user):
        admin = make_user(role=UserRole.admin)
        make_user(first_name="Rosario", role=UserRole.lawyer)

        response = client.get("/api/v1/users/search", params={"q": "rosa"}, headers=auth_headers(admin))
        assert [u["first_name"] for u in response.json()] == ["Rosario"]

        response = client.get("/api/v1/users/count", headers=auth_headers(admin))
        assert response.json() == {"count": 2}
