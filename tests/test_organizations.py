"""
Organization lifecycle: service behaviour and the HTTP surface.

Tests cover:
- Create (founder becomes sole owner, duplicate names rejected)
- Public read, role-gated update and delete
- Listing a user's organizations
- Schema validation for org requests
"""

from __future__ import annotations

import uuid

import pytest
from pydantic import ValidationError

from app.core.errors import ConflictError, ForbiddenError, NotFoundError
from app.repositories.memberships import MembershipStore
from app.services import members as member_service
from app.services import organizations as org_service
from org_membership_shared.schemas.common import Role
from org_membership_shared.schemas.members import MemberAddRequest
from org_membership_shared.schemas.organizations import OrgCreateRequest, OrgUpdateRequest
from tests._helpers import auth, make_user


# ---------------------------------------------------------------------------
# Schema validation tests (no DB needed)
# ---------------------------------------------------------------------------

class TestOrgCreateRequestValidation:
    def test_valid_name(self):
        req = OrgCreateRequest(name="acme-labs", display_name="Acme Labs")
        assert req.name == "acme-labs"

    @pytest.mark.parametrize("name", ["Acme", "-acme", "acme-", "a", "", "ac me"])
    def test_invalid_names(self, name):
        with pytest.raises(ValidationError):
            OrgCreateRequest(name=name)

    def test_website_must_be_http(self):
        with pytest.raises(ValidationError):
            OrgCreateRequest(name="acme", website_url="ftp://acme.test")

    def test_update_request_all_optional(self):
        req = OrgUpdateRequest()
        assert req.model_dump(exclude_none=True) == {}


# ---------------------------------------------------------------------------
# Service tests
# ---------------------------------------------------------------------------

class TestCreateOrganization:
    @pytest.mark.asyncio
    async def test_founder_is_sole_owner(self, session):
        founder = uuid.uuid4()
        org = await org_service.create_org(OrgCreateRequest(name="acme"), founder, session)

        members = await MembershipStore(session).list_by_organization(org.id)
        assert len(members) == 1
        assert members[0].user_id == founder
        assert members[0].role == Role.OWNER.value
        assert members[0].invited_at is None
        assert members[0].invited_by is None

    @pytest.mark.asyncio
    async def test_duplicate_name_conflicts(self, session):
        await org_service.create_org(OrgCreateRequest(name="acme"), uuid.uuid4(), session)
        with pytest.raises(ConflictError):
            await org_service.create_org(OrgCreateRequest(name="acme"), uuid.uuid4(), session)

    @pytest.mark.asyncio
    async def test_get_missing_raises(self, session):
        with pytest.raises(NotFoundError):
            await org_service.get_org("nope", session)


class TestUpdateOrganization:
    @pytest.mark.asyncio
    async def test_admin_can_update(self, session):
        owner = uuid.uuid4()
        admin = await make_user(session, "Admin")
        await org_service.create_org(OrgCreateRequest(name="acme"), owner, session)
        await member_service.add_member(
            "acme", MemberAddRequest(user_id=admin.id, role=Role.ADMIN), owner, session
        )

        org = await org_service.update_org(
            "acme", OrgUpdateRequest(description="Widgets"), admin.id, session
        )
        assert org.description == "Widgets"

    @pytest.mark.asyncio
    async def test_member_cannot_update(self, session):
        owner = uuid.uuid4()
        member = await make_user(session, "Member")
        await org_service.create_org(OrgCreateRequest(name="acme"), owner, session)
        await member_service.add_member(
            "acme", MemberAddRequest(user_id=member.id), owner, session
        )
        with pytest.raises(ForbiddenError):
            await org_service.update_org(
                "acme", OrgUpdateRequest(description="x"), member.id, session
            )

    @pytest.mark.asyncio
    async def test_outsider_cannot_update(self, session):
        await org_service.create_org(OrgCreateRequest(name="acme"), uuid.uuid4(), session)
        with pytest.raises(ForbiddenError):
            await org_service.update_org(
                "acme", OrgUpdateRequest(description="x"), uuid.uuid4(), session
            )

    @pytest.mark.asyncio
    async def test_update_missing_org(self, session):
        with pytest.raises(NotFoundError):
            await org_service.update_org(
                "nope", OrgUpdateRequest(description="x"), uuid.uuid4(), session
            )


class TestDeleteOrganization:
    @pytest.mark.asyncio
    async def test_admin_forbidden_owner_succeeds(self, session):
        owner = uuid.uuid4()
        admin = await make_user(session, "Admin")
        await org_service.create_org(OrgCreateRequest(name="acme"), owner, session)
        await member_service.add_member(
            "acme", MemberAddRequest(user_id=admin.id, role=Role.ADMIN), owner, session
        )

        with pytest.raises(ForbiddenError):
            await org_service.delete_org("acme", admin.id, session)

        await org_service.delete_org("acme", owner, session)
        with pytest.raises(NotFoundError):
            await member_service.list_members("acme", owner, session)
        assert await org_service.list_user_orgs(admin.id, session) == []


class TestListUserOrganizations:
    @pytest.mark.asyncio
    async def test_lists_with_roles_ordered_by_name(self, session):
        me = uuid.uuid4()
        await org_service.create_org(OrgCreateRequest(name="zeta"), me, session)
        await org_service.create_org(OrgCreateRequest(name="alpha"), me, session)
        await org_service.create_org(OrgCreateRequest(name="other"), uuid.uuid4(), session)

        rows = await org_service.list_user_orgs(me, session)
        assert [(org.name, role) for org, role in rows] == [
            ("alpha", Role.OWNER),
            ("zeta", Role.OWNER),
        ]


# ---------------------------------------------------------------------------
# HTTP tests
# ---------------------------------------------------------------------------

class TestOrganizationEndpoints:
    @pytest.mark.asyncio
    async def test_create_get_and_list(self, client):
        founder = uuid.uuid4()
        resp = await client.post(
            "/api/v1/orgs",
            json={"name": "acme", "display_name": "Acme"},
            headers=auth(founder),
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["name"] == "acme"
        assert body["display_name"] == "Acme"

        resp = await client.get("/api/v1/orgs/acme")
        assert resp.status_code == 200
        assert resp.json()["id"] == body["id"]

        resp = await client.get("/api/v1/orgs", headers=auth(founder))
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert [(o["name"], o["role"]) for o in data] == [("acme", "owner")]

    @pytest.mark.asyncio
    async def test_duplicate_name_is_409(self, client):
        await client.post("/api/v1/orgs", json={"name": "acme"}, headers=auth(uuid.uuid4()))
        resp = await client.post("/api/v1/orgs", json={"name": "acme"}, headers=auth(uuid.uuid4()))
        assert resp.status_code == 409
        assert resp.json()["error"]["code"] == "CONFLICT"

    @pytest.mark.asyncio
    async def test_create_requires_identity(self, client):
        resp = await client.post("/api/v1/orgs", json={"name": "acme"})
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "UNAUTHENTICATED"

    @pytest.mark.asyncio
    async def test_malformed_identity_is_401(self, client):
        resp = await client.post(
            "/api/v1/orgs", json={"name": "acme"}, headers={"Authorization": "Bearer not-a-uuid"}
        )
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_body_is_422(self, client):
        resp = await client.post("/api/v1/orgs", json={"name": "Bad Name"}, headers=auth(uuid.uuid4()))
        assert resp.status_code == 422
        error = resp.json()["error"]
        assert error["code"] == "VALIDATION_FAILED"
        assert error["details"]

    @pytest.mark.asyncio
    async def test_get_unknown_is_404(self, client):
        resp = await client.get("/api/v1/orgs/ghost")
        assert resp.status_code == 404
        assert resp.json() == {
            "error": {"code": "NOT_FOUND", "message": "Organization not found", "status": 404}
        }

    @pytest.mark.asyncio
    async def test_patch_and_delete(self, client):
        owner = uuid.uuid4()
        await client.post("/api/v1/orgs", json={"name": "acme"}, headers=auth(owner))

        resp = await client.patch(
            "/api/v1/orgs/acme",
            json={"description": "Widgets", "avatar_url": "https://cdn.test/a.png"},
            headers=auth(owner),
        )
        assert resp.status_code == 200
        assert resp.json()["description"] == "Widgets"
        assert resp.json()["avatar_url"] == "https://cdn.test/a.png"

        resp = await client.patch(
            "/api/v1/orgs/acme", json={"description": "x"}, headers=auth(uuid.uuid4())
        )
        assert resp.status_code == 403

        resp = await client.delete("/api/v1/orgs/acme", headers=auth(owner))
        assert resp.status_code == 204
        assert (await client.get("/api/v1/orgs/acme")).status_code == 404
