"""
Integration tests for company API endpoints.
"""
import json
from uuid import uuid4

from django.test import TestCase, Client

from apps.companies.models import Company, Membership
from apps.identity.models import User


class CompanyAPITest(TestCase):
    def setUp(self):
        self.client = Client()
        self.creator = User.objects.create_user(username='creator', password='pw123456')
        self.member = User.objects.create_user(username='member', password='pw123456')
        self.outsider = User.objects.create_user(username='outsider', password='pw123456')

    def post(self, path, payload=None):
        return self.client.post(path, data=json.dumps(payload or {}), content_type="application/json")

    def create_company(self, name="Lift AB"):
        self.client.force_login(self.creator)
        response = self.post("/api/companies/", {"name": name})
        self.assertEqual(response.status_code, 201)
        return response.json()

    def join(self, user, join_code):
        self.client.force_login(user)
        return self.post("/api/companies/join", {"join_code": join_code})

    def test_requires_auth(self):
        self.assertEqual(self.client.get("/api/companies/").status_code, 401)

    def test_create_company(self):
        data = self.create_company()
        self.assertEqual(data["name"], "Lift AB")
        self.assertEqual(len(data["join_code"]), 8)
        self.assertEqual(data["created_by"], str(self.creator.id))

    def test_create_company_empty_name(self):
        self.client.force_login(self.creator)
        response = self.post("/api/companies/", {"name": ""})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Company name is required")
        self.assertEqual(self.post("/api/companies/", {"name": "   "}).status_code, 400)
        self.assertFalse(Company.objects.exists())

    def test_create_company_name_too_long(self):
        self.client.force_login(self.creator)
        response = self.post("/api/companies/", {"name": "x" * 256})
        self.assertEqual(response.status_code, 422)
        self.assertFalse(Company.objects.exists())

    def test_join_and_list(self):
        company = self.create_company()

        response = self.join(self.member, company["join_code"].lower())
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["id"], company["id"])

        listed = self.client.get("/api/companies/").json()
        self.assertEqual([c["id"] for c in listed], [company["id"]])

    def test_join_errors(self):
        self.assertEqual(self.join(self.member, "ZZZZZZZZ").status_code, 404)
        self.assertEqual(self.join(self.member, "").status_code, 400)

    def test_get_company_access(self):
        company = self.create_company()
        self.assertEqual(self.client.get(f"/api/companies/{company['id']}").status_code, 200)

        self.client.force_login(self.outsider)
        self.assertEqual(self.client.get(f"/api/companies/{company['id']}").status_code, 403)
        self.assertEqual(self.client.get(f"/api/companies/{uuid4()}").status_code, 403)

    def test_is_admin(self):
        company = self.create_company()
        self.assertIs(self.client.get(f"/api/companies/{company['id']}/is-admin").json(), True)

        self.join(self.member, company["join_code"])
        self.assertIs(self.client.get(f"/api/companies/{company['id']}/is-admin").json(), False)

    def test_admin_only_endpoints(self):
        company = self.create_company()
        self.join(self.member, company["join_code"])

        base = f"/api/companies/{company['id']}"
        self.assertEqual(self.client.get(f"{base}/users").status_code, 403)
        self.assertEqual(self.post(f"{base}/regenerate-code").status_code, 403)
        self.assertEqual(self.client.delete(base).status_code, 403)
        self.assertEqual(self.client.delete(f"{base}/users/{self.creator.id}").status_code, 403)

    def test_member_management(self):
        company = self.create_company()
        self.join(self.member, company["join_code"])
        self.client.force_login(self.creator)
        base = f"/api/companies/{company['id']}"

        users = self.client.get(f"{base}/users").json()
        self.assertEqual({u["username"] for u in users}, {"creator", "member"})

        response = self.client.patch(
            f"{base}/users/{self.member.id}",
            data=json.dumps({"is_admin": True}),
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["is_admin"])
        self.assertFalse(response.json()["is_blocked"])

        response = self.client.patch(
            f"{base}/users/{self.creator.id}",
            data=json.dumps({"is_blocked": True}),
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 400)

        self.assertEqual(self.client.delete(f"{base}/users/{uuid4()}").status_code, 404)
        self.assertEqual(self.client.delete(f"{base}/users/{self.creator.id}").status_code, 400)
        self.assertEqual(self.client.delete(f"{base}/users/{self.member.id}").status_code, 204)
        self.assertFalse(Membership.objects.filter(user=self.member).exists())

    def test_promoted_member_can_manage(self):
        company = self.create_company()
        self.join(self.member, company["join_code"])
        Membership.objects.filter(user=self.member).update(is_admin=True)

        self.client.force_login(self.member)
        response = self.post(f"/api/companies/{company['id']}/regenerate-code")
        self.assertEqual(response.status_code, 200)
        self.assertNotEqual(response.json()["join_code"], company["join_code"])

    def test_delete_company(self):
        company = self.create_company()
        response = self.client.delete(f"/api/companies/{company['id']}")
        self.assertEqual(response.status_code, 204)
        self.assertFalse(Company.objects.filter(id=company["id"]).exists())
