import json
from django.test import TestCase, Client
from .models import User
from .jwt_auth import create_access_token, create_refresh_token, get_user_id_from_token


class RegistrationTest(TestCase):
    def setUp(self):
        self.client = Client()

    def register(self, **overrides):
        payload = {
            "username": "driver",
            "password": "Secret123!",
            "email": "driver@example.com",
            "phone": "0701234567",
        }
        payload.update(overrides)
        return self.client.post(
            "/api/identity/register",
            data=json.dumps(payload),
            content_type="application/json",
        )

    def test_register_creates_user_and_sets_cookies(self):
        response = self.register()
        self.assertEqual(response.status_code, 201)

        data = response.json()
        self.assertTrue(data["success"])
        self.assertEqual(data["user"]["username"], "driver")
        self.assertEqual(data["user"]["phone"], "0701234567")
        self.assertNotIn("password", data["user"])

        self.assertIn("access_token", response.cookies)
        self.assertIn("refresh_token", response.cookies)

        user = User.objects.get(username="driver")
        self.assertTrue(user.check_password("Secret123!"))

    def test_register_duplicate_username_rejected(self):
        self.register()
        response = self.register(email="other@example.com")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(User.objects.filter(username="driver").count(), 1)

    def test_register_short_password_rejected(self):
        response = self.register(password="abc")
        self.assertEqual(response.status_code, 400)
        self.assertIn("too short", response.json()["detail"])
        self.assertFalse(User.objects.filter(username="driver").exists())
        self.assertNotIn("access_token", response.cookies)

    def test_register_then_me(self):
        self.register()
        # Test client keeps the cookies from the previous response
        response = self.client.get("/api/identity/me")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["username"], "driver")


class LoginTest(TestCase):
    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(username="mechanic", password="pw123456")

    def login(self, password="pw123456"):
        return self.client.post(
            "/api/identity/login",
            data=json.dumps({"username": "mechanic", "password": password}),
            content_type="application/json",
        )

    def test_login_success(self):
        response = self.login()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["user"]["id"], str(self.user.id))
        self.assertTrue(response.cookies["access_token"]["httponly"])

    def test_login_wrong_password(self):
        response = self.login(password="nope")
        self.assertEqual(response.status_code, 401)

    def test_login_disabled_account(self):
        self.user.is_active = False
        self.user.save()
        response = self.login()
        self.assertEqual(response.status_code, 401)

    def test_me_requires_auth(self):
        response = self.client.get("/api/identity/me")
        self.assertEqual(response.status_code, 401)

    def test_session_login_is_accepted(self):
        self.client.force_login(self.user)
        response = self.client.get("/api/identity/me")
        self.assertEqual(response.status_code, 200)

    def test_logout_clears_cookies(self):
        self.login()
        response = self.client.post("/api/identity/logout")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.cookies["access_token"].value, "")
        self.assertEqual(self.client.get("/api/identity/me").status_code, 401)

    def test_refresh_issues_new_access_token(self):
        self.client.cookies["refresh_token"] = create_refresh_token(self.user.id)
        response = self.client.post("/api/identity/refresh")
        self.assertEqual(response.status_code, 200)
        new_token = response.cookies["access_token"].value
        self.assertEqual(get_user_id_from_token(new_token), self.user.id)

    def test_refresh_rejects_access_token(self):
        self.client.cookies["refresh_token"] = create_access_token(self.user.id)
        response = self.client.post("/api/identity/refresh")
        self.assertEqual(response.status_code, 401)


class TokenTest(TestCase):
    def test_token_type_is_enforced(self):
        user = User.objects.create_user(username="t", password="pw123456")
        refresh = create_refresh_token(user.id)
        self.assertIsNone(get_user_id_from_token(refresh))
        self.assertEqual(get_user_id_from_token(refresh, token_type='refresh'), user.id)

    def test_garbage_token(self):
        self.assertIsNone(get_user_id_from_token("not-a-jwt"))
