"""
Unit tests for company services.
Tests join codes, membership flags and admin checks.
"""
from uuid import uuid4

from django.core.exceptions import ValidationError
from django.test import TestCase

from apps.audit.audit_service import AuditAction
from apps.audit.models import AuditLog
from apps.companies.models import Company, Membership
from apps.companies import services
from apps.identity.models import User


class JoinCodeTest(TestCase):
    def test_generated_code_shape(self):
        for _ in range(20):
            code = services.generate_join_code()
            self.assertEqual(len(code), 8)
            self.assertTrue(all(c in services.JOIN_CODE_ALPHABET for c in code))

    def test_normalize(self):
        self.assertEqual(services.normalize_join_code("  ab12cd34 "), "AB12CD34")
        self.assertEqual(services.normalize_join_code(None), "")


class CompanyLifecycleTest(TestCase):
    def setUp(self):
        self.creator = User.objects.create_user(username='creator', password='pw123456')
        self.member = User.objects.create_user(username='member', password='pw123456')

    def test_create_company_adds_creator_as_admin(self):
        company = services.create_company("  Lift AB ", self.creator)
        self.assertEqual(company.name, "Lift AB")

        membership = Membership.objects.get(company=company, user=self.creator)
        self.assertTrue(membership.is_admin)
        self.assertFalse(membership.is_blocked)
        self.assertTrue(AuditLog.objects.filter(
            company_id=company.id, action=AuditAction.CREATE_COMPANY
        ).exists())

    def test_create_company_requires_name(self):
        with self.assertRaises(ValidationError):
            services.create_company("   ", self.creator)
        self.assertFalse(Company.objects.exists())

    def test_join_is_case_insensitive_and_idempotent(self):
        company = services.create_company("Lift AB", self.creator)

        joined = services.join_company(f" {company.join_code.lower()} ", self.member)
        self.assertEqual(joined, company)
        services.join_company(company.join_code, self.member)

        self.assertEqual(Membership.objects.filter(company=company, user=self.member).count(), 1)
        self.assertEqual(AuditLog.objects.filter(action=AuditAction.JOIN_COMPANY).count(), 1)

        membership = Membership.objects.get(company=company, user=self.member)
        self.assertFalse(membership.is_admin)

    def test_join_errors(self):
        with self.assertRaises(ValidationError):
            services.join_company("", self.member)
        with self.assertRaises(Company.DoesNotExist):
            services.join_company("NOPE0000", self.member)

    def test_rejoin_does_not_unblock(self):
        company = services.create_company("Lift AB", self.creator)
        services.join_company(company.join_code, self.member)
        Membership.objects.filter(user=self.member).update(is_blocked=True)

        services.join_company(company.join_code, self.member)
        self.assertTrue(Membership.objects.get(user=self.member).is_blocked)
        self.assertEqual(services.list_user_companies(self.member.id), [])

    def test_regenerate_join_code(self):
        company = services.create_company("Lift AB", self.creator)
        old_code = company.join_code

        new_code = services.regenerate_join_code(company, performed_by=self.creator)
        self.assertNotEqual(new_code, old_code)
        with self.assertRaises(Company.DoesNotExist):
            services.join_company(old_code, self.member)
        self.assertEqual(services.join_company(new_code, self.member), company)

    def test_delete_company(self):
        company = services.create_company("Lift AB", self.creator)
        services.join_company(company.join_code, self.member)
        company_id = company.id

        services.delete_company(company, performed_by=self.creator)

        self.assertFalse(Company.objects.filter(id=company_id).exists())
        self.assertFalse(Membership.objects.filter(company_id=company_id).exists())
        # The audit trail outlives the company
        self.assertTrue(AuditLog.objects.filter(
            company_id=company_id, action=AuditAction.DELETE_COMPANY
        ).exists())


class AdminCheckTest(TestCase):
    def setUp(self):
        self.creator = User.objects.create_user(username='creator', password='pw123456')
        self.member = User.objects.create_user(username='member', password='pw123456')
        self.company = services.create_company("Lift AB", self.creator)
        services.join_company(self.company.join_code, self.member)

    def test_creator_is_admin_even_when_flag_cleared(self):
        Membership.objects.filter(user=self.creator).update(is_admin=False)
        self.assertTrue(services.is_company_admin(self.creator.id, self.company.id))

    def test_member_admin_flag(self):
        self.assertFalse(services.is_company_admin(self.member.id, self.company.id))
        services.update_company_member(self.company, self.member.id, is_admin=True)
        self.assertTrue(services.is_company_admin(self.member.id, self.company.id))

    def test_blocked_admin_is_not_admin(self):
        services.update_company_member(self.company, self.member.id, is_admin=True, is_blocked=True)
        self.assertFalse(services.is_company_admin(self.member.id, self.company.id))

    def test_unknown_company(self):
        self.assertFalse(services.is_company_admin(self.creator.id, uuid4()))

    def test_get_company_for_user(self):
        self.assertEqual(services.get_company_for_user(self.company.id, self.member.id), self.company)
        services.update_company_member(self.company, self.member.id, is_blocked=True)
        self.assertIsNone(services.get_company_for_user(self.company.id, self.member.id))


class MemberManagementTest(TestCase):
    def setUp(self):
        self.creator = User.objects.create_user(username='creator', password='pw123456', email='c@example.com')
        self.member = User.objects.create_user(username='member', password='pw123456', email='m@example.com')
        self.company = services.create_company("Lift AB", self.creator)
        services.join_company(self.company.join_code, self.member)

    def test_list_members_marks_creator(self):
        members = {m.username: m for m in services.list_company_members(self.company)}
        self.assertTrue(members['creator'].is_creator)
        self.assertFalse(members['member'].is_creator)

    def test_update_only_supplied_flags(self):
        services.update_company_member(self.company, self.member.id, is_admin=True)
        member = services.update_company_member(self.company, self.member.id, is_blocked=True)
        self.assertTrue(member.is_admin)
        self.assertTrue(member.is_blocked)

        contexts = list(
            AuditLog.objects.filter(action=AuditAction.UPDATE_MEMBER).values_list("context", flat=True)
        )
        self.assertIn({"is_blocked": True}, contexts)

    def test_creator_flags_are_fixed(self):
        with self.assertRaises(ValidationError):
            services.update_company_member(self.company, self.creator.id, is_admin=False)
        with self.assertRaises(ValidationError):
            services.remove_company_member(self.company, self.creator.id)

    def test_unknown_member(self):
        with self.assertRaises(services.MemberNotFound):
            services.update_company_member(self.company, uuid4(), is_admin=True)
        with self.assertRaises(Membership.DoesNotExist):
            services.remove_company_member(self.company, uuid4())

    def test_remove_member(self):
        services.remove_company_member(self.company, self.member.id, performed_by=self.creator)
        self.assertFalse(Membership.objects.filter(user=self.member).exists())
        self.assertEqual(services.list_user_companies(self.member.id), [])
