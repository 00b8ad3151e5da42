"""
Unit tests for forklift services.
Tests visibility across company members, ownership rules and validation.
"""
from datetime import date, timedelta

from django.core.exceptions import PermissionDenied, ValidationError
from django.test import TestCase
from django.utils import timezone

from apps.audit.audit_service import AuditAction
from apps.audit.models import AuditLog
from apps.companies.models import Membership
from apps.companies.services import create_company, join_company
from apps.identity.models import User
from apps.forklifts.dtos import ForkliftIn, ForkliftPatch
from apps.forklifts.models import Forklift, ServiceStatus
from apps.forklifts import services


class ForkliftServiceTestBase(TestCase):
    def setUp(self):
        self.owner = User.objects.create_user(username='owner', password='pw123456')
        self.colleague = User.objects.create_user(username='colleague', password='pw123456')
        self.outsider = User.objects.create_user(username='outsider', password='pw123456')

        self.company = create_company("Lift AB", self.owner)
        join_company(self.company.join_code, self.colleague)
        self.other_company = create_company("Other AB", self.outsider)

    def make_forklift(self, user=None, company=None, **fields):
        data = {
            'company_id': (company or self.company).id,
            'customer': "Acme Logistics",
            'brand': "Toyota",
            'model_type': "8FBE15",
            'serial_number': "SN-001",
        }
        data.update(fields)
        return services.create_forklift(user or self.owner, ForkliftIn(**data))


class CreateForkliftTest(ForkliftServiceTestBase):
    def test_owner_is_acting_user(self):
        forklift = self.make_forklift(user=self.colleague)
        self.assertEqual(forklift.user, self.colleague)
        self.assertEqual(forklift.company, self.company)
        self.assertEqual(forklift.documents_500h, [])

    def test_create_is_audited(self):
        forklift = self.make_forklift()
        log = AuditLog.objects.get(action=AuditAction.CREATE_FORKLIFT)
        self.assertEqual(log.target_id, forklift.id)
        self.assertEqual(log.company_id, self.company.id)

    def test_non_member_cannot_create(self):
        with self.assertRaises(PermissionDenied):
            self.make_forklift(user=self.outsider)

    def test_blocked_member_cannot_create(self):
        Membership.objects.filter(user=self.colleague, company=self.company).update(is_blocked=True)
        with self.assertRaises(PermissionDenied):
            self.make_forklift(user=self.colleague)

    def test_company_is_required(self):
        with self.assertRaises(ValidationError):
            services.create_forklift(self.owner, ForkliftIn(customer="A", brand="B", model_type="C"))

    def test_required_text_fields(self):
        for field in ('customer', 'brand', 'model_type'):
            with self.subTest(field=field):
                with self.assertRaises(ValidationError):
                    self.make_forklift(**{field: "   "})

    def test_negative_service_hours_rejected(self):
        with self.assertRaises(ValidationError):
            self.make_forklift(service_hours=-1)

    def test_text_fields_are_trimmed(self):
        forklift = self.make_forklift(customer="  Acme Logistics  ")
        self.assertEqual(forklift.customer, "Acme Logistics")


class ListForkliftsTest(ForkliftServiceTestBase):
    def test_members_see_each_others_forklifts(self):
        mine = self.make_forklift(user=self.owner)
        theirs = self.make_forklift(user=self.colleague, customer="Beta Foods")

        visible = services.list_forklifts_for_user(self.colleague.id)
        self.assertCountEqual(visible, [mine, theirs])

    def test_outsider_sees_nothing(self):
        self.make_forklift()
        self.assertEqual(services.list_forklifts_for_user(self.outsider.id), [])

    def test_blocked_member_sees_nothing(self):
        self.make_forklift()
        Membership.objects.filter(user=self.colleague).update(is_blocked=True)
        self.assertEqual(services.list_forklifts_for_user(self.colleague.id), [])

    def test_filters(self):
        toyota = self.make_forklift()
        linde = self.make_forklift(customer="Beta Foods", brand="Linde", model_type="E20", serial_number="XY-77")
        other = self.make_forklift(user=self.outsider, company=self.other_company)

        self.assertEqual(services.list_forklifts_for_user(self.owner.id, customer="Beta Foods"), [linde])
        self.assertEqual(services.list_forklifts_for_user(self.owner.id, search="linde"), [linde])
        self.assertEqual(services.list_forklifts_for_user(self.owner.id, search="sn-0"), [toyota])
        self.assertEqual(
            services.list_forklifts_for_user(self.outsider.id, company_id=self.other_company.id),
            [other],
        )
        self.assertEqual(
            services.list_forklifts_for_user(self.owner.id, company_id=self.other_company.id),
            [],
        )

    def test_group_by_customer(self):
        self.make_forklift(customer="Zeta")
        self.make_forklift(customer="Acme")
        self.make_forklift(customer="Acme", brand="Linde")

        groups = services.group_by_customer(services.list_forklifts_for_user(self.owner.id))
        self.assertEqual([g['customer'] for g in groups], ["Acme", "Zeta"])
        self.assertEqual([g['count'] for g in groups], [2, 1])
        self.assertEqual(len(groups[0]['forklifts']), 2)


class GetUpdateDeleteTest(ForkliftServiceTestBase):
    def test_get_missing_forklift(self):
        forklift = self.make_forklift()
        forklift_id = forklift.id
        forklift.delete()
        with self.assertRaises(Forklift.DoesNotExist):
            services.get_forklift_for_user(forklift_id, self.owner.id)

    def test_get_denied_for_outsider(self):
        forklift = self.make_forklift()
        with self.assertRaises(PermissionDenied):
            services.get_forklift_for_user(forklift.id, self.outsider.id)

    def test_partial_update_keeps_other_fields(self):
        forklift = self.make_forklift(service_notes="Initial")
        updated = services.update_forklift(
            forklift.id, self.colleague, ForkliftPatch(service_hours=1200)
        )
        self.assertEqual(updated.service_hours, 1200)
        self.assertEqual(updated.service_notes, "Initial")
        self.assertEqual(updated.user, self.owner)

        log = AuditLog.objects.get(action=AuditAction.UPDATE_FORKLIFT)
        self.assertEqual(log.context["fields"], ["service_hours"])

    def test_update_cannot_blank_required_field(self):
        forklift = self.make_forklift()
        with self.assertRaises(ValidationError):
            services.update_forklift(forklift.id, self.owner, ForkliftPatch(brand=""))

    def test_move_requires_owner_membership_in_target(self):
        forklift = self.make_forklift(user=self.colleague)
        target = create_company("Target AB", self.owner)

        # colleague (the record owner) is not a member of the target company
        with self.assertRaises(PermissionDenied):
            services.update_forklift(forklift.id, self.owner, ForkliftPatch(company_id=target.id))

        join_company(target.join_code, self.colleague)
        moved = services.update_forklift(forklift.id, self.owner, ForkliftPatch(company_id=target.id))
        self.assertEqual(moved.company_id, target.id)

    def test_move_requires_editor_membership_in_target(self):
        forklift = self.make_forklift(user=self.owner)
        target = create_company("Target AB", self.owner)
        with self.assertRaises(PermissionDenied):
            services.update_forklift(forklift.id, self.colleague, ForkliftPatch(company_id=target.id))

    def test_only_owner_can_delete(self):
        forklift = self.make_forklift(user=self.owner)
        with self.assertRaises(PermissionDenied):
            services.delete_forklift(forklift.id, self.colleague)

        services.delete_forklift(forklift.id, self.owner)
        self.assertFalse(Forklift.objects.filter(id=forklift.id).exists())
        self.assertTrue(AuditLog.objects.filter(action=AuditAction.DELETE_FORKLIFT).exists())


class ServiceStatusTest(ForkliftServiceTestBase):
    def test_statuses(self):
        today = timezone.localdate()
        cases = [
            (None, ServiceStatus.UNKNOWN, None),
            (today - timedelta(days=1), ServiceStatus.OVERDUE, -1),
            (today, ServiceStatus.DUE_SOON, 0),
            (today + timedelta(days=6), ServiceStatus.DUE_SOON, 6),
            (today + timedelta(days=7), ServiceStatus.SCHEDULED, 7),
        ]
        for next_date, status, days in cases:
            with self.subTest(next_date=next_date):
                forklift = Forklift(next_service_date=next_date)
                self.assertEqual(forklift.service_status(today), status)
                self.assertEqual(forklift.days_until_service(today), days)

    def test_explicit_today(self):
        forklift = Forklift(next_service_date=date(2024, 3, 10))
        self.assertEqual(forklift.days_until_service(date(2024, 3, 1)), 9)
