from django.test import TestCase
from django.urls import reverse

from marketplace.tests.factories import AdminFactory, OrderFactory, OrderItemFactory


class MarketplaceAdminTest(TestCase):
    def setUp(self):
        self.admin_user = AdminFactory()
        self.client.force_login(self.admin_user)

    def test_order_changelist_and_change_page(self):
        order = OrderFactory()
        OrderItemFactory(order=order)

        changelist = self.client.get(reverse("admin:marketplace_order_changelist"))
        change = self.client.get(reverse("admin:marketplace_order_change", args=[order.pk]))

        self.assertEqual(changelist.status_code, 200)
        self.assertEqual(change.status_code, 200)

    def test_login_with_factory_password(self):
        self.client.logout()
        staff = AdminFactory()
        staff.refresh_from_db()

        self.assertTrue(staff.check_password("defaultpassword"))
        self.assertTrue(self.client.login(username=staff.email, password="defaultpassword"))
        self.assertEqual(self.client.get(reverse("admin:index")).status_code, 200)

    def test_store_changelist(self):
        response = self.client.get(reverse("admin:marketplace_printstore_changelist"))

        self.assertEqual(response.status_code, 200)
