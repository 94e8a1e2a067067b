import uuid
from decimal import Decimal

import factory
from django.contrib.auth import get_user_model
from faker import Faker

from marketplace.models import Order, OrderItem, PrintStore, Service

User = get_user_model()
fake = Faker()


class UserFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = User

    id = factory.LazyFunction(uuid.uuid4)
    username = factory.Sequence(lambda n: f"user_{n}")
    email = factory.Sequence(lambda n: f"user_{n}@example.com")
    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    password = factory.PostGenerationMethodCall("set_password", "defaultpassword")
    is_active = True
    role = "customer"


class CustomerFactory(UserFactory):
    role = "customer"


class GuestFactory(UserFactory):
    role = "guest"
    username = factory.Sequence(lambda n: f"guest_{n}")
    email = factory.Sequence(lambda n: f"guest_{n}@example.com")


class OwnerFactory(UserFactory):
    role = "owner"
    username = factory.Sequence(lambda n: f"owner_{n}")
    email = factory.Sequence(lambda n: f"owner_{n}@example.com")


class EmployeeFactory(UserFactory):
    role = "employee"
    employee_role = "Front Desk"
    username = factory.Sequence(lambda n: f"employee_{n}")
    email = factory.Sequence(lambda n: f"employee_{n}@example.com")


class AdminFactory(UserFactory):
    role = "admin"
    is_superuser = True
    is_staff = True
    username = factory.Sequence(lambda n: f"admin_{n}")
    email = factory.Sequence(lambda n: f"admin_{n}@example.com")


class PrintStoreFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = PrintStore

    id = factory.LazyFunction(uuid.uuid4)
    name = factory.Sequence(lambda n: f"Print Shop {n}")
    owner = factory.SubFactory(OwnerFactory)
    address = factory.LazyFunction(lambda: fake.address().replace("\n", ", ")[:300])
    is_active = True


class ServiceFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Service

    id = factory.LazyFunction(uuid.uuid4)
    store = factory.SubFactory(PrintStoreFactory)
    name = factory.Sequence(lambda n: f"Poster Print {n}")
    description = factory.Faker("sentence", nb_words=8)
    base_price = Decimal("100.00")
    unit = "per item"
    currency = "PHP"
    variants = factory.LazyFunction(
        lambda: [
            {
                "label": "Paper",
                "options": [
                    {"name": "Glossy", "price_delta": "20.00"},
                    {"name": "Matte", "price_delta": "10.00"},
                ],
            },
            {
                "label": "Size",
                "options": [
                    {"name": "A4", "price_delta": "0"},
                    {"name": "A3", "price_delta": "35.50"},
                ],
            },
        ]
    )
    is_active = True


class OrderFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Order

    id = factory.LazyFunction(uuid.uuid4)
    customer = factory.SubFactory(CustomerFactory)
    store = factory.SubFactory(PrintStoreFactory)
    status = Order.STATUS_PENDING
    payment_status = "unpaid"
    subtotal = Decimal("100.00")
    currency = "PHP"
    notes = ""


class OrderItemFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = OrderItem

    order = factory.SubFactory(OrderFactory)
    service = factory.SubFactory(ServiceFactory, store=factory.SelfAttribute("..order.store"))
    service_name = factory.LazyAttribute(lambda o: o.service.name)
    unit = "per item"
    currency = "PHP"
    quantity = 1
    selected_options = factory.LazyFunction(list)
    unit_price = Decimal("100.00")
    total_price = Decimal("100.00")
