import factory
from customer.models import Customer
from factory import Faker
from factory.django import DjangoModelFactory


class CustomerFactory(DjangoModelFactory):
    class Meta:
        model = Customer

    name = Faker("name")
    phone = factory.Sequence(lambda n: f"09{n:08d}")
    address = Faker("address")
    location_type = "city"
