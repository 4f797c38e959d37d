"""
Customer test factory.

Generates realistic customer payloads for testing.
"""

import factory
from faker import Faker

fake = Faker()


class CustomerFactory(factory.Factory):
    """
    Factory for generating Customer request bodies.

    Usage:
        customer = CustomerFactory()
        customer = CustomerFactory(preferredContactMethod="text")
    """

    class Meta:
        model = dict

    name = factory.LazyFunction(fake.name)
    email = factory.Sequence(lambda n: f"customer{n}@example.com")
    phone = factory.LazyFunction(lambda: fake.numerify("555-###-####"))
    address = factory.LazyFunction(fake.street_address)
    preferredContactMethod = factory.LazyFunction(
        lambda: fake.random_element(["email", "phone", "text"])
    )
    notes = factory.LazyFunction(
        lambda: fake.sentence() if fake.boolean(chance_of_getting_true=30) else None
    )
