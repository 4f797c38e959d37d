"""
Signup payload factory.
"""

import factory
from faker import Faker

fake = Faker()


class SignupFactory(factory.Factory):
    """
    Factory for /auth/signup request bodies.

    Usage:
        payload = SignupFactory()
        payload = SignupFactory(password="short")
    """

    class Meta:
        model = dict

    email = factory.Sequence(lambda n: f"tech{n}@{fake.domain_name()}")
    password = factory.LazyFunction(lambda: fake.password(length=12))
    firstName = factory.LazyFunction(fake.first_name)
    lastName = factory.LazyFunction(fake.last_name)
