"""
Test factories for generating realistic test data.

Uses factory_boy for declarative test data generation.
"""

from .user import SignupFactory
from .customer import CustomerFactory
from .equipment import EquipmentFactory
from .job import JobFactory, CompletedJobFactory
from .invoice import InvoiceFactory

__all__ = [
    "SignupFactory",
    "CustomerFactory",
    "EquipmentFactory",
    "JobFactory",
    "CompletedJobFactory",
    "InvoiceFactory",
]
