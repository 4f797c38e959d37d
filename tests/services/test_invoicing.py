"""Tests for invoice number allocation and job-to-invoice derivation."""
import re
from datetime import date

import pytest
import pytest_asyncio
from sqlalchemy import select, func

from app.exceptions import BusinessRuleError, ConflictError
from app.models.customer import Customer
from app.models.invoice import Invoice
from app.models.job import Job
from app.services.invoicing import (
    create_invoice_with_unique_number,
    generate_invoice_number,
    invoice_fields_from_job,
)


@pytest_asyncio.fixture
async def customer(test_db, test_user):
    customer = Customer(company_id=test_user.company_id, name="Grace Hopper")
    test_db.add(customer)
    await test_db.commit()
    await test_db.refresh(customer)
    return customer


def _fields(customer: Customer) -> dict:
    return {
        "company_id": customer.company_id,
        "customer_id": customer.id,
        "amount": 250.0,
        "status": "pending",
    }


def test_number_format():
    number = generate_invoice_number(date(2025, 3, 14))

    assert re.match(r"^INV-20250314-[0-9A-F]{8}$", number)
    assert generate_invoice_number(date(2025, 3, 14)) != number


@pytest.mark.asyncio
async def test_retries_past_a_collision(test_db, customer):
    fields = _fields(customer)
    await create_invoice_with_unique_number(test_db, fields, number_factory=lambda: "INV-1")
    numbers = iter(["INV-1", "INV-1", "INV-2"])

    invoice = await create_invoice_with_unique_number(
        test_db, fields, number_factory=lambda: next(numbers)
    )

    assert invoice.invoice_number == "INV-2"
    count = await test_db.execute(select(func.count(Invoice.id)))
    assert count.scalar() == 2


@pytest.mark.asyncio
async def test_gives_up_after_max_attempts(test_db, customer):
    fields = _fields(customer)
    await create_invoice_with_unique_number(test_db, fields, number_factory=lambda: "INV-1")
    attempts = []

    def same_number():
        attempts.append(1)
        return "INV-1"

    with pytest.raises(ConflictError):
        await create_invoice_with_unique_number(
            test_db, fields, number_factory=same_number, max_attempts=3
        )

    assert len(attempts) == 3
    count = await test_db.execute(select(func.count(Invoice.id)))
    assert count.scalar() == 1


def test_fields_from_completed_job():
    job = Job(
        id=7, company_id="company_x", customer_id=3, title="Furnace repair",
        status="completed", actual_cost=150.0, estimated_cost=120.0,
    )

    fields = invoice_fields_from_job(job, today=date(2025, 1, 1))

    assert fields["amount"] == 150.0
    assert fields["labor_cost"] == 150.0
    assert fields["material_cost"] == 0.0
    assert fields["due_date"] == date(2025, 1, 31)
    assert fields["status"] == "pending"
    assert fields["notes"] == "Invoice for Furnace repair"


def test_fields_without_costs():
    job = Job(id=7, company_id="company_x", customer_id=3, title="Quote visit", status="completed")

    fields = invoice_fields_from_job(job, today=date(2025, 1, 1))

    assert fields["amount"] == 0.0
    assert fields["labor_cost"] == 0.0


@pytest.mark.parametrize("status", ["scheduled", "in_progress", "cancelled"])
def test_open_jobs_are_rejected(status):
    job = Job(id=7, company_id="company_x", customer_id=3, title="x", status=status)

    with pytest.raises(BusinessRuleError):
        invoice_fields_from_job(job)
