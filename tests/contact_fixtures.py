"""
Shared sample contacts for the table and geo tests.
"""
from datetime import datetime, timezone

from contacts.models import Contact

# Fixed reference time for date-bucket tests
NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def make_contact(id, **kwargs):
    record = {'id': id}
    record.update(kwargs)
    return Contact.from_dict(record)


def example_rows():
    """The Ann/Bo/Cy example collection."""
    return [
        make_contact('1', full_name='Ann', industry='Tech', country='US', email=['ann@acme.com']),
        make_contact('2', full_name='Bo', industry='Tech', country='FR', email=['bo@zed.fr']),
        make_contact('3', full_name='Cy', industry='Health', country='US', email=[]),
    ]


def dated_rows():
    return [
        make_contact('d1', full_name='Recent', date_collected='2026-10-15T12:00:00Z'),
        make_contact('d2', full_name='Month', date_collected='2026-09-25T12:00:00Z'),
        make_contact('d3', full_name='Old', date_collected='2026-07-01T12:00:00Z'),
        make_contact('d4', full_name='Missing', date_collected=None),
        make_contact('d5', full_name='Garbled', date_collected='not a date'),
    ]


def larger_rows(count=25):
    industries = ['Tech', 'Health', 'Finance']
    countries = ['US', 'FR', 'Germany', 'Japan']
    return [
        make_contact(
            str(i),
            full_name=f"Person {i:02d}",
            company_name=f"Company {i % 5}",
            industry=industries[i % len(industries)],
            country=countries[i % len(countries)],
            email=[f"person{i}@example.com"],
        )
        for i in range(1, count + 1)
    ]
