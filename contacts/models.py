"""
Contact row model and the declared table columns.

A Contact is an immutable record: the table engine only ever derives
views over a collection of them, it never edits one in place.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional, Tuple

from core.exceptions import ValidationError

# Attributes holding ordered lists; the first element is the primary value
LIST_ATTRIBUTES = ('email', 'phone_number')


@dataclass(frozen=True)
class Contact:
    """A single business-card contact, one line in the table."""
    id: str
    full_name: str = ''
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    job_title: Optional[str] = None
    company_name: Optional[str] = None
    website: Optional[str] = None
    linkedin: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    industry: Optional[str] = None
    notes: Optional[str] = None
    source: Optional[str] = None
    date_collected: Optional[str] = None
    email: Tuple[str, ...] = field(default_factory=tuple)
    phone_number: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Contact':
        """
        Build a Contact from a loosely-typed record (API JSON, CSV row).

        Unknown keys are dropped, scalar email/phone values are wrapped
        into one-element tuples and ids are coerced to strings.

        Raises:
            ValidationError: If the record has no id
        """
        raw_id = data.get('id')
        if raw_id is None or str(raw_id).strip() == '':
            raise ValidationError("Contact record is missing an id", field='id')

        values: Dict[str, Any] = {}
        for f in fields(cls):
            if f.name == 'id':
                continue
            value = data.get(f.name)
            if f.name in LIST_ATTRIBUTES:
                values[f.name] = _as_string_tuple(value)
            elif f.name == 'full_name':
                values[f.name] = '' if value is None else str(value)
            else:
                values[f.name] = None if value is None else str(value)

        if not values['full_name']:
            values['full_name'] = ' '.join(
                part for part in (values['first_name'], values['last_name']) if part
            )

        return cls(id=str(raw_id), **values)

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict with list-valued email/phone, suitable for a JSON store."""
        data = asdict(self)
        for name in LIST_ATTRIBUTES:
            data[name] = list(data[name])
        return data

    def get(self, attribute: str, default: Any = None) -> Any:
        """Attribute lookup by column key; unknown keys return the default."""
        return getattr(self, attribute, default)

    @property
    def primary_email(self) -> str:
        return self.email[0] if self.email else ''

    @property
    def primary_phone(self) -> str:
        return self.phone_number[0] if self.phone_number else ''


def _as_string_tuple(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value else ()
    return tuple(str(v) for v in value if v is not None and str(v) != '')


# Column declarations for the contacts table, in display order
COLUMNS: List[Dict[str, Any]] = [
    {'name': 'Full Name', 'uid': 'full_name', 'width': 250},
    {'name': 'Job Title', 'uid': 'job_title', 'width': 200},
    {'name': 'Company', 'uid': 'company_name', 'width': 200},
    {'name': 'Email', 'uid': 'email'},
    {'name': 'Phone', 'uid': 'phone_number'},
    {'name': 'Country', 'uid': 'country'},
    {'name': 'Industry', 'uid': 'industry'},
    {'name': 'Date Collected', 'uid': 'date_collected'},
    {'name': 'Actions', 'uid': 'actions', 'is_fixed': True},
]

COLUMN_KEYS = [column['uid'] for column in COLUMNS]

INITIAL_VISIBLE_COLUMNS = [
    'full_name',
    'job_title',
    'company_name',
    'email',
    'phone_number',
    'country',
    'actions',
]
