"""
Contact loading and export for the Contacts Dashboard.

This module reads the contact working set from JSON or CSV files (on
disk or uploaded through the dashboard), keeps it in a ContactRepository
that is replaced wholesale on every (re)load, and writes selected
contacts back out as CSV.
"""

import json
import logging
import math
from io import BytesIO, StringIO
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from core.exceptions import FileProcessingError, ValidationError
from .models import COLUMN_KEYS, LIST_ATTRIBUTES, Contact

# Separator for multi-valued email/phone cells in CSV files
LIST_SEPARATOR = ';'

SUPPORTED_EXTENSIONS = ('.json', '.csv')

CONTACT_FIELDS = tuple(Contact.__dataclass_fields__)

# (header fragment, contact field) checked in order; first match wins
HEADER_HINTS = (
    ('email', 'email'),
    ('e-mail', 'email'),
    ('phone', 'phone_number'),
    ('company', 'company_name'),
    ('title', 'job_title'),
    ('position', 'job_title'),
    ('address', 'address'),
    ('city', 'city'),
    ('state', 'state'),
    ('country', 'country'),
    ('website', 'website'),
    ('linkedin', 'linkedin'),
    ('industry', 'industry'),
)


def load_contacts(path: str) -> List[Contact]:
    """
    Load contacts from a JSON or CSV file.

    JSON files may hold a list of records or an object with a ``data``
    list (the shape returned by the card-info API). In CSV files the
    email and phone columns may hold ``;``-separated lists.

    Args:
        path: Path to a .json or .csv file

    Returns:
        List of contacts in file order

    Raises:
        FileProcessingError: If the file is missing, unreadable or unsupported
    """
    file_path = Path(path)
    _file_type(file_path.name, operation='load')
    if not file_path.exists():
        raise FileProcessingError("Contacts file not found", file_path=str(path), operation='load')

    try:
        content = file_path.read_bytes()
    except OSError as e:
        error_msg = f"Error reading contacts file: {e}"
        logging.error(error_msg)
        raise FileProcessingError(error_msg, file_path=str(path), operation='load')

    return parse_contacts(content, str(path))


def parse_contacts(content: bytes, filename: str, operation: str = 'load') -> List[Contact]:
    """
    Parse contacts from raw file content; the filename picks the format.

    Raises:
        FileProcessingError: If the format is unsupported or the content malformed
    """
    suffix = _file_type(filename, operation)
    try:
        if suffix == '.json':
            records = _read_json_records(content)
        else:
            records = _read_csv_records(content)
    except (ValueError, pd.errors.ParserError) as e:
        error_msg = f"Error reading contacts file: {e}"
        logging.error(error_msg)
        raise FileProcessingError(error_msg, file_path=filename, operation=operation)

    contacts = records_to_contacts(records)
    logging.info(f"Loaded {len(contacts)} contacts from {filename}")
    return contacts


def _file_type(filename: str, operation: str) -> str:
    suffix = Path(filename).suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise FileProcessingError(
            f"Unsupported contacts file type '{suffix}'", file_path=filename, operation=operation
        )
    return suffix


def suggest_field(header: str) -> Optional[str]:
    """
    Contact field for a CSV header, or None to skip the column.

    Exact field names map to themselves; otherwise the header is matched
    loosely ("E-mail Address" -> email, "Company" -> company_name).
    """
    name = header.strip()
    if name in CONTACT_FIELDS:
        return name

    lowered = name.lower()
    if 'name' in lowered and 'company' not in lowered:
        if 'first' in lowered:
            return 'first_name'
        if 'last' in lowered:
            return 'last_name'
        return 'full_name'
    for fragment, field_name in HEADER_HINTS:
        if fragment in lowered:
            return field_name
    return None


def records_to_contacts(records: Iterable[Dict[str, Any]]) -> List[Contact]:
    """Convert raw records to contacts, skipping (and logging) invalid ones."""
    contacts = []
    for index, record in enumerate(records):
        try:
            contacts.append(Contact.from_dict(record))
        except ValidationError as e:
            logging.warning(f"Skipping contact record {index}: {e}")
    return contacts


def _read_json_records(content: bytes) -> List[Dict[str, Any]]:
    payload = json.loads(content.decode('utf-8'))

    if isinstance(payload, dict):
        payload = payload.get('data', [])
    if not isinstance(payload, list):
        raise ValueError("expected a list of contact records")
    return [record for record in payload if isinstance(record, dict)]


def _read_csv_records(content: bytes) -> List[Dict[str, Any]]:
    df = pd.read_csv(BytesIO(content), dtype=str, keep_default_na=True)

    mapping = {}
    for header in df.columns:
        field_name = suggest_field(str(header))
        if field_name is None:
            logging.debug(f"Skipping CSV column '{header}'")
        elif field_name not in mapping.values():
            mapping[header] = field_name
    df = df[list(mapping)].rename(columns=mapping)

    # Files exported from other tools rarely carry our ids
    if 'id' not in df.columns:
        df.insert(0, 'id', [str(n) for n in range(1, len(df) + 1)])

    records = []
    for record in df.to_dict(orient='records'):
        cleaned = {key: _clean_cell(value) for key, value in record.items()}
        for name in LIST_ATTRIBUTES:
            if cleaned.get(name):
                cleaned[name] = [part.strip() for part in cleaned[name].split(LIST_SEPARATOR) if part.strip()]
        records.append(cleaned)
    return records


def _clean_cell(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    text = str(value).strip()
    return text or None


def contacts_to_frame(contacts: Sequence[Contact]) -> pd.DataFrame:
    """Flatten contacts into a DataFrame, joining list cells with ';'."""
    rows = []
    for contact in contacts:
        data = contact.to_dict()
        for name in LIST_ATTRIBUTES:
            data[name] = LIST_SEPARATOR.join(data[name])
        rows.append(data)

    columns = ['id'] + [key for key in COLUMN_KEYS if key != 'actions']
    df = pd.DataFrame(rows)
    if df.empty:
        return pd.DataFrame(columns=columns)
    # Display columns first, remaining attributes after
    ordered = columns + [c for c in df.columns if c not in columns]
    return df[ordered]


def export_contacts_csv(contacts: Sequence[Contact]) -> str:
    """Render contacts as CSV text (used for the 'export selected' action)."""
    buffer = StringIO()
    contacts_to_frame(contacts).to_csv(buffer, index=False)
    return buffer.getvalue()


class ContactRepository:
    """
    In-memory working set of contacts.

    The collection is only ever replaced as a whole; there is no
    append/patch protocol. ``version`` increments on every replace so
    callers can tell two loads apart.
    """

    def __init__(self, contacts: Optional[Iterable[Contact]] = None):
        self._contacts: Tuple[Contact, ...] = tuple(contacts or ())
        self._by_id: Dict[str, Contact] = {c.id: c for c in self._contacts}
        self.version = 0

    def replace(self, contacts: Iterable[Contact]) -> None:
        self._contacts = tuple(contacts)
        self._by_id = {c.id: c for c in self._contacts}
        self.version += 1
        logging.debug(f"Contact repository replaced: {len(self._contacts)} rows (version {self.version})")

    def all(self) -> Tuple[Contact, ...]:
        return self._contacts

    def get(self, contact_id: str) -> Optional[Contact]:
        return self._by_id.get(str(contact_id))

    def page(self, page: int, page_size: int) -> Dict[str, Any]:
        """
        Serve one page as a paginated data source would.

        Returns:
            Dict with 'data' (contacts) and 'pagination' counters
        """
        if page_size <= 0:
            raise ValidationError("page_size must be positive", field='page_size', value=page_size)

        total_items = len(self._contacts)
        total_pages = max(1, math.ceil(total_items / page_size))
        page = min(max(1, page), total_pages)
        start = (page - 1) * page_size
        return {
            'data': list(self._contacts[start:start + page_size]),
            'pagination': {
                'page': page,
                'pageSize': page_size,
                'totalPages': total_pages,
                'totalItems': total_items,
            },
        }

    def __len__(self) -> int:
        return len(self._contacts)


# Process-wide working set shared by the dashboard pages
_repository_instance = None


def get_repository() -> ContactRepository:
    """Get the shared repository, creating an empty one on first use."""
    global _repository_instance
    if _repository_instance is None:
        _repository_instance = ContactRepository()
    return _repository_instance


def reset_repository() -> None:
    """Drop the shared repository (used by tests)."""
    global _repository_instance
    _repository_instance = None
