from datetime import date, datetime, timezone
from decimal import Decimal

from wage_tracker.domain.schemas.record import RecordDocument, WIRE_FIELDS, decode_record, record_to_wire


def test_document_fields_use_wire_names():
    document = RecordDocument(
        branch="Alpha",
        date=date(2024, 1, 1),
        sales=Decimal("9000"),
        wage=Decimal("700"),
        commission=Decimal("270"),
        updated_at=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
    )

    fields = document.to_fields()

    assert tuple(fields) == WIRE_FIELDS
    assert fields["date"] == "2024-01-01"
    assert fields["updatedAt"] == "2024-01-01T12:00:00+00:00"
    assert fields["sales"] == Decimal("9000")


def test_decode_full_document():
    record = decode_record("r1", {
        "branch": "Beta",
        "date": "2024-01-02",
        "sales": 6500,
        "wage": 800,
        "commission": 97.5,
        "updatedAt": "2024-01-02T08:30:00Z",
    })

    assert record.id == "r1"
    assert record.branch == "Beta"
    assert record.date == date(2024, 1, 2)
    assert record.sales == Decimal("6500")
    assert record.commission == Decimal("97.5")
    assert record.updated_at == datetime(2024, 1, 2, 8, 30, tzinfo=timezone.utc)


def test_decode_partial_document_does_not_fail():
    record = decode_record("r2", {"branch": "Alpha", "sales": "not-a-number", "date": "yesterday"})

    assert record.branch == "Alpha"
    assert record.sales is None
    assert record.wage is None
    assert record.commission is None
    assert record.date is None
    assert record.updated_at is None


def test_record_to_wire():
    record = decode_record("r3", {"branch": "Alpha", "date": "2024-01-01", "sales": "9000", "wage": 700, "commission": 270})

    wire = record_to_wire(record)

    assert wire == {
        "id": "r3",
        "branch": "Alpha",
        "date": "2024-01-01",
        "sales": 9000.0,
        "wage": 700.0,
        "commission": 270.0,
        "updatedAt": None,
    }
