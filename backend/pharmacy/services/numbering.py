"""Invoice and purchase-order numbers derived from the creation timestamp."""
from datetime import datetime

from sqlalchemy.orm import Session


def next_document_number(db: Session, column, prefix: str, moment: datetime) -> str:
    """
    `<prefix>-<yyyyMMddHHmmss>`, e.g. INV-20250114093012.

    Two documents created within the same second get a sequence suffix
    (INV-20250114093012-2, -3, ...). The column carries a unique constraint,
    so a concurrent writer that still collides fails at commit instead of
    silently sharing a number.
    """
    base = f"{prefix}-{moment.strftime('%Y%m%d%H%M%S')}"
    taken = {
        row[0]
        for row in db.query(column).filter(column.like(f"{base}%")).all()
    }
    if base not in taken:
        return base
    seq = 2
    while f"{base}-{seq}" in taken:
        seq += 1
    return f"{base}-{seq}"
