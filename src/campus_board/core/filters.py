"""Client-side filtering of merged collections."""

from typing import List, Optional, Sequence

from pydantic import BaseModel

from campus_board.models import Record

# Selector value meaning "no filter"
ALL = "all"


class RecordQuery(BaseModel):
    """
    Filters applied to a merged collection.

    Local records never pass through the server's filters, so the same query is
    applied on the client to the whole merged collection.
    """
    search: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    type: Optional[str] = None  # noqa: A003

    def field_filters(self) -> dict:
        """Exact-match filters that are set."""
        return {
            name: value
            for name, value in self.model_dump(exclude={"search"}).items()
            if value not in (None, "", ALL)
        }

    def matches(self, record: Record) -> bool:
        for name, value in self.field_filters().items():
            if getattr(record, name, None) != value:
                return False

        term = (self.search or "").strip().lower()
        if term:
            return any(term in (text or "").lower() for text in record.search_fields())
        return True


def apply_query(records: Sequence[Record], query: Optional[RecordQuery] = None) -> List[Record]:
    """Return the records matching ``query``, preserving order."""
    if query is None:
        return list(records)
    return [record for record in records if query.matches(record)]
