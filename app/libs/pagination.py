from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import and_, or_
from sqlalchemy.orm import Query

from .errors import BadRequestError

# (column, "asc" | "desc")
OrderKey = Tuple[Any, str]


class CursorPaginator:
    """
    Keyset pagination over an ordered query.

    The ordering must end with a unique column (the primary key) so that every
    row has a distinct position. The cursor is the primary key of the first
    row of the next page: a page is fetched with ``limit + 1`` rows and the
    extra row, when present, becomes ``next_cursor``. Requesting with that
    cursor returns rows at or after it in the ordering, so every row is
    returned exactly once across pages.
    """

    def __init__(
        self,
        query: Query,
        model: Any,
        order_by: Sequence[OrderKey],
        limit: int = 10,
        max_limit: int = 50,
    ) -> None:
        self.query: Query = query
        self.model = model
        self.order_by: List[OrderKey] = list(order_by)
        self.limit: int = limit
        self.max_limit: int = max_limit

    def paginate(self, cursor: Optional[str] = None) -> Dict[str, Any]:
        """
        Fetch one page

        Returns:
            Dictionary containing:
            - items: rows of the page, at most ``limit``
            - next_cursor: primary key of the first row of the next page or None
        """
        self._validate_limit()

        query = self.query
        if cursor:
            query = query.filter(self._at_or_after(self._cursor_values(cursor)))

        rows = query.order_by(*self._order_clauses()).limit(self.limit + 1).all()

        next_cursor = None
        if len(rows) > self.limit:
            next_cursor = str(rows.pop().id)

        return {"items": rows, "next_cursor": next_cursor}

    def _order_clauses(self):
        return [
            column.desc() if direction == "desc" else column.asc()
            for column, direction in self.order_by
        ]

    def _cursor_values(self, cursor: str) -> Tuple:
        columns = [column for column, _ in self.order_by]
        row = (
            self.query.session.query(*columns)
            .filter(self.model.id == cursor)
            .first()
        )
        if row is None:
            raise BadRequestError("Invalid cursor")
        return tuple(row)

    def _at_or_after(self, values: Tuple):
        """Rows positioned at or after ``values`` in the ordering"""
        clauses = []
        for index, (column, direction) in enumerate(self.order_by):
            equal_prefix = [
                prefix_column == value
                for (prefix_column, _), value in zip(self.order_by[:index], values)
            ]
            after = column < values[index] if direction == "desc" else column > values[index]
            clauses.append(and_(*equal_prefix, after))

        clauses.append(
            and_(*[column == value for (column, _), value in zip(self.order_by, values)])
        )
        return or_(*clauses)

    def _validate_limit(self) -> None:
        if self.limit < 1 or self.limit > self.max_limit:
            raise BadRequestError(f"limit must be between 1 and {self.max_limit}")
