"""
Query-parameter to SQLAlchemy predicate translation for list endpoints.
"""
from sqlalchemy import or_

from agenda.models.base import coerce_enum

LIKE_ESCAPE = '\\'


def escape_like(term):
    """Escape LIKE wildcards so the term matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace('%', LIKE_ESCAPE + '%')
        .replace('_', LIKE_ESCAPE + '_')
    )


class FilterSpec:
    """
    Declares which query parameters a list endpoint understands.

    ``equality`` maps a parameter name to ``(column, enum_cls)``; ``enum_cls``
    may be None for free-text columns. ``search_columns`` are matched with a
    case-insensitive substring test when the ``search`` parameter is present.
    """

    def __init__(self, equality=None, search_columns=(), search_param='search'):
        self.equality = dict(equality or {})
        self.search_columns = tuple(search_columns)
        self.search_param = search_param

    @property
    def params(self):
        names = list(self.equality)
        if self.search_columns:
            names.append(self.search_param)
        return names

    def build(self, params):
        """Return the list of clauses for the present parameters (ANDed by the caller)."""
        clauses = []
        for name, (column, enum_cls) in self.equality.items():
            value = params.get(name)
            if value is None or value == '':
                continue
            if enum_cls is not None:
                value = coerce_enum(enum_cls, value, name)
            clauses.append(column == value)

        if self.search_columns:
            term = (params.get(self.search_param) or '').strip()
            if term:
                pattern = f'%{escape_like(term)}%'
                clauses.append(or_(*[
                    column.ilike(pattern, escape=LIKE_ESCAPE) for column in self.search_columns
                ]))
        return clauses
