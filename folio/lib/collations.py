"""
Per-vendor collation support for text columns.

Django lets a CharField name one collation, which is not enough when the same
schema runs on SQLite in tests and MySQL in production. The mixin here lets a
field carry a small vendor -> collation map instead.
"""


class MultiCollationMixin:
    """
    Adds a ``db_collations`` mapping, e.g.
    ``{"sqlite": "NOCASE", "mysql": "utf8mb4_unicode_ci"}``, to a text field.

    Mix this into CharField or TextField subclasses only. Vendors missing
    from the map get the database default.
    """

    def __init__(self, *args, db_collations=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.db_collations = dict(db_collations or {})

    def db_parameters(self, connection):
        db_params = super().db_parameters(connection)
        if connection.vendor in self.db_collations:
            db_params["collation"] = self.db_collations[connection.vendor]
        return db_params

    def deconstruct(self):
        """
        Keep the collation map in serialized migrations.
        """
        name, path, args, kwargs = super().deconstruct()
        if self.db_collations:
            kwargs["db_collations"] = self.db_collations
        return name, path, args, kwargs
