class TableNotFoundError(LookupError):
    def __init__(self, table_id: str):
        super().__init__(f"Table data not found: {table_id}")
        self.table_id = table_id


class EmptyInputError(ValueError):
    pass


class InvalidFormatError(ValueError):
    pass


class UnsupportedFormatError(ValueError):
    pass


class ExcelUnsupportedError(ValueError):
    """Excel import is intentionally not implemented."""

    def __init__(self):
        super().__init__(
            "Excel import is not available. Please use CSV/JSON import instead."
        )


class UnknownColumnTypeError(ValueError):
    pass


class StoreError(RuntimeError):
    pass


class FileReadError(OSError):
    pass
