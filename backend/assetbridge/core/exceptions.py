"""Domain errors raised by the import/export pipeline.

Row-level problems never surface here: the import orchestrator turns them into
FieldIssue entries. These exceptions cover the batch- and export-level failures
that always propagate to the caller.
"""


class AssetBridgeError(Exception):
    """Base class for pipeline errors that abort a whole operation."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MalformedSourceError(AssetBridgeError):
    """The uploaded tabular source could not be parsed; no row was processed."""

    def __init__(self, message: str, line: int | None = None):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class NoMatchingRecordsError(AssetBridgeError):
    """The export filter matched zero records."""

    def __init__(self, message: str = "No matching records to export"):
        super().__init__(message)


class ExportSerializationError(AssetBridgeError):
    """A renderer failed; the export produced no artifact."""

    def __init__(self, fmt: str, cause: Exception):
        super().__init__(f"Failed to render {fmt} export: {cause}")
        self.format = fmt
        self.cause = cause
