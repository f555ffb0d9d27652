class NoUnsafeAnyError(Exception):
    """Base class for every error raised by no-unsafe-any."""


class MalformedTreeError(NoUnsafeAnyError):
    """The syntax tree breaks a structural invariant the policies rely on."""

    def __init__(self, node_type: str, detail: str) -> None:
        super().__init__(f"Malformed {node_type}: {detail}")
        self.node_type = node_type
        self.detail = detail


class InvalidOptionsError(NoUnsafeAnyError):
    pass


class ReportContractError(NoUnsafeAnyError):
    pass


class TypeTableError(NoUnsafeAnyError):
    pass


class UnsupportedLanguageError(NoUnsafeAnyError, ValueError):
    pass
