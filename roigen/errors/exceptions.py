"""Custom exception hierarchy."""


class RegionsError(Exception):
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(RegionsError):
    pass


class ManifestError(RegionsError):
    pass


class OutputError(RegionsError):
    pass
