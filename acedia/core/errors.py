class AcediaError(Exception):
    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(AcediaError):
    def __init__(self, code: str = "NOT_FOUND", message: str = "Resource not found", details: dict | None = None):
        super().__init__(code, message, details)


class ConfigError(AcediaError):
    def __init__(self, code: str = "CONFIG_ERROR", message: str = "Invalid configuration", details: dict | None = None):
        super().__init__(code, message, details)


class AlreadyRunningError(AcediaError):
    def __init__(self, code: str = "ALREADY_RUNNING", message: str = "Acedia is already running", details: dict | None = None):
        super().__init__(code, message, details)
