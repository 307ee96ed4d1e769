class LinkError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class InvalidInput(LinkError):
    status_code = 400
    message = "Invalid input"


class Conflict(LinkError):
    status_code = 409
    message = "Code already exists"


class NotFound(LinkError):
    status_code = 404
    message = "Link not found"


class ExhaustedRetries(LinkError):
    status_code = 500
    message = "Failed to generate unique code"
