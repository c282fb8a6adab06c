class FormGeneratorError(Exception):
    """Base class for every error raised by the form pipeline"""


class InvalidEntityIdError(FormGeneratorError, ValueError):
    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Malformed entity id: {value!r} (expected Q123 or P123)")


class QueryError(FormGeneratorError):
    """SPARQL endpoint failed, answered non-2xx or returned an unexpected shape"""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        body: str = "",
        malformed: bool = False,
    ):
        self.status = status
        self.body = body
        self.malformed = malformed
        super().__init__(message)


class SchemaGenerationError(FormGeneratorError):
    """Form generation cannot proceed; the caller should offer a retry"""

    retryable = True


class FormValidationError(FormGeneratorError):
    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class SubmissionError(FormGeneratorError):
    def __init__(self, message: str, status: int | None = None):
        self.status = status
        self.message = message
        super().__init__(message)


class SessionExpiredError(SubmissionError):
    def __init__(self, message: str = "Session expired, please re-authenticate"):
        super().__init__(message, status=401)


class FormSessionNotFoundError(FormGeneratorError):
    def __init__(self, token: str):
        self.token = token
        super().__init__("Form session not found or expired, please reload the form")
