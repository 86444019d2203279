"""
Error Taxonomy
Every error carries the HTTP status it maps to and a public message
"""


class BoosterHubError(Exception):
    """Base class for errors raised by services"""

    status_code = 500
    public_message = "Internal server error"

    def __init__(self, message: str = None):
        super().__init__(message or self.public_message)

    @property
    def client_message(self) -> str:
        # Server errors never echo internal details back
        if self.status_code >= 500:
            return self.public_message
        return str(self)


class NotFoundError(BoosterHubError):
    status_code = 404
    public_message = "Club not found or inactive"


class NoZelleUrlError(NotFoundError):
    public_message = "No Zelle URL configured for this club"


class ValidationError(BoosterHubError):
    status_code = 400
    public_message = "Invalid request"


class PaymentDisabledError(ValidationError):
    public_message = "Payment is not enabled for this club"


class DecodeError(BoosterHubError):
    """Payment link could not be decoded"""

    status_code = 400
    public_message = "Invalid payment link"


class MalformedUrlError(DecodeError):
    public_message = "Payment link has no data parameter"


class InvalidBase64Error(DecodeError):
    public_message = "Payment link data is not valid base64"


class InvalidJsonError(DecodeError):
    public_message = "Payment link data is not valid JSON"


class SchemaMismatchError(DecodeError):
    public_message = "Payment link data is missing required fields"


class RenderError(BoosterHubError):
    """QR code could not be rendered"""

    status_code = 500
    public_message = "Failed to generate QR code"


class EmptyInputError(RenderError):
    pass


class InvalidSettingsError(RenderError):
    pass


class ConfigurationError(BoosterHubError):
    public_message = "Service is not configured"


class StorageError(BoosterHubError):
    status_code = 502
    public_message = "Failed to store uploaded file"
