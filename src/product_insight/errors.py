"""Errors raised while looking up products in the catalogs."""


class ProductLookupError(Exception):
    """Base error for product lookups."""

    default_message = "Something went wrong."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class InvalidBarcodeError(ProductLookupError, ValueError):
    """Barcode is not 8-14 digits."""

    default_message = "Invalid barcode format. Use 8-14 digits (EAN/UPC)."


class ProductNotFoundError(ProductLookupError):
    """The catalog has no product for the barcode."""

    default_message = "Product not found for this barcode."


class RateLimitedError(ProductLookupError):
    """The catalog rejected the request with HTTP 429."""

    default_message = "Too many requests. Please try again in a minute."


class CatalogTimeoutError(ProductLookupError):
    """The catalog did not answer in time."""

    default_message = "Request timed out. Try again."


class CatalogUnavailableError(ProductLookupError):
    """Network failure, unexpected HTTP status or unreadable response."""

    default_message = "Network error. Try again later."

    def __init__(
        self, message: str | None = None, status_code: int | None = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
