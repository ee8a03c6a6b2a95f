class ValidationError(ValueError):
    """Raised when record options or funnel flags are malformed."""
