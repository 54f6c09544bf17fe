class AppError(Exception):
    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class StyleTransferError(Exception):
    pass


class ConfigurationError(StyleTransferError):
    pass


class ModelDeclinedError(StyleTransferError):
    """The model answered with text instead of an image."""

    def __init__(self, text: str) -> None:
        super().__init__(f"The AI model responded with: {text}")
        self.text = text
