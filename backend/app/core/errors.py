class QuotationError(ValueError):
    """Rejected input; raised before any layout work starts."""

    code = "quotation_invalid"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.code)


class InvalidTermError(QuotationError):
    code = "term_invalid"


class InvalidInputError(QuotationError):
    code = "projection_input_invalid"


class RateScheduleError(QuotationError):
    code = "rate_schedule_invalid"


class AssetMissingError(RuntimeError):
    code = "asset_missing"

    def __init__(self, asset: str):
        super().__init__(f"{self.code}: {asset}")
        self.asset = asset
