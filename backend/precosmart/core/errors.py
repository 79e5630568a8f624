class ValidationError(ValueError):
    """Input rejected before anything is written."""


class NotFoundError(LookupError):
    """Record missing or owned by another organization."""


class RecomputeError(RuntimeError):
    """A line change was saved but the product totals could not be refreshed."""

    def __init__(self, product_id: int):
        super().__init__(f"Line saved but totals for product {product_id} could not be recomputed")
        self.product_id = product_id
