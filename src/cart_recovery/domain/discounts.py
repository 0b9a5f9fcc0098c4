"""
Discount code generation (Strategy pattern).

The DiscountService asks a `CodeGenerator` for the code string it registers
with Shopify. Swap the generator to change the code format without touching
the HTTP calls; tests inject a fixed generator to get predictable codes.

Codes come from `secrets`, so generation must only ever run inside an
activity, never inside the workflow.
"""

import secrets
import string
from typing import Protocol


class CodeGenerator(Protocol):
    """Interface for producing a discount code for a given percentage."""

    def generate(self, percent: int) -> str: ...


class RandomCodeGenerator:
    """Default format: ``SAVE<percent>_<suffix>``, e.g. ``SAVE10_AB3F9``.

    The suffix is drawn from uppercase letters and digits, so a 5 character
    suffix gives 36**5 (about 60 million) codes per price rule.
    """

    ALPHABET: str = string.ascii_uppercase + string.digits
    SUFFIX_LENGTH: int = 5

    def __init__(self, suffix_length: int = SUFFIX_LENGTH) -> None:
        self.suffix_length = suffix_length

    def generate(self, percent: int) -> str:
        suffix = "".join(secrets.choice(self.ALPHABET) for _ in range(self.suffix_length))
        return f"SAVE{percent}_{suffix}"
