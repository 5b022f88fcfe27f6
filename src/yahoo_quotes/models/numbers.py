"""Number model used for prices, plus decoding of upstream special floats.

Prices are plain ``float``. Some upstream statistics (``trailingPE``,
``forwardPE`` and friends) arrive as the strings ``"Infinity"``,
``"-Infinity"`` or ``"NaN"`` instead of JSON numbers; ``SpecialFloat``
decodes those to the matching float values instead of failing validation.
"""

from __future__ import annotations

import math
from typing import Annotated, Any

from pydantic import BeforeValidator

Decimal = float
ZERO: Decimal = 0.0

_SPECIAL_FLOATS: dict[str, float] = {
    "infinity": math.inf,
    "-infinity": -math.inf,
    "nan": math.nan,
}


def parse_special_float(value: Any) -> Any:
    """Map "Infinity"/"-Infinity"/"NaN" (any case) to float specials.

    Any other value is passed through untouched for normal validation.
    """
    if isinstance(value, str):
        special = _SPECIAL_FLOATS.get(value.strip().lower())
        if special is not None:
            return special
    return value


SpecialFloat = Annotated[float | None, BeforeValidator(parse_special_float)]
