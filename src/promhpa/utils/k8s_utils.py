from decimal import ROUND_CEILING, Decimal, InvalidOperation
from typing import Mapping, Optional, Union

_BINARY_SUFFIXES = {
    "Ki": Decimal(1024),
    "Mi": Decimal(1024) ** 2,
    "Gi": Decimal(1024) ** 3,
    "Ti": Decimal(1024) ** 4,
    "Pi": Decimal(1024) ** 5,
    "Ei": Decimal(1024) ** 6,
}

_DECIMAL_SUFFIXES = {
    "n": Decimal("0.000000001"),
    "u": Decimal("0.000001"),
    "m": Decimal("0.001"),
    "k": Decimal(1000),
    "M": Decimal(1000) ** 2,
    "G": Decimal(1000) ** 3,
    "T": Decimal(1000) ** 4,
    "P": Decimal(1000) ** 5,
    "E": Decimal(1000) ** 6,
}


def parse_quantity(quantity: Union[str, int, float, Decimal]) -> Decimal:
    """
    Parse a Kubernetes quantity ('500m', '0.25', '1Gi', ...) to a Decimal.
    Adapted from kubernetes-python utils.

    Raises ValueError when the quantity cannot be parsed.
    """
    if isinstance(quantity, (int, float, Decimal)):
        return Decimal(quantity)

    quantity = str(quantity).strip()
    number = quantity
    multiplier = Decimal(1)
    if quantity[-2:] in _BINARY_SUFFIXES:
        number, multiplier = quantity[:-2], _BINARY_SUFFIXES[quantity[-2:]]
    elif quantity[-1:] in _DECIMAL_SUFFIXES:
        number, multiplier = quantity[:-1], _DECIMAL_SUFFIXES[quantity[-1:]]

    try:
        value = Decimal(number)
    except InvalidOperation as e:
        raise ValueError(f"invalid quantity: {quantity!r}") from e
    if not value.is_finite():
        raise ValueError(f"invalid quantity: {quantity!r}")
    return value * multiplier


def parse_milli_value(quantity) -> int:
    """
    Converts a K8s quantity to milli-units, rounding up like the API
    server's MilliValue (so '10n' of CPU is 1m, not 0).
    """
    return int((parse_quantity(quantity) * 1000).to_integral_value(rounding=ROUND_CEILING))


def format_label_selector(selector: Optional[Union[str, Mapping[str, str]]]) -> str:
    """
    Render a selector for the `label_selector` argument of the Kubernetes API.
    Strings are passed through untouched; mappings become 'k1=v1,k2=v2'.
    """
    if selector is None:
        return ""
    if isinstance(selector, str):
        return selector
    return ",".join(f"{key}={value}" for key, value in selector.items())
