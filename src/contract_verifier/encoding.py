"""Constructor argument encoding for contract-verifier library."""

import re
from typing import Any, List, Optional, Sequence

from eth_abi import encode
from eth_abi.exceptions import EncodingError, ParseError
from eth_utils import encode_hex, to_bytes

from .exceptions import ConstructorEncodingError

_ARRAY_TYPE = re.compile(r"^(?P<base>.+)\[(?P<size>\d*)\]$")


def _coerce(abi_type: str, value: Any) -> Any:
    """
    Convert string forms of values into what eth_abi expects for abi_type.

    Scripts usually carry constructor arguments as strings ("500", "0x..."),
    which eth_abi refuses for numeric and bytes types.
    """
    array_match = _ARRAY_TYPE.match(abi_type)
    if array_match:
        if isinstance(value, (str, bytes)):
            raise ConstructorEncodingError(f"Expected a sequence for {abi_type}, got {value!r}")
        try:
            items = list(value)
        except TypeError as e:
            raise ConstructorEncodingError(f"Expected a sequence for {abi_type}, got {value!r}") from e
        return [_coerce(array_match.group("base"), item) for item in items]

    if not isinstance(value, str):
        return value

    if abi_type.startswith(("uint", "int")):
        try:
            return int(value, 16) if value.lower().startswith("0x") else int(value)
        except ValueError as e:
            raise ConstructorEncodingError(f"Invalid {abi_type} value {value!r}") from e

    if abi_type == "bool":
        lowered = value.strip().lower()
        if lowered not in ("true", "false"):
            raise ConstructorEncodingError(f"Invalid bool value {value!r}")
        return lowered == "true"

    if abi_type.startswith("bytes"):
        try:
            return to_bytes(hexstr=value)
        except ValueError as e:
            raise ConstructorEncodingError(f"Invalid {abi_type} value {value!r}") from e

    return value


def encode_constructor_args(
    args: Sequence[Any], types: Optional[Sequence[str]] = None
) -> Optional[str]:
    """
    ABI-encode constructor arguments.

    Arguments are encoded in the given order; nothing is reordered and
    no types are inferred.

    Args:
        args: Constructor arguments in declaration order
        types: ABI type strings matching args (e.g. ["address", "uint256"])

    Returns:
        0x-prefixed hex string of the encoded arguments,
        or None if no types were declared (args are then forwarded as-is)

    Raises:
        ConstructorEncodingError: If lengths differ or a value does not fit its type
    """
    if types is None:
        return None

    if len(types) != len(args):
        raise ConstructorEncodingError(
            f"Got {len(args)} constructor arguments for {len(types)} declared types"
        )

    try:
        values: List[Any] = [_coerce(abi_type, value) for abi_type, value in zip(types, args)]
        encoded = encode(list(types), values)
    except ConstructorEncodingError:
        raise
    except (EncodingError, ParseError, TypeError, ValueError) as e:
        raise ConstructorEncodingError(f"Cannot encode constructor arguments: {e}") from e

    return encode_hex(encoded)
