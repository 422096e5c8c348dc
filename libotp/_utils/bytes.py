from typing import Union

StrOrBytes = Union[str, bytes]


def to_text(value: StrOrBytes, param: str = "value") -> str:
    """
    coerce ascii bytes or str to str.
    other types are rejected, naming the offending parameter.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return value.decode("ascii")
    msg = f"{param} must be str or bytes, not {type(value).__name__}"
    raise TypeError(msg)
