def validate_serial(value: int, param: str, min: int = 0) -> None:
    """check that serial value (e.g. 'counter') is an integer >= <min>"""
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{param} must be an integer, not {type(value).__name__}"
        raise TypeError(msg)
    if value < min:
        msg = f"{param} must be >= {min}"
        raise ValueError(msg)
