from .exceptions import BadRequest


def optional_text(data, field, label, max_length=None):
    """
    Stripped string value of ``data[field]``, or None when absent or blank.
    Non-string values and over-long text are refused with a 400.
    """
    value = data.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise BadRequest(f"{label} must be a string")
    value = value.strip()
    if max_length is not None and len(value) > max_length:
        raise BadRequest(f"{label} must be at most {max_length} characters")
    return value or None
