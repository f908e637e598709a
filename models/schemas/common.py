from marshmallow import Schema, ValidationError, EXCLUDE, pre_load

MAX_STRING = 255


def not_blank(value: str) -> None:
    if value is None or not value.strip():
        raise ValidationError("Field may not be blank.")


def unique_ids(values) -> list:
    """Drop repeated ids, keeping first-seen order."""
    seen = set()
    out = []
    for v in values:
        if v not in seen:
            seen.add(v)
            out.append(v)
    return out


class InputSchema(Schema):
    """
    Base for request payloads.
    - unknown keys are ignored (forms post extra fields)
    - strings are trimmed and empty strings become None before validation
    """

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def _trim_strings(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        cleaned = {}
        for key, value in data.items():
            if isinstance(value, str):
                value = value.strip() or None
            cleaned[key] = value
        return cleaned
