# storefront/core/validation.py
from pydantic import ValidationError

FieldErrors = dict[str, str]


def field_errors(exc: ValidationError) -> FieldErrors:
    """
    Flatten a pydantic ValidationError into {field: message}.

    Messages raised by our own validators are returned as written
    (without pydantic's "Value error, " prefix). Only the first error per
    field is kept.
    """
    errors: FieldErrors = {}
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "__root__"
        if field in errors:
            continue
        ctx_error = err.get("ctx", {}).get("error")
        if err["type"] == "value_error" and ctx_error is not None:
            errors[field] = str(ctx_error)
        else:
            errors[field] = err["msg"]
    return errors
