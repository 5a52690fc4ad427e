"""JSON schema validation helpers for backend responses."""
import jsonschema


HOSPITALS_SCHEMA: dict = {
    "type": "object",
    "required": ["hospitals"],
    "properties": {
        "hospitals": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id"],
            },
        },
    },
}

YEARS_SCHEMA: dict = {
    "type": "object",
    "required": ["years"],
    "properties": {
        "years": {"type": "array", "items": {"type": "integer"}},
    },
}


def validate(data, schema: dict) -> list[str]:
    """Return list of validation error messages, empty if valid."""
    try:
        jsonschema.validate(instance=data, schema=schema)
        return []
    except jsonschema.ValidationError as e:
        return [e.message]
    except jsonschema.SchemaError as e:
        return [f"Schema error: {e.message}"]
