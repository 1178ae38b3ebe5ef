"""JSON Schema management."""

from functools import cache
from json import dumps

from pydantic.json_schema import GenerateJsonSchema

from loco_agent.distribution import LoadPlan


@cache
def make_schema(indent: int | str | None = 4) -> str:
    """Generate the JSON Schema for load plan documents.

    Args:
        indent: Indentation level used for JSON formatting.

    Returns:
        Serialized JSON Schema string.
    """
    schema = {
        **LoadPlan.model_json_schema(
            schema_generator=GenerateJsonSchema,
            union_format='primitive_type_array',
        ),
        'title': 'loco-agent',
        'description': 'JSON Schema for loco-agent load plans',
        '$schema': GenerateJsonSchema.schema_dialect,
    }

    return dumps(
        schema,
        ensure_ascii=False,
        sort_keys=True,
        indent=indent,
    )
