import json
from typing import List

from vault_plane.db.query import Row


def decode_resource_type_definition(rows: List[Row]) -> List[Row]:
    """Decode the JSON definition of the resource type attached to each row."""
    for row in rows:
        resource_type = row.get("resource_type")
        if resource_type and isinstance(resource_type.get("definition"), str):
            resource_type["definition"] = json.loads(resource_type["definition"])
    return rows


def strip_resource_type_id(rows: List[Row]) -> List[Row]:
    for row in rows:
        row.pop("resource_type_id", None)
    return rows
