"""
Keyed merge for locally cached record lists
"""
from typing import Any, Dict, List, Mapping, Sequence


def merge_by_id(
    collection: Sequence[Mapping[str, Any]],
    id: str,
    patch: Mapping[str, Any],
    key: str = "id",
) -> List[Dict[str, Any]]:
    """
    Replace one record of a cached collection with itself merged with a patch.

    The input collection is left untouched; a new list is returned with the
    same order. Records whose key does not match are copied as-is, so an
    unknown id yields an equal copy of the collection.

    Args:
        collection: Records as mappings (e.g. serialized leads)
        id: Identifier of the record to update
        patch: Partial fields to overlay onto the matching record
        key: Field holding the identifier

    Returns:
        New list of records
    """
    merged = []
    for item in collection:
        record = dict(item)
        if record.get(key) == id:
            record.update(patch)
        merged.append(record)
    return merged
