"""
General helper functions
"""
import uuid


def new_id() -> str:
    """Opaque string identifier for new records"""
    return str(uuid.uuid4())
