import uuid


def new_id() -> str:
    """Primary key for rows the application creates itself.

    32 hex characters, so it can never equal a 28-character Firebase uid.
    """
    return uuid.uuid4().hex
