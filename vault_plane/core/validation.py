import logging
import re
from typing import Any, Iterable, List

from vault_plane.core.exceptions import InvalidInputException

logger = logging.getLogger(__name__)

UUID_PATTERN = re.compile(
    r"^[a-f0-9]{8}-[a-f0-9]{4}-[0-5][a-f0-9]{3}-[089ab][a-f0-9]{3}-[a-f0-9]{12}$",
    re.IGNORECASE,
)


def is_uuid(value: Any) -> bool:
    return isinstance(value, str) and UUID_PATTERN.match(value) is not None


def ensure_uuid(value: Any, message: str) -> str:
    """
    Return value unchanged if it is a well formed UUID string.
    Raises InvalidInputException otherwise.
    """
    if not is_uuid(value):
        logger.warning(f"Rejected identifier {value!r}: {message}")
        raise InvalidInputException(message)
    return value


def ensure_uuid_list(values: Iterable[Any], empty_message: str, item_message: str) -> List[str]:
    values = list(values or [])
    if not values:
        logger.warning(f"Rejected empty identifier list: {empty_message}")
        raise InvalidInputException(empty_message)
    for value in values:
        ensure_uuid(value, item_message)
    return values
