"""Browser-held client id for keying the durable cart.

Streamlit runs the app on the server, so the cart file is shared by every
visitor. Each browser carries its own id in the `cid` query parameter and the
cart is stored under a key derived from it. Reloading or bookmarking the page
keeps the same cart; a new visitor gets a new id.
"""

from __future__ import annotations

import re
import uuid
from typing import Any, MutableMapping

from medquote.utils.logger import get_logger

logger = get_logger()

CLIENT_ID_PARAM = "cid"

_CLIENT_ID_RE = re.compile(r"^[A-Za-z0-9_-]{8,64}$")


def is_valid_client_id(value: Any) -> bool:
    return isinstance(value, str) and bool(_CLIENT_ID_RE.match(value))


def resolve_client_id(query_params: MutableMapping[str, Any], new_id: str | None = None) -> str:
    """
    Return the client id from the query string, minting and storing one when
    it is missing or malformed.

    Args:
        query_params: `st.query_params` or any mutable mapping with the same shape.
        new_id: Id to use when a new one is needed; a random hex id by default.
    """
    existing = query_params.get(CLIENT_ID_PARAM)
    if isinstance(existing, list):
        existing = existing[-1] if existing else None
    if is_valid_client_id(existing):
        return existing
    if existing:
        logger.warning("Ignoring malformed client id in query string")
    client_id = new_id or uuid.uuid4().hex
    query_params[CLIENT_ID_PARAM] = client_id
    logger.info("New quote cart client: %s", client_id)
    return client_id
