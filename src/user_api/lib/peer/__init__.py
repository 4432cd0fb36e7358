"""Peer service client: fetches the mod/POC identifier for a user.

Public API:
    - fetch_mod_poc_id: GET the identifier from a resolved peer instance
    - PeerServiceError: Transport or non-2xx error carrying the peer's payload
"""

from user_api.lib.peer.client import PeerServiceError, fetch_mod_poc_id

__all__ = ["PeerServiceError", "fetch_mod_poc_id"]
