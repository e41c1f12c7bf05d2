"""
HTTP client for the dormitory room-status endpoint.

The identity side asks the dormitory service whether a user still holds a
room before deleting the account. One synchronous call, bounded by
ROOM_STATUS_TIMEOUT, never retried.
"""
import logging

import requests
from django.conf import settings

from core.exceptions import RoomStatusUnavailableError

logger = logging.getLogger(__name__)


class RoomStatusClient:
    """Calls GET {base_url}/api/internal/users/{user_id}/room-status"""

    def __init__(self, base_url: str = None, timeout: float = None):
        self.base_url = (base_url or settings.ROOM_STATUS_SERVICE_URL).rstrip('/')
        self.timeout = timeout if timeout is not None else settings.ROOM_STATUS_TIMEOUT

    def status_url(self, user_id) -> str:
        return f"{self.base_url}/api/internal/users/{user_id}/room-status"

    def has_active_room(self, user_id) -> bool:
        """
        Ask the dormitory service whether the user holds a room.

        Raises:
            RoomStatusUnavailableError: on transport failure, a non-200
                response or a body without a boolean ``has_active_room``
        """
        url = self.status_url(user_id)

        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Room status request failed for user {user_id}: {e}")
            raise RoomStatusUnavailableError(details={'user_id': user_id, 'reason': str(e)}) from e

        if response.status_code != 200:
            logger.error(f"Room status returned HTTP {response.status_code} for user {user_id}")
            raise RoomStatusUnavailableError(
                details={'user_id': user_id, 'status_code': response.status_code}
            )

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"Room status body is not JSON for user {user_id}")
            raise RoomStatusUnavailableError(details={'user_id': user_id, 'reason': 'invalid body'}) from e

        has_room = payload.get('has_active_room') if isinstance(payload, dict) else None
        if not isinstance(has_room, bool):
            logger.error(f"Room status body missing has_active_room for user {user_id}")
            raise RoomStatusUnavailableError(details={'user_id': user_id, 'reason': 'invalid body'})

        return has_room
