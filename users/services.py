"""
User service - identity-side account lifecycle.
"""
from django.db import transaction

from core.exceptions import BusinessLogicError
from core.services import BaseService
from .room_status_client import RoomStatusClient


class AccountDeletionService(BaseService):
    """
    Deletes a user account only after the dormitory service confirms the
    user holds no room. Any failure to get that confirmation aborts the
    deletion.
    """

    def __init__(self, room_status_client: RoomStatusClient = None):
        super().__init__()
        self.room_status_client = room_status_client or RoomStatusClient()

    def delete_account(self, user) -> None:
        """
        Delete ``user`` after checking the room-status precondition.

        Raises:
            RoomStatusUnavailableError: the room status could not be verified
            BusinessLogicError: the user still holds a room
        """
        # The check and the delete are not atomic across services; an
        # approval landing in between is accepted and left to reconciliation.
        if self.room_status_client.has_active_room(user.id):
            self.log_warning("Account deletion refused, user holds a room", user_id=user.id)
            raise BusinessLogicError(
                message="Cannot delete account while the user has an active room",
                code="USER_HAS_ACTIVE_ROOM",
                details={'user_id': user.id}
            )

        with transaction.atomic():
            user_id = user.id
            user.delete()

        self.log_info("Account deleted", user_id=user_id)
