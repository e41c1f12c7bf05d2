"""
Custom exceptions for the application.
Following domain-driven design principles with specific exception types.

Every exception carries a stable ``code`` that the API layer returns to
callers, so clients can branch on it without parsing messages.
"""


class BaseApplicationException(Exception):
    """Base exception for all application-specific exceptions"""
    default_message = "An application error occurred"
    default_code = "APPLICATION_ERROR"

    def __init__(self, message=None, code=None, details=None):
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(BaseApplicationException):
    """Raised when validation fails"""
    default_message = "Validation failed"
    default_code = "VALIDATION_ERROR"


class NotFoundError(BaseApplicationException):
    """Raised when a resource is not found"""
    default_message = "Resource not found"
    default_code = "NOT_FOUND"

    def __init__(self, resource_type=None, resource_id=None, **kwargs):
        self.resource_type = resource_type
        self.resource_id = resource_id
        if 'message' not in kwargs and resource_type:
            kwargs['message'] = f"{resource_type} not found"
        super().__init__(**kwargs)


class PermissionDeniedError(BaseApplicationException):
    """Raised when user doesn't have permission (ownership violation)"""
    default_message = "Permission denied"
    default_code = "FORBIDDEN"


class BusinessLogicError(BaseApplicationException):
    """Raised when business rule is violated"""
    default_message = "Business rule violation"
    default_code = "BUSINESS_RULE_VIOLATION"


# ============================================================================
# UNIQUENESS VIOLATIONS (check-then-insert)
# ============================================================================

class DuplicateActiveError(BusinessLogicError):
    """An active application already exists for this user and room"""
    default_message = "User already has an active application for this room"
    default_code = "DUPLICATE_ACTIVE"


class AlreadyAcceptedError(BusinessLogicError):
    """The application already has an occupancy record"""
    default_message = "Application has already been accepted"
    default_code = "ALREADY_ACCEPTED"


class DuplicatePeriodError(BusinessLogicError):
    """A payment already exists for this application and period"""
    default_message = "Payment already exists for this period"
    default_code = "DUPLICATE_PERIOD"


# ============================================================================
# OCCUPANCY INVARIANTS
# ============================================================================

class UserAlreadyOccupyingError(BusinessLogicError):
    """The applicant already holds an occupancy record"""
    default_message = "User already has an accepted application"
    default_code = "USER_ALREADY_OCCUPYING"


class ApplicationInactiveError(BusinessLogicError):
    """Operation attempted on an application that is no longer active"""
    default_message = "Application is not active"
    default_code = "APPLICATION_INACTIVE"


class ApplicationHasPaymentsError(BusinessLogicError):
    """Deleting the application would erase its billing history"""
    default_message = "Application has payments and cannot be deleted"
    default_code = "APPLICATION_HAS_PAYMENTS"


class NoActiveRoomError(BusinessLogicError):
    """Eviction or checkout requested for a user without a room"""
    default_message = "User does not have an active room assignment"
    default_code = "NO_ACTIVE_ROOM"


class RoomNotFoundError(NotFoundError):
    """Room does not resolve against the room registry"""
    default_message = "Room not found"
    default_code = "ROOM_NOT_FOUND"


class RoomFullError(BusinessLogicError):
    """Room occupant count has reached its capacity"""
    default_message = "Room has no free beds"
    default_code = "ROOM_FULL"


# ============================================================================
# CROSS-SERVICE
# ============================================================================

class RoomStatusUnavailableError(BaseApplicationException):
    """Room-status precondition could not be verified (fail-closed)"""
    default_message = "Failed to verify room status with dormitory service"
    default_code = "ROOM_STATUS_UNAVAILABLE"
