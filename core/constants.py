"""
Application-wide constants.
Centralized constants following DRY principle.
"""

# User Roles
class UserRole:
    ADMIN = 'ADMIN'
    STUDENT = 'STUDENT'

    CHOICES = [
        (ADMIN, 'Administrator'),
        (STUDENT, 'Student'),
    ]


# Why an application stopped being active
class DeactivationReason:
    ACCEPTED = 'ACCEPTED'
    VOIDED = 'VOIDED'

    CHOICES = [
        (ACCEPTED, 'Accepted'),
        (VOIDED, 'Voided by another approval'),
    ]


# Payment Status
class PaymentStatus:
    PENDING = 'pending'
    PAID = 'paid'
    OVERDUE = 'overdue'

    CHOICES = [
        (PENDING, 'Pending'),
        (PAID, 'Paid'),
        (OVERDUE, 'Overdue'),
    ]

    VALUES = {PENDING, PAID, OVERDUE}


# Room amenities
class Amenity:
    AIR_CONDITIONING = 'air_conditioning'
    TERRACE = 'terrace'
    PRIVATE_BATHROOM = 'private_bathroom'
    WARDROBE = 'wardrobe'
    WINDOW = 'window'
    FRESH_PAINT = 'fresh_paint'

    CHOICES = [
        (AIR_CONDITIONING, 'Air conditioning'),
        (TERRACE, 'Terrace'),
        (PRIVATE_BATHROOM, 'Private bathroom'),
        (WARDROBE, 'Wardrobe'),
        (WINDOW, 'Window'),
        (FRESH_PAINT, 'Freshly painted walls'),
    ]

    VALUES = {value for value, _ in CHOICES}


# Grading scale
class Grade:
    MIN = 6
    MAX = 10


# Default Limits
class DefaultLimits:
    TOP_STUDENTS_LIMIT = 10
    PAYMENT_DEFAULT_AMOUNT = '100.00'
    PAYMENT_DEFAULT_DUE_DAY = 15


# Pagination
class Pagination:
    MAX_PAGE_SIZE = 100
