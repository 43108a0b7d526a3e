from enum import Enum


class Term(str, Enum):
    FIRST = "1st"
    SECOND = "2nd"
    THIRD = "3rd"


class FeeStatus(str, Enum):
    PAID = "Paid"
    PENDING = "Pending"
    PARTIAL = "Partial"


class Grade(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class UserRole(str, Enum):
    ADMIN = "admin"
    STUDENT = "student"


class RecordKind(str, Enum):
    """Record types kept both under the student and in a global collection."""

    FEE = "fee"
    RESULT = "result"
