"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Input is malformed or a required field is missing"""

    reason = "validation"


class EntityNotFoundError(ValidationError):
    """Referenced record does not exist in the document"""

    reason = "not_found"

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} {entity_id!r} not found")
        self.entity = entity
        self.entity_id = entity_id


class BusinessRuleViolation(DomainException):
    """Input is well-formed but breaks a ledger rule"""

    reason = "business_rule"


class InsufficientStockError(BusinessRuleViolation):
    """Requested quantity exceeds the item's stock on hand"""

    reason = "insufficient_stock"


class CreditLimitExceededError(BusinessRuleViolation):
    """Credit sale would push the customer past their credit limit"""

    reason = "credit_limit"


class InstallmentExceedsDueError(BusinessRuleViolation):
    """Installment is larger than what is still owed on the bill"""

    reason = "exceeds_due"


class DuplicateCodeError(BusinessRuleViolation):
    """Another inventory item already uses this code"""

    reason = "duplicate_code"


class DeletionRefusedError(BusinessRuleViolation):
    """Record is protected from deletion"""

    reason = "deletion_refused"


class PersistenceFailure(DomainException):
    """Document could not be read from or written to storage"""

    def __init__(self, message: str, unsaved: bool = False):
        super().__init__(message)
        self.unsaved = unsaved
