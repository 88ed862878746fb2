"""
Custom Application Exceptions
"""


class StockpickException(Exception):
    """Base exception for the stockpick application"""
    pass


class ValidationError(StockpickException):
    """Raised when data validation fails"""
    pass


class InvalidDemandError(ValidationError):
    """Raised when a picking call is made with malformed demand parameters"""
    pass


class BusinessLogicError(StockpickException):
    """Raised when business rules are violated"""
    pass


class PlanExpiredError(BusinessLogicError):
    """Raised when a picking plan is too old to be validated against live stock"""
    pass
