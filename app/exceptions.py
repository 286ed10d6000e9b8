from fastapi import Request, HTTPException, status
from fastapi.responses import JSONResponse
from typing import Any, Callable, Dict, Optional


class APIException(Exception):
    """ Base class for all exceptions in the storefront catalog API. """

    def __init__(self, message: Optional[str] = None):
        self.message = message
        super().__init__(message)


class InvalidTokenException(APIException):
    """ Exception is thrown when user provided an expired or invalid token. """
    pass


class PermissionRequiredException(APIException):
    """ Exception is thrown when a user does not have permission to peform the current action or access an endpoint/resource. """
    pass


class UserNotFoundException(APIException):
    """ Exception is thrown when a user is not found. """
    pass


class ProductValidationException(APIException):
    """ Exception is raised when a product form fails its field checks. Carries one message per field. """

    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        super().__init__("Product form is invalid")


class ResolutionException(APIException):
    """ Exception is raised when a selected category or subcategory name has no matching record. """
    pass


class StoreUnavailableException(APIException):
    """ Exception is raised when the catalog store cannot be reached. """
    pass


class StoreWriteException(APIException):
    """ Exception is raised when a catalog write fails. The surrounding transaction has been rolled back. """
    pass


class NotFoundException(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class BadRequestException(HTTPException):
    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ConflictException(HTTPException):
    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


def create_exception_handler(status_code: int, detail: Any = None) -> Callable[[Request, Exception], JSONResponse]:
    """
    Build a handler returning ``{"error": ...}``. When ``detail`` is omitted the
    exception's own message is reported.
    """
    async def exception_handler(request: Request, exception: APIException):
        return JSONResponse(
            content={"error": detail if detail is not None else exception.message},
            status_code=status_code
        )

    return exception_handler


async def product_validation_exception_handler(request: Request, exception: ProductValidationException):
    return JSONResponse(
        content={"error": exception.message, "errors": exception.errors},
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY
    )
