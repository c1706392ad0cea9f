from fastapi import Request, status
from fastapi.responses import JSONResponse

from social_auth.core.config import request_logger
from social_auth.core.exceptions.types import (
    AppException,
    ConfigurationException,
    OAuthException,
    UserProvisioningException,
)


async def general_exception_handler(request: Request, exc: AppException):
    """
    Handles general exceptions by returning a JSON response with the error message.

    Args:
        request: The request object.
        exc (AppException): The exception instance.

    Returns:
        JSONResponse: A response containing the error message and status code.
    """
    request_logger.error(f"GeneralException: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": f"An unexpected error occurred.\n{str(exc)}"},
    )


async def configuration_exception_handler(
    request: Request, exc: ConfigurationException
):
    """
    Handles configuration exceptions by returning a JSON response.

    Credentials are never echoed back; only the message is returned.

    Args:
        request: The request object.
        exc (ConfigurationException): The configuration exception instance.

    Returns:
        JSONResponse: A response containing the error message and status code 500.
    """
    request_logger.error(f"ConfigurationException: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc)},
    )


async def oauth_exception_handler(request: Request, exc: OAuthException):
    """
    Handles OAuth exceptions by returning a JSON response.

    Args:
        request: The request object.
        exc (OAuthException): The OAuth exception instance.

    Returns:
        JSONResponse: A response containing the error message and status code 400.
    """
    request_logger.warning(f"OAuthException: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc)},
    )


async def user_provisioning_exception_handler(
    request: Request, exc: UserProvisioningException
):
    request_logger.warning(f"UserProvisioningException: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc)},
    )


exception_schema = {
    status.HTTP_500_INTERNAL_SERVER_ERROR: {
        "description": "Internal Server Error",
        "content": {
            "application/json": {
                "example": {"detail": "Social login is not configured."},
            }
        },
    },
}


__all__ = [
    "general_exception_handler",
    "configuration_exception_handler",
    "oauth_exception_handler",
    "user_provisioning_exception_handler",
    "exception_schema",
]
