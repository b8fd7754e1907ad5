"""User use cases."""

from .add_social_account import (
    AddSocialAccountRequest,
    AddSocialAccountResponse,
    AddSocialAccountUseCase,
)
from .delete_user import DeleteUserRequest, DeleteUserUseCase
from .get_user import GetUserRequest, GetUserResponse, GetUserUseCase
from .register import RegisterRequest, RegisterResponse, RegisterUseCase
from .remove_social_account import (
    RemoveSocialAccountRequest,
    RemoveSocialAccountResponse,
    RemoveSocialAccountUseCase,
)
from .verify_otp import VerifyOTPRequest, VerifyOTPResponse, VerifyOTPUseCase

__all__ = [
    "AddSocialAccountRequest",
    "AddSocialAccountResponse",
    "AddSocialAccountUseCase",
    "DeleteUserRequest",
    "DeleteUserUseCase",
    "GetUserRequest",
    "GetUserResponse",
    "GetUserUseCase",
    "RegisterRequest",
    "RegisterResponse",
    "RegisterUseCase",
    "RemoveSocialAccountRequest",
    "RemoveSocialAccountResponse",
    "RemoveSocialAccountUseCase",
    "VerifyOTPRequest",
    "VerifyOTPResponse",
    "VerifyOTPUseCase",
]
