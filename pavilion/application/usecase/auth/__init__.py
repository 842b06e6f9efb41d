"""Authentication use cases."""

from .get_current_identity import GetCurrentIdentityUseCase
from .login import LoginUseCase

__all__ = ["LoginUseCase", "GetCurrentIdentityUseCase"]
