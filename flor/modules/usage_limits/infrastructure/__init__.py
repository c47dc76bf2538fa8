from .models import UsageLimitModel
from .usage_repository_impl import UsageLimitRepositoryImpl

__all__ = ["UsageLimitModel", "UsageLimitRepositoryImpl"]
