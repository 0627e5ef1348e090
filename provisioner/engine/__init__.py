from .session import CommitResult, ProvisioningSession

__all__ = ["CommitResult", "ProvisioningSession"]
