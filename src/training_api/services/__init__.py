"""HTTP-independent operations shared by the API, the UI and the scheduler."""

from training_api.services.context import Caller, ServiceContext, require_caller

__all__ = ["Caller", "ServiceContext", "require_caller"]
