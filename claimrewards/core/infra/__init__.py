"""Application lifecycle orchestration."""

from claimrewards.core.infra.application_context import ApplicationContext

__all__ = ["ApplicationContext"]
