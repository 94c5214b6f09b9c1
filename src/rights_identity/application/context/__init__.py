from rights_identity.application.context.request_context import (
    AuthenticatedSession,
    RequestContext,
)

__all__ = ["AuthenticatedSession", "RequestContext"]
