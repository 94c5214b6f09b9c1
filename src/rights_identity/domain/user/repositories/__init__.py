from rights_identity.domain.user.repositories.user_store import UserStore

__all__ = ["UserStore"]
