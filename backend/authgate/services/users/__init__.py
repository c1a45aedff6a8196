from .service import UsersService

__all__ = ["UsersService"]
