from .controller import UsersController

__all__ = ["UsersController"]
