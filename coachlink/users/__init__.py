from coachlink.users.current import CurrentUser, UserRole, get_current_user

__all__ = ["CurrentUser", "UserRole", "get_current_user"]
