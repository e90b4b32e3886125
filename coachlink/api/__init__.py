from coachlink.api.client import ApiClient

__all__ = ["ApiClient"]
