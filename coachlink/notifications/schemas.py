from pydantic import BaseModel, ConfigDict, Field


class Notification(BaseModel):
    """Notification record. The server identifies notifications by `_id`."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., alias="_id")
    title: str = ""
    message: str = ""
    date: str = ""
    read: bool = False


class NotificationPage(BaseModel):
    """One page of notifications."""

    notifications: list[Notification] = Field(default_factory=list)
    total_pages: int = 0
    current_page: int = 1
    total: int = 0

    @classmethod
    def empty(cls, page: int = 1) -> "NotificationPage":
        return cls(current_page=page)
