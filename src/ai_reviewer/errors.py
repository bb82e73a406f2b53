class ReviewError(Exception):
    """Ошибка, прерывающая весь запуск ревью."""


class DiffParseError(ReviewError):
    """Не удалось разобрать diff."""


class EventError(ReviewError):
    """По событию GitHub не удалось найти PR."""


class UnsupportedEventError(EventError):
    def __init__(self, event_name: str | None, action: str | None = None):
        self.event_name = event_name
        self.action = action
        super().__init__(f"Unsupported event: eventName={event_name}, actionType={action}")
