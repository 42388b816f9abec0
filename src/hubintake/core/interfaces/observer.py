"""Observer interface for successful intake mutations."""

from abc import ABC, abstractmethod

from hubintake.core.domain import Hub, Item, Session


class IntakeObserver(ABC):
    """Receives a callback after every successful mutation.

    Implementations: PrometheusIntakeObserver, NullIntakeObserver

    Callbacks run inline on the request path and must not raise.
    """

    @abstractmethod
    def hub_created(self, hub: Hub) -> None: ...

    @abstractmethod
    def session_opened(self, session: Session) -> None: ...

    @abstractmethod
    def session_closed(self, session: Session) -> None: ...

    @abstractmethod
    def item_added(self, hub_id: str, item: Item) -> None: ...

    @abstractmethod
    def item_removed(self, hub_id: str, item: Item) -> None: ...


class NullIntakeObserver(IntakeObserver):
    """Observer that ignores every notification."""

    def hub_created(self, hub: Hub) -> None:
        pass

    def session_opened(self, session: Session) -> None:
        pass

    def session_closed(self, session: Session) -> None:
        pass

    def item_added(self, hub_id: str, item: Item) -> None:
        pass

    def item_removed(self, hub_id: str, item: Item) -> None:
        pass
