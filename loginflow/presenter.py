"""Navigation interface implemented by the host UI."""
from abc import ABC, abstractmethod


class NavigationPresenter(ABC):
    """Presents the next screen or renders an error string.

    Calls are fire-and-forget and always arrive on the UI context.
    """

    @abstractmethod
    def show_error(self, message: str) -> None:
        pass

    @abstractmethod
    def go_to_home_screen(self) -> None:
        pass

    @abstractmethod
    def go_to_sign_up_screen(self) -> None:
        pass
