"""Textual App subclass for the fullscreen Runnel chat.

Gets the provider and render settings from the CLI's ConfigManager.
"""

from typing import Optional

from textual.app import App
from textual.binding import Binding

from .config import ConfigManager
from .providers.base import BaseProvider
from .session import SessionCoordinator
from .state import ChatState
from .theme import PALETTE


class RunnelTUI(App):
    """The fullscreen Textual TUI for Runnel."""

    CSS = f"""
    Screen {{
        background: {PALETTE.bg};
    }}
    """

    BINDINGS = [
        Binding("ctrl+c", "exit_app", "Exit", show=False, priority=True),
    ]

    def __init__(
        self,
        provider: BaseProvider,
        provider_name: str,
        config: Optional[ConfigManager] = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.config = config or ConfigManager()
        self.provider = provider
        self.provider_name = provider_name
        self.state = ChatState(SessionCoordinator(
            thresholds=self.config.get_thresholds(),
            languages=self.config.get_languages(),
        ))

    def on_mount(self) -> None:
        self.state.bind(self)

        from .screens.main import MainScreen
        self.push_screen(MainScreen(
            provider=self.provider,
            provider_name=self.provider_name,
            system_prompt=self.config.get_system_prompt(),
            tolerance=self.config.get_follow_tolerance(),
        ))

    def action_exit_app(self) -> None:
        """Delegate to the current screen or exit directly."""
        screen = self.screen
        if hasattr(screen, "action_exit_app"):
            screen.action_exit_app()
        else:
            self.exit()
