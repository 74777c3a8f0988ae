"""Provider registry keyed by `ProviderKind`."""

from typing import Optional

from ..config import AppSettings, settings as default_settings
from .base import BaseProviderAdapter
from .claude_proxy import ProxyAWSClaudeAdapter, ProxyClaudeAdapter
from .horde import HordeAdapter
from .kobold import KoboldAdapter
from .openai_chat import OpenAIChatAdapter, ProxyOpenAIAdapter
from .palm import PaLMAdapter
from .textgen import AphroditeAdapter, OobaAdapter
from .types import ProviderKind


def build_registry(app_settings: Optional[AppSettings] = None) -> dict[ProviderKind, BaseProviderAdapter]:
    """Create one adapter instance per provider kind."""
    cfg = app_settings or default_settings
    return {
        ProviderKind.KOBOLD: KoboldAdapter(),
        ProviderKind.OOBA: OobaAdapter(),
        ProviderKind.APHRODITE: AphroditeAdapter(),
        ProviderKind.OAI: OpenAIChatAdapter(),
        ProviderKind.PALM: PaLMAdapter(),
        ProviderKind.HORDE: HordeAdapter(
            api_url=cfg.horde_api_url,
            poll_interval=cfg.horde_poll_interval,
            max_polls=cfg.horde_max_polls,
            deadline_seconds=cfg.horde_deadline_seconds,
        ),
        ProviderKind.PROXY_OAI: ProxyOpenAIAdapter(),
        ProviderKind.PROXY_CLAUDE: ProxyClaudeAdapter(),
        ProviderKind.PROXY_AWS_CLAUDE: ProxyAWSClaudeAdapter(),
    }
