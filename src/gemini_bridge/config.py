"""Configuration shared by the adapter factory and the CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Mapping

from .core.adapters.demo import RESPONSE_DELAY, WORD_DELAY

Mode = Literal["live", "demo"]

MODES: tuple[Mode, ...] = ("live", "demo")
DEFAULT_CREDS_PATH = Path("~/.gemini/oauth_creds.json")

ENV_MODE = "GEMINI_BRIDGE_MODE"
ENV_CREDS_PATH = "GEMINI_OAUTH_CREDS_FILE_PATH"
ENV_PROJECT_ID = "GOOGLE_CLOUD_PROJECT"
ENV_DEMO_DELAY = "GEMINI_BRIDGE_DEMO_DELAY"
ENV_DEMO_WORD_DELAY = "GEMINI_BRIDGE_DEMO_WORD_DELAY"
ENV_DEMO_SEED = "GEMINI_BRIDGE_DEMO_SEED"


def default_creds_path() -> Path:
    """Per-user location of the Gemini CLI OAuth credentials."""

    return DEFAULT_CREDS_PATH.expanduser()


@dataclass(slots=True)
class BridgeConfig:
    """Settings selecting and tuning an adapter.

    Attributes
    ----------
    mode:
        ``"live"`` talks to Gemini through a backend client, ``"demo"`` uses
        the local stand-in.
    oauth_creds_path:
        Gemini OAuth credential file handed to the backend client.
    project_id:
        Optional Google Cloud project forwarded to the backend client.
    demo_response_delay:
        Simulated latency of a one-shot Demo call, in seconds.
    demo_word_delay:
        Simulated latency before each streamed Demo word, in seconds.
    demo_seed:
        Seed for the Demo template choice. ``None`` keeps it random.
    """

    mode: Mode = "live"
    oauth_creds_path: Path = DEFAULT_CREDS_PATH
    project_id: str | None = None
    demo_response_delay: float = RESPONSE_DELAY
    demo_word_delay: float = WORD_DELAY
    demo_seed: int | None = None

    def __post_init__(self) -> None:
        if self.mode not in MODES:
            msg = f"mode must be one of {', '.join(MODES)}, got {self.mode!r}"
            raise ValueError(msg)
        if self.demo_response_delay < 0 or self.demo_word_delay < 0:
            msg = "demo delays cannot be negative"
            raise ValueError(msg)
        self.oauth_creds_path = Path(self.oauth_creds_path).expanduser()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "BridgeConfig":
        """Build a :class:`BridgeConfig` from environment variables.

        Unset or empty variables fall back to the dataclass defaults; the
        credential path defaults to ``~/.gemini/oauth_creds.json``.
        """

        env = os.environ if environ is None else environ

        mode = (env.get(ENV_MODE) or "live").strip().lower()
        creds = env.get(ENV_CREDS_PATH) or ""
        project_id = (env.get(ENV_PROJECT_ID) or "").strip() or None

        return cls(
            mode=mode,  # type: ignore[arg-type]
            oauth_creds_path=Path(creds) if creds.strip() else default_creds_path(),
            project_id=project_id,
            demo_response_delay=_parse_float(env, ENV_DEMO_DELAY, RESPONSE_DELAY),
            demo_word_delay=_parse_float(env, ENV_DEMO_WORD_DELAY, WORD_DELAY),
            demo_seed=_parse_int(env, ENV_DEMO_SEED),
        )

    def context(self) -> Mapping[str, str]:
        """Return a printable summary of the configuration."""

        return {
            "mode": self.mode,
            "oauth_creds_path": str(self.oauth_creds_path),
            "project_id": self.project_id or "",
            "demo_response_delay": str(self.demo_response_delay),
            "demo_word_delay": str(self.demo_word_delay),
            "demo_seed": "" if self.demo_seed is None else str(self.demo_seed),
        }


def _parse_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = (env.get(key) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        msg = f"{key} must be a number, got {raw!r}"
        raise ValueError(msg) from exc


def _parse_int(env: Mapping[str, str], key: str) -> int | None:
    raw = (env.get(key) or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        msg = f"{key} must be an integer, got {raw!r}"
        raise ValueError(msg) from exc


__all__ = ["BridgeConfig", "DEFAULT_CREDS_PATH", "MODES", "default_creds_path"]
