"""Runtime settings from environment variables, with defaults."""

import logging
import os
from dataclasses import dataclass

log = logging.getLogger(__name__)

PORT_ENV = "MIDI_JUKEBOX_PORT"
VOLUME_ENV = "MIDI_JUKEBOX_VOLUME"

# Start at half volume
DEFAULT_VOLUME = 50


@dataclass(frozen=True)
class JukeboxConfig:
    port_name: str | None = None  # None: mido's default output
    volume: int = DEFAULT_VOLUME


def _parse_volume(raw: str | None) -> int:
    if raw is None or not raw.strip():
        return DEFAULT_VOLUME
    try:
        value = int(raw)
    except ValueError:
        log.warning("Ignoring %s=%r: not an integer", VOLUME_ENV, raw)
        return DEFAULT_VOLUME
    return max(0, min(100, value))


def load_config(environ=None) -> JukeboxConfig:
    """Build the config from `environ` (defaults to os.environ)."""
    env = os.environ if environ is None else environ
    port_name = (env.get(PORT_ENV) or "").strip() or None
    return JukeboxConfig(port_name=port_name, volume=_parse_volume(env.get(VOLUME_ENV)))
