import os
from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

def _env_flag(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    return default if v is None else v.lower() in ("1", "true", "yes", "on")

class Settings(BaseModel):
    token: str = Field(default_factory=lambda: os.getenv("DISCORD_TOKEN", ""))
    guild_id: int = int(os.getenv("GUILD_ID", "0") or 0)
    sync_scope: str = os.getenv("SYNC_SCOPE", "both")
    data_dir: str = os.getenv("DATA_DIR", "./data")

    # Canal "natif" des alertes (0 = pas de canal → plateforme non supportée)
    call_channel_id: int = int(os.getenv("CALL_CHANNEL_ID", "0") or 0)

    # Deux cadences indépendantes: alertes (rapide) / affichage (lent)
    call_tick_seconds: float = Field(default=float(os.getenv("CALL_TICK_SECONDS", "5")), gt=0)
    countdown_tick_seconds: float = Field(default=float(os.getenv("COUNTDOWN_TICK_SECONDS", "60")), gt=0)
    call_tolerance_seconds: float = Field(default=float(os.getenv("CALL_TOLERANCE_SECONDS", "60")), gt=0)
    banner_seconds: float = Field(default=float(os.getenv("BANNER_SECONDS", "5")), gt=0)

    persist_notified: bool = _env_flag("PERSIST_NOTIFIED", False)
    audio_enabled: bool = _env_flag("AUDIO_ENABLED", True)

settings = Settings()
