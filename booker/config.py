from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

env_path = Path(__file__).parent / ".env"


class LoginDetails(BaseSettings):
    model_config = SettingsConfigDict(env_file=env_path, extra="ignore")

    animalagos_email: str = Field(alias="ANIMALAGOS_EMAIL")
    animalagos_password: str = Field(alias="ANIMALAGOS_PASSWORD")


class ApplicantDetails(BaseSettings):
    """Fixed identifying fields sent with every registration form."""

    model_config = SettingsConfigDict(
        env_file=env_path, env_prefix="ANIMALAGOS_", extra="ignore"
    )

    commercial_name: str = "anilagos"
    table: str = "inscricoes"
    artist_name: str = ""
    artist_email: str | None = None  # falls back to the login email


class RunSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=env_path, env_prefix="BOOKER_", extra="ignore"
    )

    debug_dir: Path | None = None
    log_level: str = "INFO"
    request_delay_seconds: float = 1.0


class BookingConstants:
    """Centralized constants for portal requests."""

    DEFAULT_TIMEOUT = 30
    MAX_REDIRECTS = 5
    REQUEST_DELAY_SECONDS = 1.0

    # HTTP Headers
    USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:109.0) Gecko/20100101 Firefox/109.0"
    ACCEPT_LANGUAGE = "en-US,en;q=0.5"
    ACCEPT_ENCODING = "gzip, deflate, br"
    CONNECTION = "keep-alive"
    ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8"
    ACCEPT_CHARSET = "ISO-8859-1,utf-8;q=0.7,*;q=0.7"
    LATIN1_FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=ISO-8859-1"


class PortalDetails(BaseModel):
    base_url: str = "https://animalagos.com/web"

    @property
    def origin(self) -> str:
        scheme, _, rest = self.base_url.partition("://")
        return f"{scheme}://{rest.split('/', 1)[0]}"

    @property
    def login_url(self) -> str:
        return f"{self.base_url}/login?perfil=Artista"

    @property
    def artist_login_url(self) -> str:
        return f"{self.base_url}/artista/login"

    @property
    def artist_home_url(self) -> str:
        return f"{self.base_url}/artista/"

    @property
    def timeline_url(self) -> str:
        return f"{self.base_url}/artista/timeline"

    @property
    def registration_url(self) -> str:
        return f"{self.base_url}/artista/inscricao-artista"
