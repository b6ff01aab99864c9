from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Endpoints of the application under test
    EVENTS_URL: str = "http://localhost:4000/api/slack/events"
    ACTIONS_URL: str = "http://localhost:4000/api/slack/actions"

    # Shared with the application under test; used to sign every outbound call
    SIGNING_SECRET: str = ""

    TEAM_ID: str = "test_team_id"

    # Mock platform server
    HOST: str = "127.0.0.1"
    PORT: int = 4999
    API_PREFIX: str = "/api"
    # Base URL the application uses to reach us (response_url); derived from PORT when unset
    PUBLIC_URL: Optional[str] = None

    # Waits, in seconds
    HOME_WAIT_TIMEOUT: float = 5.0
    MESSAGE_WAIT_TIMEOUT: float = 5.0
    MODAL_WAIT_TIMEOUT: float = 5.0
    HTTP_TIMEOUT: float = 10.0

    LOG_LEVEL: Literal["critical", "error", "warning", "info", "debug"] = "warning"

    # Loads from a .env file in the root directory
    model_config = SettingsConfigDict(env_prefix="SLACK_HARNESS_", env_file=".env", extra="ignore")

# Singleton instance
settings = Settings()
