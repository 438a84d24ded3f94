# ocdopts/config/settings.py

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_VERSION = "0.1.0"
APP_TITLE = "Open On-Chip Debugger"

SearchLayout = Literal["auto", "installation", "posix", "portable"]


class Settings(BaseSettings):
    """
    Startup configuration, loaded from the environment (.env supported).

    `pkgdatadir` plays the role of the install-time data root: the fixed
    `site` and `scripts` directories are derived from it.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # General
    debug: bool = Field(False, validation_alias="DEBUG")

    # Installation layout
    package: str = Field("openocd", validation_alias="OCD_PACKAGE")
    pkgdatadir: str = Field("/usr/local/share/openocd", validation_alias="OCD_PKGDATADIR")

    # auto | installation | posix | portable
    search_layout: SearchLayout = Field("auto", validation_alias="OCD_SEARCH_LAYOUT")

    # Optional log file (rotating); console only when unset
    log_file: Optional[str] = Field(None, validation_alias="OCD_LOG_FILE")
