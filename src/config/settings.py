"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use HTMLBLOCKS_ prefix (e.g., HTMLBLOCKS_TAG_NAME=build).

Settings can also be loaded from a .env file in the project root.
"""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..models.events import Destination


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use HTMLBLOCKS_ prefix.

    Examples:
        HTMLBLOCKS_TAG_NAME=build
        HTMLBLOCKS_BASE_URL=/var/www/dist
        HTMLBLOCKS_STRICT_MODE=true
    """

    model_config = SettingsConfigDict(
        env_prefix="HTMLBLOCKS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Grammar configuration
    tag_name: str = Field(
        default="build",
        description="Token used in directive comments (<!--build:type args--> ... <!--endbuild-->)",
    )

    # Destination configuration
    base_url: str = Field(
        default=".",
        description="Base directory that bundle destinations are resolved under",
    )

    target: str = Field(
        default="dist",
        description="Default build target named in emitted instructions",
    )

    source_root: str = Field(
        default=".",
        description="Directory that referenced asset paths (src/href) are checked against",
    )

    # Diagnostics configuration
    strict_mode: bool = Field(
        default=False,
        description="Strict mode: treat skipped asset tags as errors",
    )

    debug_mode: bool = Field(
        default=False,
        description="Enable debug output during parsing",
    )

    # Output configuration
    manifest_file: str = Field(
        default="build-manifest.yaml",
        description="Filename of the build instruction manifest written by the CLI",
    )

    def destination_make(self, short: str) -> Destination:
        """
        Build a destination descriptor for a path written into the document.

        Args:
            short: Path as it appears in the rewritten document

        Returns:
            Destination with ``full`` resolved under ``base_url``

        Example:
            >>> AppSettings(base_url="/www").destination_make("js/app.js")
            Destination(short='js/app.js', full='/www/js/app.js')
        """
        return Destination(short=short, full=os.path.normpath(os.path.join(self.base_url, short)))


# Singleton instance - import this in your code
appsettings = AppSettings()
