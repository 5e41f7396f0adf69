from pathlib import Path
from typing import Optional, Dict, Any
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError


# config.properties keys used by the release pipeline -> Settings fields
PROPERTY_ALIASES = {
    "neo4jUri": "neo4j_uri",
    "neo4jUser": "neo4j_username",
    "user": "neo4j_username",
    "neo4jPassword": "neo4j_password",
    "password": "neo4j_password",
    "host": "neo4j_host",
    "port": "neo4j_port",
    "database": "neo4j_database",
    "personId": "person_id",
}


class Settings(BaseSettings):
    """Application settings."""

    # Database Configuration
    neo4j_uri: str = Field(default="bolt://localhost:7687")
    neo4j_host: Optional[str] = Field(default=None)
    neo4j_port: int = Field(default=7687)
    neo4j_username: str = Field(default="neo4j")
    neo4j_password: str = Field(default="neo4j")
    neo4j_database: Optional[str] = Field(default=None)

    # Import Configuration
    person_id: Optional[int] = Field(default=None)
    models_file: str = Field(default="models2pathways.tsv")
    instance_edit_note: str = Field(default="BioModels reference database creation")

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_ignore_empty=True,
    )

    @property
    def connection_uri(self) -> str:
        """Bolt URI built from host/port when a host is set, otherwise neo4j_uri."""
        if self.neo4j_host:
            return f"bolt://{self.neo4j_host}:{self.neo4j_port}"
        return self.neo4j_uri

    def require_person_id(self) -> int:
        """Get the acting person's dbId, which every run needs."""
        if self.person_id is None:
            raise ConfigurationError(
                "No person id configured; set personId in the properties file or pass --person-id"
            )
        return self.person_id


def read_properties(path: Path) -> Dict[str, str]:
    """Read a Java-style key=value properties file."""
    properties = {}
    with open(path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith(('#', '!')):
                continue

            separator = min((i for i in (line.find('='), line.find(':')) if i >= 0), default=-1)
            if separator < 0:
                properties[line] = ""
            else:
                properties[line[:separator].strip()] = line[separator + 1:].strip()

    return properties


def load_settings(properties_path: Optional[str] = None, **overrides: Any) -> Settings:
    """Build settings from the environment, an optional properties file and explicit overrides."""
    values: Dict[str, Any] = {}

    if properties_path:
        path = Path(properties_path)
        if not path.is_file():
            raise ConfigurationError(
                f"Properties file not found: {properties_path}",
                context={"path": str(path)},
            )
        for key, value in read_properties(path).items():
            field_name = PROPERTY_ALIASES.get(key)
            if field_name and value != "":
                values[field_name] = value

    values.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
