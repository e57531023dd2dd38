"""Configuration management."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class NamingConfig(BaseModel):
    """Prefixes used when generating identifiers during a build."""

    model_config = ConfigDict(frozen=True)

    node_prefix: str = Field(default="this", description="Prefix for generated node identifiers")
    relationship_prefix: str = Field(
        default="this", description="Prefix for generated relationship identifiers"
    )
    variable_prefix: str = Field(default="var", description="Prefix for generated variable identifiers")
    param_prefix: str = Field(default="param", description="Prefix for generated parameter names")


class Settings(BaseSettings):
    # Naming
    node_prefix: str = "this"
    relationship_prefix: str = "this"
    variable_prefix: str = "var"
    param_prefix: str = "param"

    # Rendering
    clause_separator: str = Field(default="\n", description="Text placed between rendered clauses")
    indent: str = Field(default="    ", description="Indentation for CALL subquery bodies")

    # Logging
    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"

    model_config = SettingsConfigDict(
        env_prefix="CYPHER_BUILDER_",
        env_file=".env",
        extra="ignore",  # Ignore extra fields in .env file
    )

    @property
    def naming(self) -> NamingConfig:
        """Get naming configuration."""
        return NamingConfig(
            node_prefix=self.node_prefix,
            relationship_prefix=self.relationship_prefix,
            variable_prefix=self.variable_prefix,
            param_prefix=self.param_prefix,
        )


settings = Settings()
