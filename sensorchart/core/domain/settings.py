from pydantic import BaseModel, Field


class SystemSettings(BaseModel):
    """
    Global system configuration settings.
    """
    # Chart definitions
    charts_file: str = Field(default="charts.yaml", description="Path to chart definitions file")

    # Logging
    log_level: str = Field(default="INFO", description="Root logging level")

    # Retrieval
    request_timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")

    # Timestamps
    default_timezone: str = Field(default="UTC", description="Zone for charts that do not set one")
