from pydantic import BaseModel, Field
from typing import Dict, Optional
import yaml, pathlib

SCPI_RAW_PORT = 5025

class DeviceConfig(BaseModel):
    host: str = Field(..., description="Instrument IP/hostname")
    port: int = Field(SCPI_RAW_PORT, description="SCPI raw-socket TCP port")

    @property
    def address(self):
        return (self.host, self.port)

class EmulatorConfig(BaseModel):
    host: str = Field("localhost", description="Interface to listen on")
    port: int = Field(SCPI_RAW_PORT, description="TCP port; 0 picks a free one")
    idn: str = Field("Emulator", description="Reply to *IDN?")

class AppConfig(BaseModel):
    log_level: str = Field("INFO")
    devices: Dict[str, DeviceConfig] = Field(default_factory=dict)
    emulator: EmulatorConfig = Field(default_factory=EmulatorConfig)

def load_config(path: Optional[str]) -> AppConfig:
    """Read a YAML config; no path (or an empty file) gives the defaults."""
    if path is None:
        return AppConfig()
    data = yaml.safe_load(pathlib.Path(path).read_text()) or {}
    return AppConfig.model_validate(data)
