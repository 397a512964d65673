from pydantic import BaseModel

class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s [%(levelname)-8s] [%(name)s] %(message)s"
    datefmt: str = "%H:%M:%S"
