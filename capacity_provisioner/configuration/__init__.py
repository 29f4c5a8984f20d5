from .properties import *
from .properties import AppConfig as AppConfig
from .properties import LoggingConfig as LoggingConfig
