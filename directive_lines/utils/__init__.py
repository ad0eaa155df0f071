from .config import config_hash, load_config
from .structured_data import dump_structured_data, load_structured_file

__all__ = [
    "config_hash",
    "load_config",
    "dump_structured_data",
    "load_structured_file",
]
