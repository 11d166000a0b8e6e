from .temperature_files import find_temperature_files, is_temperature_file, read_temperature_file

__all__ = ["find_temperature_files", "is_temperature_file", "read_temperature_file"]
