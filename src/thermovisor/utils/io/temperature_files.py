import logging
import os
import re
from pathlib import Path
from typing import Dict, Optional, Tuple, Union
import pandas as pd

from ...models.models import ThermovisorConfig
from ...rescaled_image import RescaledImage

logger = logging.getLogger(__name__)

TEMPERATURE_FILE_PATTERN = re.compile(r"_T([1-9]|[1-9][0-9]|[1-9][0-9][0-9]|[1-9][0-9][0-9][0-9])\.csv")


def is_temperature_file(file_name: str) -> Optional[re.Match]:
    """
    Check if the file name matches the thermovisor temperature file convention
    ``..._T<temperature>.csv``.
    """
    return TEMPERATURE_FILE_PATTERN.search(file_name)


def read_temperature_file(
    file_name: Union[str, Path], config: Optional[ThermovisorConfig] = None
) -> Optional[Tuple[RescaledImage, float]]:
    """
    Read a temperature matrix stored as a header-less CSV file.

    Parameters
    ----------
    file_name : str or Path
        Full file name, or a bare name looked up in ``config.images_folder``
    config : ThermovisorConfig, optional

    Returns
    -------
    tuple or None
        (RescaledImage, modification time in seconds) or None when the file
        cannot be found
    """
    file_path = Path(file_name)
    if not file_path.is_file():
        folder = config.images_folder if config is not None else None
        if folder is None or not (Path(folder) / file_path).is_file():
            logger.info(f"Temperature file {file_name} not found")
            return None
        file_path = Path(folder) / file_path

    data = pd.read_csv(file_path, header=None, dtype=float)
    creation_time = os.path.getmtime(file_path)
    return RescaledImage(data.to_numpy()), creation_time


def find_temperature_files(
    folder: Optional[Union[str, Path]] = None, config: Optional[ThermovisorConfig] = None
) -> Dict[str, Tuple[float, Path]]:
    """
    Search the folder for temperature files.

    Keys are the temperature parts of the file names; blackbody files
    (containing "_BB_") get a "B" prefix, repeated keys get "-1", "-2", ...
    suffixes. Values are (temperature, full file name).
    """
    if folder is None:
        folder = config.images_folder if config is not None else None
        if folder is None:
            raise ValueError("Either folder or config.images_folder should be given")
    folder = Path(folder)

    files = {}
    for file_path in sorted(folder.iterdir()):
        if ".csv" not in file_path.name:
            continue
        reg_match = is_temperature_file(file_path.name)
        if reg_match is None:
            continue
        temperature = float(reg_match.group(1))
        t_key = "B" + reg_match.group(1) if "_BB_" in file_path.name else reg_match.group(1)
        counter = 1
        t_key_check = t_key
        while t_key_check in files:
            t_key_check = f"{t_key}-{counter}"
            counter += 1
        files[t_key_check] = (temperature, file_path)

    logger.info(f"Found {len(files)} temperature files in {folder}")
    return files
