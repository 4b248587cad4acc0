"""JSON-based settings repository."""

import json
import logging
from pathlib import Path

import aiofiles
import aiofiles.os

from sujood.domain.settings import SalahSettings
from sujood.services.ports import SettingsRepositoryPort

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path.home() / ".config" / "sujood" / "settings.json"


class JsonSettingsRepository(SettingsRepositoryPort):
    """Repository keeping settings in a JSON file."""

    def __init__(self, file_path: Path | None = None) -> None:
        """
        Initialize repository.

        Args:
            file_path: Settings file path (default: ~/.config/sujood/settings.json)
        """
        self._file_path = file_path or DEFAULT_SETTINGS_PATH

    @property
    def file_path(self) -> Path:
        """Settings file path."""
        return self._file_path

    async def _ensure_dir(self) -> None:
        """Make sure the parent directory exists."""
        parent = self._file_path.parent
        if not parent.exists():
            parent.mkdir(parents=True, exist_ok=True)
            logger.info(f"Settings directory created: {parent}")

    async def load(self) -> SalahSettings:
        """
        Load settings.

        A missing or malformed file yields the defaults. Values that parse but
        fail validation raise the matching InvalidInput error.
        """
        if not self._file_path.exists():
            logger.info("Settings file not found, using defaults.")
            return SalahSettings()

        async with aiofiles.open(self._file_path, encoding="utf-8") as f:
            content = await f.read()
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"Settings file is not valid JSON: {e}")
            return SalahSettings()
        if not isinstance(data, dict):
            logger.error(f"Settings file must hold a JSON object: {self._file_path}")
            return SalahSettings()

        settings = SalahSettings.from_dict(data)
        logger.info(f"Settings loaded: {self._file_path}")
        return settings

    async def save(self, settings: SalahSettings) -> None:
        """Save settings, replacing the file atomically."""
        await self._ensure_dir()

        tmp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(settings.to_dict(), ensure_ascii=False, indent=2))
            await aiofiles.os.replace(tmp_path, self._file_path)
            logger.info(f"Settings saved: {self._file_path}")
        except OSError as e:
            logger.error(f"Could not save settings: {e}")
            raise

    async def exists(self) -> bool:
        """Does the settings file exist?"""
        return self._file_path.exists()

    async def delete(self) -> bool:
        """Delete the settings file."""
        if self._file_path.exists():
            await aiofiles.os.remove(self._file_path)
            logger.info(f"Settings file deleted: {self._file_path}")
            return True
        return False
