import logging
import os
from pathlib import Path

import tomlkit

from domain.models import OverlaySettings
from domain.toml_sections import flat_to_sectioned, sectioned_to_flat

logger = logging.getLogger(__name__)

PROFILES_DIR_ENV = 'ECO_OVERLAY_PROFILES_DIR'


def _user_profiles_dir() -> Path:
    """
    Determine profiles directory.

    1) ECO_OVERLAY_PROFILES_DIR if set (tests and portable setups).
    2) Otherwise ~/.eco_overlay/profiles.
    """
    override = os.getenv(PROFILES_DIR_ENV)
    if override:
        return Path(override)
    return Path.home() / '.eco_overlay' / 'profiles'


def ensure_profiles_dir() -> Path:
    profiles_dir = _user_profiles_dir()
    profiles_dir.mkdir(parents=True, exist_ok=True)
    return profiles_dir


def list_profiles() -> list[str]:
    """Список имён профилей без расширения."""
    folder = ensure_profiles_dir()
    return sorted(p.stem for p in folder.glob('*.toml') if p.is_file())


def profile_path(name: str) -> Path:
    """Путь к файлу профиля по имени."""
    return ensure_profiles_dir() / f'{name}.toml'


def load_profile(name_or_path: str | Path) -> OverlaySettings:
    """
    Загрузка и валидация профиля TOML -> OverlaySettings.

    Поддерживает как имя профиля (без .toml) из каталога profiles,
    так и абсолютный/относительный путь до TOML файла.
    """
    p = Path(name_or_path)
    path = (
        p if p.suffix.lower() == '.toml' and p.exists() else profile_path(str(name_or_path))
    )
    if not path.exists():
        msg = f'Профиль не найден: {path}'
        raise FileNotFoundError(msg)
    text = path.read_text(encoding='utf-8')
    data = tomlkit.parse(text).unwrap()
    settings = OverlaySettings.model_validate(sectioned_to_flat(data))
    logger.info(
        'Profile %s loaded: %d iso levels, sampler=%s',
        path.name,
        len(settings.iso_levels),
        settings.sampler.value,
    )
    return settings


def save_profile(name: str, settings: OverlaySettings) -> Path:
    """Сохранение профиля в TOML (без атомарности и бэкапов)."""
    path = profile_path(name)
    data = flat_to_sectioned(settings.model_dump(mode='json'))
    text = tomlkit.dumps(data)
    path.write_text(text, encoding='utf-8')
    return path


def delete_profile(name: str) -> bool:
    path = profile_path(name)
    if path.exists():
        path.unlink()
        return True
    return False
