"""
Chargement de la configuration TOML.

Ordre de résolution du fichier:
1. argument `config_path`
2. variable d'environnement POLLINATIONS_RELAY_CONFIG
3. config.toml à la racine du projet
Sans fichier, les valeurs par défaut de `core.constants` s'appliquent.
"""
import logging
import os
import re
import tomllib
from pathlib import Path
from typing import Dict, Any, Optional

from ..core.constants import CONFIG_ENV_VAR
from ..core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Cache global de configuration
_config_cache: Optional[Dict[str, Any]] = None

_ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')


def _expand_env_vars(obj: Any) -> Any:
    """
    Récursivement étend les variables d'environnement ${VAR} dans la config.

    Les variables absentes de l'environnement sont laissées telles quelles.
    """
    if isinstance(obj, str):
        def replace_env_var(match):
            var_name = match.group(1)
            return os.environ.get(var_name, match.group(0))
        return _ENV_VAR_PATTERN.sub(replace_env_var, obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    return obj


def _clear_config_cache():
    """Vide le cache de configuration."""
    global _config_cache
    _config_cache = None


def _default_config_path() -> str:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return env_path
    # Structure: project/src/pollinations_relay/config/loader.py
    current_file = os.path.abspath(__file__)
    project_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(current_file))))
    return os.path.join(project_dir, "config.toml")


def load_config(config_path: str = None) -> Dict[str, Any]:
    """
    Charge la configuration depuis config.toml.

    Args:
        config_path: Chemin vers le fichier config (optionnel)

    Returns:
        Dictionnaire de configuration (vide si aucun fichier)

    Raises:
        ConfigurationError: Si le fichier existe mais n'est pas du TOML valide
    """
    global _config_cache

    if _config_cache is not None and config_path is None:
        return _config_cache

    path = Path(config_path or _default_config_path())
    if not path.exists():
        logger.info(f"[CONFIG] Aucun fichier {path}, valeurs par défaut utilisées")
        _config_cache = {}
        return _config_cache

    try:
        with open(path, "rb") as f:
            raw_config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(
            message=f"Fichier de configuration invalide {path}: {e}",
            config_key="config_path"
        ) from e

    _config_cache = _expand_env_vars(raw_config)
    logger.info(f"[CONFIG] Configuration chargée depuis {path}")
    return _config_cache


def reload_config(config_path: str = None) -> Dict[str, Any]:
    """
    Recharge la configuration depuis le fichier.

    Returns:
        Nouvelle configuration chargée
    """
    _clear_config_cache()
    return load_config(config_path)


def get_config() -> Dict[str, Any]:
    """Retourne la configuration en cache (chargée au besoin)."""
    if _config_cache is None:
        return load_config()
    return _config_cache
