"""
Point d'entrée pour `python -m pollinations_relay`.
"""
import argparse
import logging
import os

import uvicorn

from .config.loader import load_config
from .config.settings import Settings
from .core.constants import CONFIG_ENV_VAR


def main():
    """Fonction principale."""
    parser = argparse.ArgumentParser(description="Pollinations Relay")
    parser.add_argument("--host", default=None, help="Host (défaut: config ou 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Port (défaut: config ou 8000)")
    parser.add_argument("--config", default=None, help="Chemin du fichier config.toml")
    parser.add_argument("--reload", action="store_true", help="Activer le reload auto")

    args = parser.parse_args()

    if args.config:
        # L'app est importée par uvicorn: le chemin passe par l'environnement
        os.environ[CONFIG_ENV_VAR] = args.config

    settings = Settings.from_config(load_config(args.config))
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    host = args.host or settings.host
    port = args.port or settings.port
    logging.getLogger(__name__).info(f"Démarrage de Pollinations Relay sur {host}:{port}")

    uvicorn.run(
        "pollinations_relay.main:app",
        host=host,
        port=port,
        reload=args.reload,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    main()
