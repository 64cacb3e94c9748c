"""
Configuration du logging de l'application via loguru.

Fournit un logging structure avec :
- Sortie console : lisible par l'humain, coloree, pour la surveillance en temps reel
- Sortie fichier : serialisee en JSON, avec rotation, pour l'analyse historique
  (les champs de contexte comme correlation_id y sont conserves)
"""

import sys
from pathlib import Path

from loguru import logger


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/arrlink.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
) -> None:
    """Configure le logging de l'application.

    Args :
        log_level : Niveau de log minimum pour la sortie console (DEBUG, INFO, WARNING, ERROR)
        log_file : Chemin vers le fichier de log
        rotation_size : Taille maximale du fichier avant rotation (ex: "10 MB", "1 GB")
        retention_count : Nombre de fichiers rotatifs a conserver
    """
    logger.remove()
    # Les logs emis hors operation n'ont pas d'identifiant de correlation
    logger.configure(extra={"correlation_id": "-"})

    logger.add(
        sys.stderr,
        level=log_level,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<magenta>{extra[correlation_id]}</magenta> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    # Fichier JSON : capture aussi les evenements de requete (DEBUG)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,
    )

    logger.debug("Logging configure", log_file=str(log_file), rotation=rotation_size)
