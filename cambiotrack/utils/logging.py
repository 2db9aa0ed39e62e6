"""
Configuração de logging do painel.

Saída no terminal e, opcionalmente, arquivo rotativo no mesmo formato.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def configure_logging(log_file: Optional[str] = None, level: str = "INFO") -> logging.Logger:
    """
    Configura o logger raiz do pacote `cambiotrack`.

    Chamadas repetidas não duplicam handlers.

    Args:
        log_file: Caminho opcional de um arquivo de log rotativo (1 MB, 2 backups)
        level: Nível textual (ex: "INFO", "DEBUG")

    Returns:
        O logger `cambiotrack` configurado
    """
    pkg_logger = logging.getLogger("cambiotrack")
    pkg_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    formatter = logging.Formatter(LOG_FORMAT)

    if not any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, RotatingFileHandler)
        for h in pkg_logger.handlers
    ):
        stream = logging.StreamHandler(sys.stdout)
        stream.setFormatter(formatter)
        pkg_logger.addHandler(stream)

    if log_file:
        caminho = os.path.abspath(log_file)
        has_file_handler = any(
            isinstance(h, RotatingFileHandler)
            and getattr(h, "baseFilename", "") == caminho
            for h in pkg_logger.handlers
        )
        if not has_file_handler:
            fh = RotatingFileHandler(
                log_file, maxBytes=1_000_000, backupCount=2, encoding="utf-8"
            )
            fh.setFormatter(formatter)
            pkg_logger.addHandler(fh)

    pkg_logger.propagate = False
    return pkg_logger
