# File: site_mirror/engine.py
"""site_mirror.engine: запуск зеркалирования, обработка сигналов остановки и сборка отчёта."""

from __future__ import annotations

import asyncio
import logging
import signal
from pathlib import Path
from typing import List, Optional, Union

from site_mirror.aggregator import MirrorReport, aggregate_results
from site_mirror.config import MirrorConfig, load_config
from site_mirror.crawler.crawler import MirrorSession
from site_mirror.logger import logger as default_logger

__all__ = ["Engine", "start_mirror"]

_STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def _install_stop_handlers(session: MirrorSession, log: logging.Logger) -> List[signal.Signals]:
    loop = asyncio.get_running_loop()
    installed: List[signal.Signals] = []

    def _on_signal(sig: signal.Signals) -> None:
        log.info("%s: start shutdown, finishing current level", sig.name)
        session.request_stop()

    for sig in _STOP_SIGNALS:
        try:
            loop.add_signal_handler(sig, _on_signal, sig)
        except (NotImplementedError, RuntimeError, ValueError) as exc:
            # Windows loops and non-main threads cannot take signal handlers
            log.debug("Signal handler for %s not installed: %s", sig.name, exc)
            continue
        installed.append(sig)
    return installed


async def start_mirror(
    cfg: MirrorConfig,
    *,
    logger: Optional[logging.Logger] = None,
    install_signal_handlers: bool = False,
) -> MirrorReport:
    """
    Запускает MirrorSession в контексте и возвращает сводный отчёт.

    Parameters
    ----------
    cfg : MirrorConfig
        Конфигурация зеркалирования.
    install_signal_handlers : bool
        SIGINT/SIGTERM останавливают обход между уровнями.
    """
    log = logger or default_logger
    async with MirrorSession.from_config(cfg, logger=log) as session:
        installed = _install_stop_handlers(session, log) if install_signal_handlers else []
        try:
            results = await session.run()
        finally:
            loop = asyncio.get_running_loop()
            for sig in installed:
                loop.remove_signal_handler(sig)
    return aggregate_results(cfg.start_url, cfg.dest_dir, results, stopped=session.stop_requested)


class Engine:
    """Фасад для CLI и тестов: загрузка конфига, запуск зеркалирования и сборка отчёта."""

    @staticmethod
    def load_config(path: Union[str, Path, None]) -> MirrorConfig:
        """Загружает конфиг из YAML/JSON."""
        return load_config(path)

    def __init__(self, config: MirrorConfig, logger: Optional[logging.Logger] = None) -> None:
        self.config = config
        self.logger = logger or default_logger

    def run(self, install_signal_handlers: bool = True) -> MirrorReport:
        """Синхронно выполняет зеркалирование и возвращает отчёт."""
        self.logger.info("Starting mirror…")
        try:
            return asyncio.run(
                start_mirror(
                    self.config,
                    logger=self.logger,
                    install_signal_handlers=install_signal_handlers,
                )
            )
        except Exception as exc:
            self.logger.error("Mirroring failed: %s", exc)
            raise
