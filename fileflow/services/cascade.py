"""Ordered conversion cascade.

Runs conversion strategies one after another until one produces a
non-empty document, recording why each earlier one failed.
"""

import asyncio
import logging
import shutil
from collections.abc import Sequence
from pathlib import Path

from fileflow.interfaces.converter import (
    CascadeExhausted,
    ConversionOptions,
    ConversionResult,
    ConversionStrategy,
    EmptyOutputError,
    StrategyFailure,
)

logger = logging.getLogger(__name__)


class ConversionCascade:
    """Tries conversion strategies strictly in order.

    The first strategy whose output exists and is non-empty wins and
    later strategies are never started. Each strategy runs under its own
    timeout. A failed strategy is recorded, asked to clean up after
    itself, and any partial output at the requested path is removed.

    Attributes:
        strategies: The strategies in the order they are tried.
        name: Label used in logs and errors (e.g. "pdf->docx/high").
    """

    def __init__(self, strategies: Sequence[ConversionStrategy], name: str = "conversion") -> None:
        """Initialize the cascade.

        Args:
            strategies: Strategies to try, in order. Must not be empty.
            name: Label used in logs and errors.

        Raises:
            ValueError: If no strategies are given.
        """
        if not strategies:
            raise ValueError("A conversion cascade needs at least one strategy")
        self.strategies = list(strategies)
        self.name = name

    async def run(
        self,
        input_path: Path,
        output_path: Path,
        options: ConversionOptions | None = None,
    ) -> ConversionResult:
        """Convert `input_path` into `output_path`.

        Args:
            input_path: The source document.
            output_path: The canonical destination.
            options: Shared conversion options; defaults apply when omitted.

        Returns:
            The output path, the winning strategy and the earlier failures.

        Raises:
            FileNotFoundError: If the input does not exist.
            CascadeExhausted: If every strategy failed.
        """
        input_path = Path(input_path)
        output_path = Path(output_path)
        options = options or ConversionOptions()

        if not input_path.exists():
            raise FileNotFoundError(f"Input file not found: {input_path}")

        failures: list[StrategyFailure] = []
        total = len(self.strategies)

        for idx, strategy in enumerate(self.strategies, start=1):
            logger.info(f"[{self.name}] Trying strategy {idx}/{total}: {strategy.name}")
            try:
                async with asyncio.timeout(strategy.timeout):
                    produced = await strategy.convert(input_path, output_path, options)
                self._accept(strategy, Path(produced), output_path)
            except Exception as e:
                failure = self._to_failure(strategy, e)
                failures.append(failure)
                logger.warning(f"[{self.name}] Strategy {strategy.name} failed: {failure.reason}")
                await self._discard(strategy, output_path)
                continue

            logger.info(f"[{self.name}] Strategy {strategy.name} succeeded: {output_path}")
            return ConversionResult(
                output_path=output_path,
                strategy=strategy.name,
                failures=tuple(failures),
            )

        logger.error(f"[{self.name}] All {total} strategies failed")
        raise CascadeExhausted(failures, cascade=self.name)

    @staticmethod
    def _accept(strategy: ConversionStrategy, produced: Path, output_path: Path) -> None:
        if not produced.exists():
            raise EmptyOutputError(strategy.name, f"no output was created at {produced}")
        if produced.stat().st_size == 0:
            raise EmptyOutputError(strategy.name, f"output {produced.name} is empty")

        if produced.resolve() != output_path.resolve():
            output_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(produced), str(output_path))
            logger.debug(f"Moved {produced} to {output_path}")

    @staticmethod
    def _to_failure(strategy: ConversionStrategy, error: Exception) -> StrategyFailure:
        if isinstance(error, StrategyFailure):
            return error
        if isinstance(error, TimeoutError):
            return StrategyFailure(strategy.name, f"timed out after {strategy.timeout:g}s")
        return StrategyFailure(strategy.name, str(error) or type(error).__name__)

    async def _discard(self, strategy: ConversionStrategy, output_path: Path) -> None:
        try:
            await strategy.cleanup(output_path)
        except Exception as e:
            logger.error(f"[{self.name}] Cleanup after {strategy.name} failed: {e}", exc_info=True)
        output_path.unlink(missing_ok=True)
