"""Office-suite conversion strategy.

Converts documents by running LibreOffice headless as a subprocess.
This is the highest-fidelity path when LibreOffice is installed.
"""

import asyncio
import logging
import shutil
import tempfile
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from fileflow.interfaces.converter import ConversionOptions, ConversionStrategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OfficeVariant:
    """One `--convert-to` invocation.

    Attributes:
        convert_to: Target specifier, optionally with a filter name
            (e.g. "docx:MS Word 2007 XML").
        extension: Extension of the file LibreOffice writes.
    """

    convert_to: str
    extension: str


DOCX_VARIANTS: tuple[OfficeVariant, ...] = (
    OfficeVariant("docx:MS Word 2007 XML", ".docx"),
    OfficeVariant("docx:Office Open XML Text", ".docx"),
    OfficeVariant("docx", ".docx"),
)
PDF_VARIANTS: tuple[OfficeVariant, ...] = (OfficeVariant("pdf", ".pdf"),)


class OfficeProcessError(RuntimeError):
    """The office-suite process failed or produced nothing."""


class OfficeSuiteStrategy(ConversionStrategy):
    """Conversion through LibreOffice's command line.

    Every candidate binary is tried with every variant until one produces
    the expected `<input stem><extension>` file in a private working
    directory. The file is then moved to the requested output path. The
    working directory, including a private LibreOffice profile so that
    concurrent conversions do not share state, is always removed.

    Attributes:
        variants: Output variants to try, in order.
        binaries: Executable names or paths to try, in order.
        infilter: Optional import filter (e.g. "writer_pdf_import").
    """

    name = "office_suite"

    def __init__(
        self,
        variants: Sequence[OfficeVariant],
        binaries: Sequence[str] = ("soffice", "libreoffice"),
        infilter: str | None = None,
        work_dir: Path | None = None,
        run_timeout: float = 120.0,
        timeout: float | None = None,
    ) -> None:
        """Initialize the strategy.

        Args:
            variants: Output variants to try, in order.
            binaries: LibreOffice executables to try, in order.
            infilter: Import filter passed as --infilter.
            work_dir: Parent directory for per-request working directories.
            run_timeout: Seconds allowed for one process invocation.
            timeout: Seconds the cascade allows for the whole strategy. If
                None, every binary/variant combination gets its full
                `run_timeout`.
        """
        self._variants = tuple(variants)
        self._binaries = tuple(binaries)
        self._infilter = infilter
        self._work_dir = work_dir
        self.run_timeout = run_timeout
        if timeout is None:
            timeout = run_timeout * len(self._binaries) * len(self._variants)
        super().__init__(timeout=timeout)

    async def convert(
        self,
        input_path: Path,
        output_path: Path,
        options: ConversionOptions,
    ) -> Path:
        """Convert a document with LibreOffice.

        Args:
            input_path: The source document.
            output_path: The requested destination.
            options: Unused; LibreOffice keeps the source layout.

        Returns:
            The requested output path.

        Raises:
            OfficeProcessError: If every binary/variant combination failed.
        """
        if self._work_dir is not None:
            self._work_dir.mkdir(parents=True, exist_ok=True)
        work = Path(tempfile.mkdtemp(prefix=f"office-{uuid.uuid4().hex[:12]}-", dir=self._work_dir))
        errors: list[str] = []

        try:
            for binary in self._binaries:
                for idx, variant in enumerate(self._variants, start=1):
                    logger.info(
                        f"Attempting LibreOffice method {idx} ({binary}, {variant.convert_to}) "
                        f"for {input_path.name}"
                    )
                    try:
                        produced = await self._run(binary, variant, input_path, work)
                    except FileNotFoundError:
                        errors.append(f"{binary}: executable not found")
                        logger.info(f"LibreOffice executable not found: {binary}")
                        break
                    except (OfficeProcessError, TimeoutError) as e:
                        reason = str(e) or type(e).__name__
                        errors.append(f"{binary} [{variant.convert_to}]: {reason}")
                        logger.info(f"LibreOffice method {idx} failed: {reason}")
                        continue

                    output_path.parent.mkdir(parents=True, exist_ok=True)
                    shutil.move(str(produced), str(output_path))
                    logger.info(f"LibreOffice method {idx} successful: {output_path}")
                    return output_path
        finally:
            shutil.rmtree(work, ignore_errors=True)

        raise OfficeProcessError("All LibreOffice conversion methods failed: " + "; ".join(errors))

    def build_command(self, binary: str, variant: OfficeVariant, input_path: Path, work: Path) -> list[str]:
        """Return the argv for one LibreOffice invocation."""
        command = [
            binary,
            f"-env:UserInstallation={(work / 'profile').resolve().as_uri()}",
            "--headless",
        ]
        if self._infilter:
            command.append(f"--infilter={self._infilter}")
        command += ["--convert-to", variant.convert_to, "--outdir", str(work), str(input_path)]
        return command

    async def _run(self, binary: str, variant: OfficeVariant, input_path: Path, work: Path) -> Path:
        command = self.build_command(binary, variant, input_path, work)
        logger.debug(f"Executing LibreOffice command: {command}")

        process = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.run_timeout)
        except (TimeoutError, asyncio.CancelledError):
            if process.returncode is None:
                logger.warning(f"Terminating LibreOffice process {process.pid}")
                process.kill()
                await process.wait()
            raise

        if stderr:
            logger.debug(f"LibreOffice stderr: {stderr.decode(errors='replace').strip()}")

        if process.returncode != 0:
            raise OfficeProcessError(
                f"exited with status {process.returncode}: "
                f"{stderr.decode(errors='replace').strip()[:200]}"
            )

        produced = work / f"{input_path.stem}{variant.extension}"
        if not produced.exists():
            raise OfficeProcessError(f"did not create the expected file {produced.name}")
        return produced
