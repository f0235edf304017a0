"""Standalone host: run file-mode emission into a directory.

DirectoryBuildContext implements PluginContext by writing every emitted
asset below an output directory, which lets localepack run without a
bundler (from the CLI, a Makefile, or a test).

Python 3.13+.
"""

from __future__ import annotations

import logging
from pathlib import Path

from localepack.constants import RESOURCE_ENCODING
from localepack.diagnostics import ConfigurationError
from localepack.filesystem import FileSystem
from localepack.output import EmittedAsset, FileOutputTarget
from localepack.plugin import LocalePackPlugin, PluginOptions

__all__ = [
    "DirectoryBuildContext",
    "build",
]

logger = logging.getLogger(__name__)


class DirectoryBuildContext:
    """PluginContext writing assets below ``out_dir``.

    Attributes:
        out_dir: Directory assets are written to
        written: Paths written so far, in emission order
        warnings: Diagnostics reported so far
    """

    def __init__(self, out_dir: str | Path) -> None:
        self.out_dir = Path(out_dir)
        self.written: list[Path] = []
        self.warnings: list[str] = []

    def emit_file(self, asset: EmittedAsset) -> str:
        """Write ``asset`` and return its path relative to ``out_dir``.

        Raises:
            ConfigurationError: If the asset name escapes ``out_dir``
        """
        root = self.out_dir.resolve()
        target = (root / asset.file_name).resolve()
        if not target.is_relative_to(root):
            msg = f"Asset name escapes the output directory: '{asset.file_name}'"
            raise ConfigurationError(msg)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(asset.source, encoding=RESOURCE_ENCODING)
        self.written.append(target)
        logger.debug("Wrote %s (%d chars)", target, len(asset.source))
        return str(target.relative_to(root))

    def warn(self, message: str) -> None:
        self.warnings.append(message)


def build(
    options: PluginOptions,
    out_dir: str | Path,
    *,
    fs: FileSystem | None = None,
) -> DirectoryBuildContext:
    """Compile once and write the file-mode assets to ``out_dir``.

    Returns:
        The context, holding written paths and warnings

    Raises:
        ConfigurationError: If ``options`` does not select file output
        OSError: If a root cannot be listed or an asset cannot be written
        CompilationError: In strict mode, if any file failed
    """
    if not isinstance(options.output, FileOutputTarget):
        msg = f"build() requires file output, got '{options.output.type}'"
        raise ConfigurationError(msg)
    context = DirectoryBuildContext(out_dir)
    LocalePackPlugin(options, fs=fs).generate_bundle(context)
    return context
