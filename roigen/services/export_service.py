"""Export service: write rendered manifests to disk."""

import logging
from pathlib import Path

from roigen.errors.exceptions import OutputError
from roigen.models.schemas import RenderedDocument

logger = logging.getLogger(__name__)


def output_file_name(root_name: str, provider_name: str) -> str:
    return f"{root_name}.{provider_name}.xml"


def write_document(output_dir: str | Path, rendered: RenderedDocument) -> Path:
    out_path = Path(output_dir)
    if not out_path.is_dir():
        raise OutputError(
            f"Output directory does not exist or is not a directory: {out_path}",
            details={"output_dir": str(out_path), "file": rendered.file_name},
        )

    file_path = out_path / rendered.file_name
    try:
        file_path.write_bytes(rendered.content)
    except OSError as exc:
        logger.error("export.write_failed path=%s error=%s", file_path, exc)
        raise OutputError(
            f"Failed to write {file_path}: {exc}",
            details={"output_dir": str(out_path), "file": rendered.file_name},
        ) from exc

    logger.info(
        "export.written provider=%s path=%s bytes=%d",
        rendered.provider.name, file_path, len(rendered.content),
    )
    return file_path
