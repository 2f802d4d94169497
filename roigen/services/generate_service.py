"""Generate service: one Regions of Interest manifest per provider."""

import logging
import uuid
from pathlib import Path
from typing import Any, Optional

from roigen.config.settings import get_settings
from roigen.models.schemas import RegionRequest, RenderedDocument
from roigen.services.export_service import output_file_name, write_document
from roigen.services.manifest_service import build_document, build_root_template, serialize_document
from roigen.services.registry_service import assign_identifiers
from roigen.utils.guid import format_guid, new_guid
from roigen.utils.validator import build_request, load_manifest

logger = logging.getLogger(__name__)


def render_documents(
    request: RegionRequest,
    root_guid: Optional[uuid.UUID] = None,
) -> list[RenderedDocument]:
    root_guid = root_guid or new_guid()
    assigned = assign_identifiers(request.measures)
    template = build_root_template(root_guid, request.root_name)

    rendered = []
    for provider in request.providers:
        document = build_document(template, assigned, provider)
        rendered.append(RenderedDocument(
            provider=provider,
            file_name=output_file_name(request.root_name, provider.name),
            content=serialize_document(document),
        ))

    logger.debug(
        "generate.rendered root_guid=%s documents=%d regions=%d",
        format_guid(root_guid), len(rendered), len(assigned),
    )
    return rendered


def generate_regions(
    request: RegionRequest,
    output_dir: str | Path | None = None,
    dry_run: bool = False,
    root_guid: Optional[uuid.UUID] = None,
) -> dict[str, Any]:
    out_path = Path(output_dir) if output_dir is not None else get_settings().output_dir
    root_guid = root_guid or new_guid()

    logger.info(
        "generate.start root_name=%s measures=%d providers=%d output=%s dry_run=%s",
        request.root_name, len(request.measures), len(request.providers), out_path, dry_run,
    )

    rendered = render_documents(request, root_guid=root_guid)
    result = {
        "root_name": request.root_name,
        "root_guid": format_guid(root_guid),
        "measures": len(request.measures),
        "output_dir": str(out_path),
        "dry_run": dry_run,
        "files": [],
        "documents": rendered,
    }

    for doc in rendered:
        if dry_run:
            path = out_path / doc.file_name
        else:
            path = write_document(out_path, doc)
        result["files"].append({"provider": doc.provider.name, "path": str(path)})

    logger.info(
        "generate.complete root_name=%s root_guid=%s files=%d dry_run=%s",
        request.root_name, result["root_guid"], len(result["files"]), dry_run,
    )
    return result


def generate_from_manifest(
    manifest_path: str | Path,
    output_dir: str | Path | None = None,
    dry_run: bool = False,
) -> dict[str, Any]:
    path = Path(manifest_path)
    manifest = load_manifest(path)
    request = build_request(
        manifest["root_name"],
        manifest["measures"],
        manifest.get("providers"),
    )

    if output_dir is None and manifest.get("output_dir"):
        output_dir = path.parent / manifest["output_dir"]

    return generate_regions(request, output_dir=output_dir, dry_run=dry_run)
