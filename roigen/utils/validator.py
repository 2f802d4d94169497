"""Input validation for root names, measures, providers and input files."""

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from roigen.config.settings import get_settings
from roigen.errors.exceptions import ManifestError, ValidationError
from roigen.models.schemas import Measure, Provider, RegionRequest

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def _format_errors(exc: PydanticValidationError) -> list[dict[str, Any]]:
    return [
        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]


def _describe(errors: list[dict[str, Any]]) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'input'}: {err['msg']}" for err in errors
    )


def validate_root_name(root_name: Any) -> str:
    if not isinstance(root_name, str) or not root_name.strip():
        raise ValidationError("Root name must be a non-empty string.", details={"root_name": root_name})
    return root_name


def validate_measures(records: Any) -> list[Measure]:
    if not isinstance(records, list) or len(records) == 0:
        raise ValidationError("Measures must be a non-empty list of {Name, Start, Stop} records.")

    measures = []
    for i, record in enumerate(records):
        if isinstance(record, Measure):
            measures.append(record)
            continue
        if not isinstance(record, dict):
            raise ValidationError(
                f"Measure #{i} must be a mapping, got: {type(record).__name__}",
                details={"index": i},
            )
        try:
            measures.append(Measure.model_validate(record))
        except PydanticValidationError as exc:
            errors = _format_errors(exc)
            raise ValidationError(
                f"Measure #{i} is invalid: {_describe(errors)}",
                details={"index": i, "errors": errors},
            ) from exc

    logger.debug("validator.measures_valid count=%d", len(measures))
    return measures


def validate_providers(records: Any = None) -> list[Provider]:
    if records is None:
        records = get_settings().default_providers()
        logger.debug("validator.providers_defaulted count=%d", len(records))

    if not isinstance(records, list) or len(records) == 0:
        raise ValidationError("Providers must be a non-empty list when given.")

    providers = []
    for i, record in enumerate(records):
        if isinstance(record, Provider):
            providers.append(record)
            continue
        if not isinstance(record, dict):
            raise ValidationError(
                f"Provider #{i} must be a mapping, got: {type(record).__name__}",
                details={"index": i},
            )
        try:
            providers.append(Provider.model_validate(record))
        except PydanticValidationError as exc:
            errors = _format_errors(exc)
            raise ValidationError(
                f"Provider #{i} is invalid: {_describe(errors)}",
                details={"index": i, "errors": errors},
            ) from exc

    logger.debug("validator.providers_valid count=%d", len(providers))
    return providers


def build_request(root_name: Any, measures: Any, providers: Any = None) -> RegionRequest:
    root_name = validate_root_name(root_name)
    measures = validate_measures(measures)
    providers = validate_providers(providers)
    try:
        request = RegionRequest(root_name=root_name, measures=measures, providers=providers)
    except PydanticValidationError as exc:
        errors = _format_errors(exc)
        raise ValidationError(f"Request is invalid: {_describe(errors)}", details={"errors": errors}) from exc

    logger.debug(
        "validator.request_valid root_name=%s measures=%d providers=%d",
        request.root_name, len(request.measures), len(request.providers),
    )
    return request


def load_records_file(file_path: str | Path) -> Any:
    path = Path(file_path)
    if not path.exists():
        raise ManifestError(f"Input file not found: {path}")
    if not path.is_file():
        raise ManifestError(f"Input path is not a file: {path}")

    suffix = path.suffix.lower()
    if suffix != ".json" and suffix not in YAML_SUFFIXES:
        raise ManifestError(f"Input file must be .json, .yaml or .yml, got: {path.suffix or '(none)'}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f) if suffix == ".json" else yaml.safe_load(f)
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Invalid JSON in {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ManifestError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, (list, dict)):
        raise ManifestError(
            f"Input file {path.name} must hold a list or a mapping, got: {type(data).__name__}",
            details={"file": str(path)},
        )

    logger.debug("validator.file_loaded path=%s type=%s", path, type(data).__name__)
    return data


def load_record_list(file_path: str | Path, key: str) -> list:
    """Load a list of records, either bare or under ``key`` in a mapping."""
    data = load_records_file(file_path)
    if isinstance(data, dict):
        if key not in data:
            raise ManifestError(
                f"Input file {Path(file_path).name} has no '{key}' key.",
                details={"file": str(file_path), "keys": sorted(data)},
            )
        data = data[key]
    if not isinstance(data, list):
        raise ManifestError(f"'{key}' in {Path(file_path).name} must be a list.")
    return data


def load_manifest(manifest_path: str | Path) -> dict[str, Any]:
    path = Path(manifest_path)
    manifest = load_records_file(path)
    if not isinstance(manifest, dict):
        raise ManifestError("Invalid manifest: must be a mapping with 'root_name' and 'measures' keys.")

    allowed = {"root_name", "measures", "providers", "output_dir"}
    unknown = sorted(set(manifest) - allowed)
    if unknown:
        raise ManifestError(
            f"Manifest {path.name} has unrecognized keys: {unknown}",
            details={"file": str(path), "unknown_keys": unknown},
        )

    missing = [key for key in ("root_name", "measures") if key not in manifest]
    if missing:
        raise ManifestError(
            f"Manifest {path.name} is missing required keys: {missing}",
            details={"file": str(path), "missing_keys": missing},
        )

    output_dir = manifest.get("output_dir")
    if output_dir is not None and not isinstance(output_dir, str):
        raise ManifestError(f"Manifest {path.name}: 'output_dir' must be a string path.")

    logger.info("validator.manifest_loaded path=%s keys=%s", path, sorted(manifest))
    return manifest
