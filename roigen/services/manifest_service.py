"""Builds and serializes Regions of Interest instrumentation manifests.

Every document has the same outer shape::

    InstrumentationManifest
      Instrumentation
        Regions
          RegionRoot Guid Name
            Region Guid Name   (one per measure)
              Match / Event TID PID
              Start / Event, PayloadIdentifier
              Stop  / Event, PayloadIdentifier

The root template is built once per run and deep-copied for each provider,
so no two documents share element nodes.
"""

import copy
import logging
import uuid
import xml.etree.ElementTree as ET
from typing import Iterable

from roigen.models.schemas import AssignedMeasure, Provider
from roigen.utils.guid import format_guid

logger = logging.getLogger(__name__)

XML_DECLARATION = "<?xml version='1.0' encoding='utf-8' standalone='yes'?>"
INDENT = "  "
ROOT_PATH = "./Instrumentation/Regions/RegionRoot"


def build_root_template(root_guid: uuid.UUID, root_name: str) -> ET.Element:
    manifest = ET.Element("InstrumentationManifest")
    instrumentation = ET.SubElement(manifest, "Instrumentation")
    regions = ET.SubElement(instrumentation, "Regions")
    ET.SubElement(regions, "RegionRoot", {"Guid": format_guid(root_guid), "Name": root_name})
    return manifest


def _event(parent: ET.Element, provider: Provider) -> ET.Element:
    return ET.SubElement(
        parent,
        "Event",
        {
            "Provider": format_guid(provider.provider),
            "Id": str(provider.id),
            "Version": str(provider.version),
        },
    )


def _boundary(parent: ET.Element, tag: str, provider: Provider, field_value: str) -> ET.Element:
    clause = ET.SubElement(parent, tag)
    _event(clause, provider)
    ET.SubElement(
        clause,
        "PayloadIdentifier",
        {"FieldName": provider.field_name, "FieldValue": field_value},
    )
    return clause


def build_region(assigned: AssignedMeasure, provider: Provider) -> ET.Element:
    measure = assigned.measure
    region = ET.Element("Region", {"Guid": format_guid(assigned.guid), "Name": measure.name})

    # Always scoped to the same thread and process.
    match = ET.SubElement(region, "Match")
    ET.SubElement(match, "Event", {"TID": "true", "PID": "true"})

    _boundary(region, "Start", provider, measure.start)
    _boundary(region, "Stop", provider, measure.stop)
    return region


def region_root(document: ET.Element) -> ET.Element:
    node = document.find(ROOT_PATH)
    if node is None:
        raise ValueError("Document has no Instrumentation/Regions/RegionRoot element.")
    return node


def build_document(
    template: ET.Element,
    assigned_measures: Iterable[AssignedMeasure],
    provider: Provider,
) -> ET.Element:
    document = copy.deepcopy(template)
    root = region_root(document)
    count = 0
    for assigned in assigned_measures:
        root.append(build_region(assigned, provider))
        count += 1

    logger.debug("manifest.document_built provider=%s regions=%d", provider.name, count)
    return document


def serialize_document(document: ET.Element) -> bytes:
    tree = ET.ElementTree(document)
    ET.indent(tree, space=INDENT)
    body = ET.tostring(document, encoding="unicode")
    return f"{XML_DECLARATION}\n{body}\n".encode("utf-8")
