"""
Unit tests for manifest building and serialization.
"""

import uuid
import xml.etree.ElementTree as ET

import pytest

from roigen.models.schemas import AssignedMeasure, Measure, Provider
from roigen.services.manifest_service import (
    XML_DECLARATION,
    build_document,
    build_region,
    build_root_template,
    region_root,
    serialize_document,
)

ROOT_GUID = uuid.UUID("11111111-2222-3333-4444-555555555555")
LOAD_GUID = uuid.UUID("aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee")

EDGE = Provider(Name="Edge", Provider="9e3b3947-ca5d-4614-91a2-7b624e0e7244", Id=211, Version=0, FieldName="Name")
CHROME = Provider(Name="Chrome", Provider="d2d578d9-2936-45b6-a09f-30e32715f42d", Id=1, Version=0, FieldName="Name")

# ElementTree puts Match/Event on its own lines; same XML as the single-line form.
EXPECTED_EDGE = """<?xml version='1.0' encoding='utf-8' standalone='yes'?>
<InstrumentationManifest>
  <Instrumentation>
    <Regions>
      <RegionRoot Guid="{11111111-2222-3333-4444-555555555555}" Name="Demo">
        <Region Guid="{aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee}" Name="Load">
          <Match>
            <Event TID="true" PID="true" />
          </Match>
          <Start>
            <Event Provider="{9e3b3947-ca5d-4614-91a2-7b624e0e7244}" Id="211" Version="0" />
            <PayloadIdentifier FieldName="Name" FieldValue="L-Start" />
          </Start>
          <Stop>
            <Event Provider="{9e3b3947-ca5d-4614-91a2-7b624e0e7244}" Id="211" Version="0" />
            <PayloadIdentifier FieldName="Name" FieldValue="L-End" />
          </Stop>
        </Region>
      </RegionRoot>
    </Regions>
  </Instrumentation>
</InstrumentationManifest>
"""


@pytest.fixture
def load_measure():
    return AssignedMeasure(measure=Measure(Name="Load", Start="L-Start", Stop="L-End"), guid=LOAD_GUID)


class TestBuildRootTemplate:
    """Tests for build_root_template."""

    def test_structure(self):
        template = build_root_template(ROOT_GUID, "Demo")

        assert template.tag == "InstrumentationManifest"
        root = region_root(template)
        assert root.get("Guid") == "{11111111-2222-3333-4444-555555555555}"
        assert root.get("Name") == "Demo"
        assert len(root) == 0


class TestBuildRegion:
    """Tests for build_region."""

    def test_region_attributes(self, load_measure):
        region = build_region(load_measure, EDGE)

        assert region.tag == "Region"
        assert region.get("Guid") == "{aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee}"
        assert region.get("Name") == "Load"
        assert [child.tag for child in region] == ["Match", "Start", "Stop"]

    def test_match_is_thread_and_process_scoped(self, load_measure):
        event = build_region(load_measure, CHROME).find("Match/Event")
        assert event.attrib == {"TID": "true", "PID": "true"}

    def test_start_and_stop_reference_provider(self, load_measure):
        region = build_region(load_measure, CHROME)

        for clause, value in (("Start", "L-Start"), ("Stop", "L-End")):
            event = region.find(f"{clause}/Event")
            assert event.attrib == {
                "Provider": "{d2d578d9-2936-45b6-a09f-30e32715f42d}",
                "Id": "1",
                "Version": "0",
            }
            payload = region.find(f"{clause}/PayloadIdentifier")
            assert payload.attrib == {"FieldName": "Name", "FieldValue": value}


class TestBuildDocument:
    """Tests for build_document."""

    def test_regions_in_measure_order(self):
        assigned = [
            AssignedMeasure(measure=Measure(Name=name, Start="s", Stop="e"), guid=uuid.uuid4())
            for name in ("first", "second", "third")
        ]
        document = build_document(build_root_template(ROOT_GUID, "Demo"), assigned, EDGE)

        names = [region.get("Name") for region in region_root(document)]
        assert names == ["first", "second", "third"]

    def test_template_not_mutated(self, load_measure):
        template = build_root_template(ROOT_GUID, "Demo")
        build_document(template, [load_measure], EDGE)

        assert len(region_root(template)) == 0

    def test_documents_share_no_nodes(self, load_measure):
        template = build_root_template(ROOT_GUID, "Demo")
        edge_doc = build_document(template, [load_measure], EDGE)
        chrome_doc = build_document(template, [load_measure], CHROME)

        assert region_root(edge_doc) is not region_root(chrome_doc)
        assert len(region_root(edge_doc)) == 1
        assert len(region_root(chrome_doc)) == 1
        assert region_root(edge_doc).find("Region/Start/Event").get("Id") == "211"
        assert region_root(chrome_doc).find("Region/Start/Event").get("Id") == "1"

    def test_missing_region_root_raises(self):
        with pytest.raises(ValueError, match="RegionRoot"):
            region_root(ET.Element("InstrumentationManifest"))


class TestSerializeDocument:
    """Tests for serialize_document."""

    def test_exact_output(self, load_measure):
        document = build_document(build_root_template(ROOT_GUID, "Demo"), [load_measure], EDGE)
        assert serialize_document(document).decode("utf-8") == EXPECTED_EDGE

    def test_declaration_first(self, load_measure):
        document = build_document(build_root_template(ROOT_GUID, "Demo"), [load_measure], EDGE)
        assert serialize_document(document).startswith(XML_DECLARATION.encode("utf-8"))

    def test_special_characters_round_trip(self):
        measure = Measure(Name='a & b <c> "d"', Start="<start & go>", Stop='"stop"')
        provider = EDGE.model_copy(update={"field_name": 'Field "&" <x>'})
        document = build_document(
            build_root_template(ROOT_GUID, "R&D <root>"),
            [AssignedMeasure(measure=measure, guid=LOAD_GUID)],
            provider,
        )

        parsed = ET.fromstring(serialize_document(document))
        root = region_root(parsed)
        region = root.find("Region")
        assert root.get("Name") == "R&D <root>"
        assert region.get("Name") == 'a & b <c> "d"'
        assert region.find("Start/PayloadIdentifier").get("FieldValue") == "<start & go>"
        assert region.find("Stop/PayloadIdentifier").get("FieldValue") == '"stop"'
        assert region.find("Start/PayloadIdentifier").get("FieldName") == 'Field "&" <x>'

    def test_non_ascii_encoded_as_utf8(self):
        measure = Measure(Name="Zeichnen ü", Start="начало", Stop="終了")
        document = build_document(
            build_root_template(ROOT_GUID, "Demo"),
            [AssignedMeasure(measure=measure, guid=LOAD_GUID)],
            EDGE,
        )
        data = serialize_document(document)

        assert "начало".encode("utf-8") in data
        assert region_root(ET.fromstring(data)).find("Region").get("Name") == "Zeichnen ü"
