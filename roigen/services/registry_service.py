"""Registry pass: one GUID per measure, shared by every provider's document."""

import logging
from typing import Iterable

from roigen.models.schemas import AssignedMeasure, Measure
from roigen.utils.guid import new_guid

logger = logging.getLogger(__name__)


def assign_identifiers(measures: Iterable[Measure]) -> list[AssignedMeasure]:
    assigned = [AssignedMeasure(measure=measure, guid=new_guid()) for measure in measures]
    logger.debug("registry.assigned count=%d", len(assigned))
    return assigned
