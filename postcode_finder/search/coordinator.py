"""Request orchestration for radius search and region lookup."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator, Sequence

from postcode_finder.common.constants import DEFAULT_FACILITY_K, OUTSIDE_REGION
from postcode_finder.common.errors import FinderError, ValidationError
from postcode_finder.common.logging import log_event
from postcode_finder.common.models import (
    Coordinate,
    FacilityRecord,
    ReferenceQuery,
    RegionLookup,
    ResultSet,
)
from postcode_finder.common.postcode import normalise_identifier
from postcode_finder.common.time_utils import elapsed_ms
from postcode_finder.geocode.resolver import PostcodeResolver
from postcode_finder.search.dataset import DatasetStore
from postcode_finder.search.proximity import nearest_k_query, radius_query, validate_k, validate_radius
from postcode_finder.search.regions import RegionClassifier

logger = logging.getLogger(__name__)


def parse_radius(radius_text: str | float | int | None) -> float:
    if radius_text is None:
        raise ValidationError("Please enter a valid radius")
    if isinstance(radius_text, str):
        try:
            value = float(radius_text.strip())
        except ValueError as exc:
            raise ValidationError(f"Please enter a valid radius, got {radius_text!r}") from exc
    else:
        value = radius_text
    return validate_radius(value)


def _require_identifier(text: str | None) -> str:
    key = normalise_identifier(text)
    if not key:
        raise ValidationError("Please enter a postcode")
    return key


@contextmanager
def _logged(operation: str, identifier: str | None) -> Iterator[None]:
    started_at = time.perf_counter()
    try:
        yield
    except FinderError as exc:
        log_event(
            logger,
            f"{operation} failed: {exc}",
            operation=operation,
            identifier=identifier,
            event="QUERY_FAIL",
            status="error",
            duration_ms=elapsed_ms(started_at),
            error_code=exc.error_code,
        )
        raise
    log_event(
        logger,
        f"{operation} complete",
        operation=operation,
        identifier=identifier,
        event="QUERY_OK",
        status="ok",
        duration_ms=elapsed_ms(started_at),
    )


class QueryCoordinator:
    """Stateless front end over an immutable store, classifier and facility set.

    Holds no per-request state, so any number of threads may call it at once.
    """

    def __init__(
        self,
        store: DatasetStore,
        classifier: RegionClassifier,
        resolver: PostcodeResolver,
        facilities: Sequence[FacilityRecord] = (),
        facility_k: int = DEFAULT_FACILITY_K,
    ) -> None:
        self.store = store
        self.classifier = classifier
        self.resolver = resolver
        self.facilities = tuple(facilities)
        self.facility_k = validate_k(facility_k)

    def radius_search(self, identifier_text: str, radius_text: str | float) -> ResultSet:
        with _logged("radius_search", identifier_text):
            key = _require_identifier(identifier_text)
            center = self.store.lookup(key)
            radius_km = parse_radius(radius_text)

            reference = ReferenceQuery(
                raw_input=identifier_text,
                normalised_identifier=key,
                coordinate=center.coordinate,
                source="dataset",
            )
            results = radius_query(self.store, reference.coordinate, radius_km)
            return ResultSet(reference=reference, parameter=radius_km, results=results)

    def region_lookup(self, postal_text: str) -> RegionLookup:
        with _logged("region_lookup", postal_text):
            key = _require_identifier(postal_text)
            # Resolver failures propagate as-is; retrying is the caller's call.
            geocoded = self.resolver.resolve(postal_text)

            reference = ReferenceQuery(
                raw_input=postal_text,
                normalised_identifier=key,
                coordinate=Coordinate(geocoded.latitude, geocoded.longitude),
                source="geocoder",
            )
            classification = self.classifier.classification(geocoded.administrative_area)

            nearest = ()
            if classification.region == OUTSIDE_REGION:
                nearest = nearest_k_query(reference.coordinate, self.facility_k, self.facilities)

            return RegionLookup(
                reference=reference,
                classification=classification,
                facilities=ResultSet(reference=reference, parameter=self.facility_k, results=nearest),
            )
