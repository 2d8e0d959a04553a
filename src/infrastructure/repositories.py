"""
Persistence access for itineraries and routes.

Covers the query patterns the engine needs: find-by-owner, find-by-itinerary,
bulk find-by-id-set, bulk route existence, delete-by-itinerary, and the
compute-then-replace write of a full route set.
"""
import logging
from datetime import datetime
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.models import (
    Itinerary,
    ItineraryStatus,
    Route,
    RouteMetadata,
    RouteType,
)
from src.infrastructure.models import ItineraryModel, RouteModel

logger = logging.getLogger(__name__)


# --- ORM <-> domain conversion ---

def itinerary_from_model(model: ItineraryModel) -> Itinerary:
    """Convert ItineraryModel (ORM) to the Itinerary domain model."""
    return Itinerary(
        id=model.id,
        user_id=model.user_id,
        trip_name=model.trip_name,
        start_date=model.start_date,
        end_date=model.end_date,
        start_location=model.start_location,
        end_location=model.end_location,
        destinations=model.destinations or [],
        preferences=model.preferences or {},
        day_plans=model.day_plans or [],
        status=model.status,
        selected_route_id=model.selected_route_id,
        total_estimated_cost=model.total_estimated_cost or {},
        booking_ids=model.booking_ids,
        is_public=bool(model.is_public),
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def apply_itinerary_to_model(itinerary: Itinerary, model: ItineraryModel) -> ItineraryModel:
    """Copy domain itinerary fields onto an ORM row (JSON columns get plain dicts)."""
    model.user_id = itinerary.user_id
    model.trip_name = itinerary.trip_name
    model.start_date = itinerary.start_date
    model.end_date = itinerary.end_date
    model.start_location = (
        itinerary.start_location.model_dump(mode="json") if itinerary.start_location else None
    )
    model.end_location = (
        itinerary.end_location.model_dump(mode="json") if itinerary.end_location else None
    )
    model.destinations = [d.model_dump(mode="json") for d in itinerary.destinations]
    model.preferences = itinerary.preferences.model_dump(mode="json")
    model.day_plans = [day.model_dump(mode="json") for day in itinerary.day_plans]
    model.status = itinerary.status
    model.selected_route_id = itinerary.selected_route_id
    model.total_estimated_cost = itinerary.total_estimated_cost.model_dump(mode="json")
    model.booking_ids = itinerary.booking_ids.model_dump(mode="json") if itinerary.booking_ids else None
    model.is_public = itinerary.is_public
    return model


def route_from_model(model: RouteModel) -> Route:
    """Convert RouteModel (ORM) to the Route domain model."""
    return Route(
        id=model.id,
        itinerary_id=model.itinerary_id,
        route_type=model.route_type,
        total_distance=model.total_distance,
        total_duration=model.total_duration,
        waypoints=model.waypoints or [],
        segments=model.segments or [],
        overview=model.overview or {},
        attractions=model.attractions or [],
        estimated_costs=model.estimated_costs,
        score=model.score,
        metadata=RouteMetadata(
            calculated_at=model.calculated_at,
            google_maps_url=model.google_maps_url,
        ),
    )


def route_to_model(route: Route) -> RouteModel:
    """Build a new RouteModel row from a computed Route."""
    return RouteModel(
        id=route.id,
        itinerary_id=route.itinerary_id,
        route_type=route.route_type,
        total_distance=route.total_distance,
        total_duration=route.total_duration,
        waypoints=[wp.model_dump(mode="json") for wp in route.waypoints],
        segments=[seg.model_dump(mode="json") for seg in route.segments],
        overview=route.overview.model_dump(mode="json"),
        attractions=[a.model_dump(mode="json") for a in route.attractions],
        estimated_costs=route.estimated_costs.model_dump(mode="json"),
        score=route.score,
        calculated_at=route.metadata.calculated_at,
        google_maps_url=route.metadata.google_maps_url,
    )


class ItineraryRepository:
    """Reads and writes itinerary rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_model(self, itinerary_id: UUID) -> Optional[ItineraryModel]:
        result = await self.db.execute(
            select(ItineraryModel).where(ItineraryModel.id == itinerary_id)
        )
        return result.scalar_one_or_none()

    async def get(self, itinerary_id: UUID) -> Optional[Itinerary]:
        model = await self.get_model(itinerary_id)
        return itinerary_from_model(model) if model else None

    async def list_by_owner(
        self,
        user_id: str,
        status: Optional[ItineraryStatus] = None,
    ) -> list[Itinerary]:
        """All itineraries of a user, newest first, optionally filtered by status."""
        query = select(ItineraryModel).where(ItineraryModel.user_id == user_id)
        if status is not None:
            query = query.where(ItineraryModel.status == status)
        query = query.order_by(ItineraryModel.created_at.desc())

        result = await self.db.execute(query)
        return [itinerary_from_model(m) for m in result.scalars().all()]

    async def add(self, itinerary: Itinerary) -> Itinerary:
        model = apply_itinerary_to_model(itinerary, ItineraryModel(id=itinerary.id))
        model.created_at = itinerary.created_at
        model.updated_at = itinerary.updated_at
        self.db.add(model)
        await self.db.flush()
        return itinerary_from_model(model)

    async def save(self, itinerary: Itinerary) -> Itinerary:
        model = await self.get_model(itinerary.id)
        if model is None:
            return await self.add(itinerary)
        apply_itinerary_to_model(itinerary, model)
        model.updated_at = datetime.utcnow()
        await self.db.flush()
        return itinerary_from_model(model)

    async def delete(self, itinerary_id: UUID) -> None:
        await self.db.execute(delete(RouteModel).where(RouteModel.itinerary_id == itinerary_id))
        await self.db.execute(delete(ItineraryModel).where(ItineraryModel.id == itinerary_id))


class RouteRepository:
    """Reads and writes route rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, route_id: UUID) -> Optional[Route]:
        result = await self.db.execute(select(RouteModel).where(RouteModel.id == route_id))
        model = result.scalar_one_or_none()
        return route_from_model(model) if model else None

    async def list_for_itinerary(self, itinerary_id: UUID) -> list[Route]:
        """Routes of one itinerary, best score first."""
        result = await self.db.execute(
            select(RouteModel)
            .where(RouteModel.itinerary_id == itinerary_id)
            .order_by(RouteModel.score.desc())
        )
        return [route_from_model(m) for m in result.scalars().all()]

    async def get_many(self, route_ids: Iterable[UUID]) -> dict[UUID, Route]:
        """Bulk fetch by id set: one query regardless of how many ids are asked for."""
        ids = {rid for rid in route_ids if rid is not None}
        if not ids:
            return {}
        result = await self.db.execute(select(RouteModel).where(RouteModel.id.in_(ids)))
        return {m.id: route_from_model(m) for m in result.scalars().all()}

    async def count_by_itinerary(self, itinerary_ids: Iterable[UUID]) -> dict[UUID, int]:
        """Number of stored routes per itinerary, in one grouped query."""
        ids = set(itinerary_ids)
        if not ids:
            return {}
        result = await self.db.execute(
            select(RouteModel.itinerary_id, func.count(RouteModel.id))
            .where(RouteModel.itinerary_id.in_(ids))
            .group_by(RouteModel.itinerary_id)
        )
        return {itinerary_id: count for itinerary_id, count in result.all()}

    async def delete_for_itinerary(self, itinerary_id: UUID) -> int:
        result = await self.db.execute(
            delete(RouteModel).where(RouteModel.itinerary_id == itinerary_id)
        )
        return result.rowcount or 0

    async def replace_routes(self, itinerary_id: UUID, routes: list[Route]) -> list[Route]:
        """
        Replace the whole route set of an itinerary.

        Deletes every stored route for the itinerary, inserts the new ones and
        points the itinerary's selection at the new recommended route. Runs in
        the session's transaction and commits once, so a failure before the
        commit leaves the previous set untouched.

        Args:
            itinerary_id: Itinerary the routes belong to
            routes: Freshly computed routes, one per RouteType

        Returns:
            The persisted routes
        """
        try:
            deleted = await self.delete_for_itinerary(itinerary_id)
            logger.info(f"Deleted {deleted} old routes for itinerary {itinerary_id}")

            models = [route_to_model(route) for route in routes]
            self.db.add_all(models)
            await self.db.flush()

            recommended = next(
                (r for r in routes if r.route_type == RouteType.RECOMMENDED),
                None,
            )
            itinerary = await self.db.get(ItineraryModel, itinerary_id)
            if itinerary is not None:
                itinerary.selected_route_id = recommended.id if recommended else None
                itinerary.updated_at = datetime.utcnow()

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Saved {len(routes)} routes for itinerary {itinerary_id}")
        return [route_from_model(m) for m in models]
