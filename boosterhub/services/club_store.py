"""
Club Store
Read and write access to booster club rows
"""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncConnection

from boosterhub.models.club import booster_clubs


class ClubStore:
    """Persistence for club records; inactive clubs are invisible to lookups"""

    def __init__(self, connection: AsyncConnection):
        self.connection = connection

    async def commit(self) -> None:
        await self.connection.commit()

    async def get_active(self, club_id: UUID) -> Optional[dict]:
        """Get an active club by ID"""
        result = await self.connection.execute(
            select(booster_clubs).where(
                and_(booster_clubs.c.id == club_id, booster_clubs.c.is_active.is_(True))
            )
        )
        club = result.mappings().first()
        return dict(club) if club else None

    async def get_active_by_name(self, name: str) -> Optional[dict]:
        """Get an active club by its display name"""
        result = await self.connection.execute(
            select(booster_clubs).where(
                and_(booster_clubs.c.name == name, booster_clubs.c.is_active.is_(True))
            )
        )
        club = result.mappings().first()
        return dict(club) if club else None

    async def list_active(self) -> List[dict]:
        """Active clubs in display order: sort order, ties broken by name"""
        result = await self.connection.execute(
            select(booster_clubs)
            .where(booster_clubs.c.is_active.is_(True))
            .order_by(booster_clubs.c.sort_order, booster_clubs.c.name)
        )
        return [dict(club) for club in result.mappings()]

    async def update_payment_fields(self, club_id: UUID, values: dict) -> None:
        """Write payment columns for a club; the caller commits"""
        await self.connection.execute(
            booster_clubs.update()
            .where(booster_clubs.c.id == club_id)
            .values(**values, updated_at=values.get("last_payment_update_at") or datetime.now(timezone.utc))
        )

    async def payment_status_counts(self) -> dict:
        """Count active clubs by payment readiness"""
        active = booster_clubs.c.is_active.is_(True)

        def has_value(column):
            return and_(column.is_not(None), column != "")

        def count_where(condition):
            return select(func.count()).select_from(booster_clubs).where(condition).correlate(None).scalar_subquery()

        result = await self.connection.execute(
            select(
                count_where(active).label("total_clubs"),
                count_where(and_(active, has_value(booster_clubs.c.zelle_url))).label("clubs_with_zelle"),
                count_where(and_(active, has_value(booster_clubs.c.stripe_url))).label("clubs_with_stripe"),
                count_where(and_(active, booster_clubs.c.is_payment_enabled.is_(True))).label("payment_enabled"),
            )
        )
        counts = result.mappings().one()
        return {key: counts[key] or 0 for key in counts.keys()}
