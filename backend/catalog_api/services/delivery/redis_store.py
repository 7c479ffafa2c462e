# backend/catalog_api/services/delivery/redis_store.py
"""
Redis cache of resolved day schedules.

Key format: delivery:day:{company_id}:g{generation}:{date}
Value: JSON of EffectiveDaySchedule (enabled flags, windows, max capacities).

Generation key: delivery:gen:{company_id}, bumped on every invalidation.
A listing reads the generation before resolving from the database and
writes under that generation, so a write racing with an invalidation
lands under a key nobody reads any more.

Only configuration is cached. Slot counters are always read from the
database, and reservations never read this cache.
"""

import json
from datetime import date
from redis import Redis

from .config import DeliveryConfig, get_delivery_config
from .types import EffectiveDaySchedule


class DeliveryRedisStore:
    """Redis storage wrapper for resolved day schedules."""

    KEY_PREFIX = "delivery:day"
    GENERATION_PREFIX = "delivery:gen"

    def __init__(self, redis: Redis, config: DeliveryConfig | None = None):
        self.redis = redis
        self.config = config or get_delivery_config()

    def _key(self, company_id: int, dt: date, generation: int) -> str:
        return f"{self.KEY_PREFIX}:{company_id}:g{generation}:{dt.isoformat()}"

    # ── Generation ───────────────────────────────────────────────────────

    def get_generation(self, company_id: int) -> int:
        raw = self.redis.get(f"{self.GENERATION_PREFIX}:{company_id}")
        return int(raw) if raw is not None else 0

    def bump_generation(self, company_id: int) -> int:
        return int(self.redis.incr(f"{self.GENERATION_PREFIX}:{company_id}"))

    # ── Write ────────────────────────────────────────────────────────────

    def store_day(
        self,
        company_id: int,
        schedule: EffectiveDaySchedule,
        generation: int | None = None,
    ) -> None:
        if generation is None:
            generation = self.get_generation(company_id)
        self.redis.set(
            self._key(company_id, schedule.date, generation),
            json.dumps(schedule.to_dict()),
            ex=self.config.cache_ttl_seconds,
        )

    def store_multiple_days(
        self,
        company_id: int,
        schedules: list[EffectiveDaySchedule],
        generation: int | None = None,
    ) -> None:
        """Batch store via pipeline."""
        if not schedules:
            return
        if generation is None:
            generation = self.get_generation(company_id)

        pipe = self.redis.pipeline()
        for schedule in schedules:
            pipe.set(
                self._key(company_id, schedule.date, generation),
                json.dumps(schedule.to_dict()),
                ex=self.config.cache_ttl_seconds,
            )
        pipe.execute()

    # ── Read ─────────────────────────────────────────────────────────────

    def get_day(self, company_id: int, dt: date) -> EffectiveDaySchedule | None:
        """Cached schedule of the current generation, or None on cache miss."""
        raw = self.redis.get(self._key(company_id, dt, self.get_generation(company_id)))
        if raw is None:
            return None
        return EffectiveDaySchedule.from_dict(json.loads(raw))

    def mget_days(
        self,
        company_id: int,
        dates: list[date],
        generation: int | None = None,
    ) -> dict[date, EffectiveDaySchedule | None]:
        """
        Batch get schedules for multiple dates.

        Returns:
            Dict mapping date → schedule (or None on cache miss).
        """
        if not dates:
            return {}
        if generation is None:
            generation = self.get_generation(company_id)

        raw_values = self.redis.mget([self._key(company_id, dt, generation) for dt in dates])
        return {
            dt: EffectiveDaySchedule.from_dict(json.loads(raw)) if raw is not None else None
            for dt, raw in zip(dates, raw_values)
        }

    # ── Delete ───────────────────────────────────────────────────────────

    def delete_days(
        self,
        company_id: int,
        dates: list[date] | None = None,
    ) -> int:
        """
        Delete cached schedules.

        Args:
            company_id: Company ID
            dates: Specific dates of the current generation,
                   or None to delete every generation for the company.

        Returns:
            Number of deleted keys.
        """
        if dates:
            generation = self.get_generation(company_id)
            keys = [self._key(company_id, dt, generation) for dt in dates]
        else:
            keys = self.redis.keys(f"{self.KEY_PREFIX}:{company_id}:*")

        if not keys:
            return 0

        return self.redis.delete(*keys)
