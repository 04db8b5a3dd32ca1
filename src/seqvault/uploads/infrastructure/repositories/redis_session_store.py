"""Redis upload session store.

Sessions live in Redis so every API worker shares them. Layout per
session (``<prefix><upload_id>``):

- ``<key>``           HASH  ``data`` (JSON session) and ``status``
- ``<key>:received``  SET   received chunk indices
- ``<key>:reserved``  SET   indices claimed by in-flight writes

plus one sorted set ``<prefix>expiry`` scoring upload ids by expiry.
Mutations run as Lua scripts so each is atomic on the server. Keys carry
a Redis TTL of the session expiry plus a grace period, so abandoned data
disappears even when no sweeper runs.
"""

import json
import logging
from datetime import datetime
from typing import Iterable, List, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from ....core.exceptions import ServiceUnavailableError
from ....utils.datetime import utc_now
from ...core.entities import UploadSession
from ...core.value_objects import UploadStatus

logger = logging.getLogger(__name__)

KEY_GRACE_SECONDS = 3600

# KEYS: session, received, reserved   ARGV: index, accepting statuses...
_RESERVE_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 0 then return -1 end
local status = redis.call('HGET', KEYS[1], 'status')
local accepting = false
for i = 2, #ARGV do
  if ARGV[i] == status then accepting = true end
end
if not accepting then return -2 end
if redis.call('SISMEMBER', KEYS[2], ARGV[1]) == 1 then return 0 end
if redis.call('SADD', KEYS[3], ARGV[1]) == 0 then return 0 end
return 1
"""

# KEYS: session, received, reserved
# ARGV: index, total, uploading, all_uploaded, ttl, accepting statuses...
_COMMIT_SCRIPT = """
redis.call('SREM', KEYS[3], ARGV[1])
if redis.call('EXISTS', KEYS[1]) == 0 then return nil end
local status = redis.call('HGET', KEYS[1], 'status')
local accepting = false
for i = 6, #ARGV do
  if ARGV[i] == status then accepting = true end
end
if not accepting then return nil end
redis.call('SADD', KEYS[2], ARGV[1])
local ttl = tonumber(ARGV[5])
if ttl > 0 then redis.call('EXPIRE', KEYS[2], ttl) end
local new_status = ARGV[3]
if redis.call('SCARD', KEYS[2]) >= tonumber(ARGV[2]) then new_status = ARGV[4] end
redis.call('HSET', KEYS[1], 'status', new_status)
return new_status
"""

# KEYS: session   ARGV: to_status, from statuses...
_TRANSITION_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 0 then return 0 end
local status = redis.call('HGET', KEYS[1], 'status')
for i = 2, #ARGV do
  if ARGV[i] == status then
    redis.call('HSET', KEYS[1], 'status', ARGV[1])
    return 1
  end
end
return 0
"""

_ACCEPTING = [s.value for s in (UploadStatus.INITIATED, UploadStatus.UPLOADING)]


class RedisUploadSessionStore:
    """Upload session store shared across processes through Redis."""

    def __init__(self, redis_client: redis.Redis, key_prefix: str = "seqvault:upload:"):
        self._redis = redis_client
        self._prefix = key_prefix
        self._expiry_index = f"{key_prefix}expiry"

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "seqvault:upload:") -> 'RedisUploadSessionStore':
        return cls(redis.from_url(url, decode_responses=True), key_prefix)

    async def close(self) -> None:
        await self._redis.aclose()

    # Keys

    def _key(self, upload_id: str) -> str:
        return f"{self._prefix}{upload_id}"

    def _keys(self, upload_id: str) -> List[str]:
        key = self._key(upload_id)
        return [key, f"{key}:received", f"{key}:reserved"]

    @staticmethod
    def _ttl_seconds(session: UploadSession, now: Optional[datetime] = None) -> int:
        now = now or session.created_at
        return max(int((session.expires_at - now).total_seconds()), 1) + KEY_GRACE_SECONDS

    async def _hydrate(self, upload_id: str) -> Optional[UploadSession]:
        key, received_key, _ = self._keys(upload_id)
        pipe = self._redis.pipeline(transaction=True)
        pipe.hgetall(key)
        pipe.smembers(received_key)
        record, received = await pipe.execute()
        if not record or "data" not in record:
            return None
        data = json.loads(record["data"])
        data["status"] = record.get("status", data["status"])
        data["received_chunks"] = [int(i) for i in received]
        return UploadSession.from_dict(data)

    # Protocol

    async def create(self, session: UploadSession) -> None:
        key = self._key(session.upload_id)
        ttl = self._ttl_seconds(session)
        payload = session.to_dict()
        payload.pop("received_chunks")
        try:
            pipe = self._redis.pipeline(transaction=True)
            pipe.hset(key, mapping={"data": json.dumps(payload), "status": session.status.value})
            pipe.expire(key, ttl)
            pipe.zadd(self._expiry_index, {session.upload_id: session.expires_at.timestamp()})
            await pipe.execute()
        except RedisError as e:
            raise ServiceUnavailableError(f"Failed to create upload session: {e}") from e

    async def get(self, upload_id: str) -> Optional[UploadSession]:
        try:
            return await self._hydrate(upload_id)
        except RedisError as e:
            raise ServiceUnavailableError(f"Failed to load upload session: {e}") from e

    async def delete(self, upload_id: str) -> bool:
        try:
            pipe = self._redis.pipeline(transaction=True)
            pipe.delete(*self._keys(upload_id))
            pipe.zrem(self._expiry_index, upload_id)
            deleted, _ = await pipe.execute()
            return deleted > 0
        except RedisError as e:
            raise ServiceUnavailableError(f"Failed to delete upload session: {e}") from e

    async def reserve_chunk(self, upload_id: str, chunk_index: int) -> bool:
        try:
            result = await self._redis.eval(
                _RESERVE_SCRIPT, 3, *self._keys(upload_id), str(chunk_index), *_ACCEPTING
            )
        except RedisError as e:
            raise ServiceUnavailableError(f"Failed to reserve chunk: {e}") from e
        if int(result) == 1:
            reserved_key = self._keys(upload_id)[2]
            await self._redis.expire(reserved_key, KEY_GRACE_SECONDS)
            return True
        return False

    async def release_chunk(self, upload_id: str, chunk_index: int) -> None:
        try:
            await self._redis.srem(self._keys(upload_id)[2], str(chunk_index))
        except RedisError as e:
            logger.warning(f"Failed to release chunk {chunk_index} of {upload_id}: {e}")

    async def commit_chunk(self, upload_id: str, chunk_index: int) -> Optional[UploadSession]:
        session = await self.get(upload_id)
        if session is None:
            return None
        try:
            result = await self._redis.eval(
                _COMMIT_SCRIPT,
                3,
                *self._keys(upload_id),
                str(chunk_index),
                str(session.total_chunks),
                UploadStatus.UPLOADING.value,
                UploadStatus.ALL_CHUNKS_UPLOADED.value,
                str(self._ttl_seconds(session, utc_now())),
                *_ACCEPTING,
            )
        except RedisError as e:
            raise ServiceUnavailableError(f"Failed to commit chunk: {e}") from e
        if result is None:
            return None
        return await self.get(upload_id)

    async def transition(
        self,
        upload_id: str,
        from_statuses: Iterable[UploadStatus],
        to_status: UploadStatus,
    ) -> Optional[UploadSession]:
        legal = [s.value for s in from_statuses if s.can_transition_to(to_status)]
        if not legal:
            return None
        try:
            swapped = await self._redis.eval(
                _TRANSITION_SCRIPT,
                1,
                self._key(upload_id),
                to_status.value,
                *legal,
            )
        except RedisError as e:
            raise ServiceUnavailableError(f"Failed to transition upload session: {e}") from e
        if int(swapped) != 1:
            return None
        return await self.get(upload_id)

    async def sweep_expired(self, now: datetime) -> List[UploadSession]:
        try:
            candidates = await self._redis.zrangebyscore(self._expiry_index, "-inf", now.timestamp())
        except RedisError as e:
            raise ServiceUnavailableError(f"Failed to scan expired sessions: {e}") from e

        swept: List[UploadSession] = []
        for upload_id in candidates:
            session = await self.get(upload_id)
            if session is None:
                await self._redis.zrem(self._expiry_index, upload_id)
                continue
            if session.status is UploadStatus.PROCESSING:
                continue
            if await self.delete(upload_id):
                swept.append(session)
        if swept:
            logger.info(f"Swept {len(swept)} expired upload sessions from Redis")
        return swept

    async def list_upload_ids(self) -> List[str]:
        try:
            return list(await self._redis.zrange(self._expiry_index, 0, -1))
        except RedisError as e:
            raise ServiceUnavailableError(f"Failed to list upload sessions: {e}") from e
