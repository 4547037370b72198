"""PostgreSQL change stream for the issue collection.

PostgreSQL has no document snapshot listener, so the stream polls a cheap
fingerprint of the collection and emits a full snapshot whenever it moves.
"""

import asyncio
from collections.abc import AsyncIterator
from typing import Any, List, Optional, Tuple

import logfire
from sqlalchemy import func, literal_column, select
from sqlalchemy.dialects.postgresql import aggregate_order_by
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from atlas.domain.repository import IssueChangeStream, IssueDocument
from atlas.persistence.repository.issue import fetch_issue_documents
from atlas.persistence.tables import issues_table


class PostgresIssueChangeStream(IssueChangeStream):
    """Polling change stream over the ``issues`` table.

    The fingerprint is the row count plus a digest of every row's ``xmin``.
    Each committed insert or update gives its row a new ``xmin`` and deletes
    change the count, so the fingerprint moves on every commit whatever
    order transactions finish in. Timestamps are not used: a transaction
    that stamped an earlier time can commit after a later one was seen.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        poll_interval: float = 2.0,
    ) -> None:
        """Initialize the stream.

        Args:
            session_factory: Factory for short-lived read sessions
            poll_interval: Seconds between fingerprint checks
        """
        self.session_factory = session_factory
        self.poll_interval = poll_interval

    async def fingerprint(self, session: AsyncSession) -> Tuple[Any, ...]:
        """Current ``(row count, row-version digest)`` of the issues table."""
        row_version = func.concat(
            issues_table.c.id, ":", literal_column("issues.xmin::text")
        )
        digest = func.md5(
            func.coalesce(
                func.string_agg(
                    row_version,
                    aggregate_order_by(literal_column("','"), issues_table.c.id),
                ),
                "",
            )
        )
        stmt = select(func.count(), digest).select_from(issues_table)
        result = await session.execute(stmt)
        row = result.one()
        return tuple(row)

    async def watch(self) -> AsyncIterator[List[IssueDocument]]:
        """Yield the full collection now and after every detected change."""
        last: Optional[Tuple[Any, ...]] = None
        while True:
            async with self.session_factory() as session:
                fingerprint = await self.fingerprint(session)
                if fingerprint != last:
                    documents = await fetch_issue_documents(session)
                    logfire.debug(
                        "Issue snapshot emitted",
                        count=len(documents),
                        fingerprint=str(fingerprint),
                    )
                    last = fingerprint
                    snapshot = documents
                else:
                    snapshot = None
            if snapshot is not None:
                yield snapshot
            await asyncio.sleep(self.poll_interval)
