"""
Visitor Fetching Service.
Lists the site's users and downloads the visit profile of each one.
"""

import asyncio
import logging
from typing import List

from pydantic import ValidationError

from meetaura_stats.domain.entities.visit import Visitor
from meetaura_stats.errors import FetchError
from meetaura_stats.reporting.clients.api import PiwikClient
from meetaura_stats.reporting.models import PiwikUser, VisitorProfile

logger = logging.getLogger(__name__)

LIST_USERS_METHOD = 'UserId.getUsers'
VISITOR_PROFILE_METHOD = 'Live.getVisitorProfile'


class VisitorFetcher:
    """
    Two-stage fetch: the user list, then one profile request per user.
    Profile requests share a semaphore so at most ``max_concurrency`` are in flight.
    """

    def __init__(self, client: PiwikClient, max_concurrency: int = 10):
        self.client = client
        self.max_concurrency = max_concurrency

    async def list_users(self) -> List[PiwikUser]:
        body = await self.client.call(LIST_USERS_METHOD, {})
        if not isinstance(body, list):
            raise FetchError(f'{LIST_USERS_METHOD} did not return a list')
        try:
            return [PiwikUser.model_validate(entry) for entry in body]
        except ValidationError as e:
            raise FetchError(f'{LIST_USERS_METHOD} returned an unexpected user entry: {e}') from e

    async def fetch_profile(self, user: PiwikUser, semaphore: asyncio.Semaphore) -> Visitor:
        async with semaphore:
            body = await self.client.call(VISITOR_PROFILE_METHOD, {'visitorId': user.idvisitor})
        if not isinstance(body, dict):
            raise FetchError(f'{VISITOR_PROFILE_METHOD} for {user.idvisitor} did not return an object')
        try:
            profile = VisitorProfile.model_validate(body)
        except ValidationError as e:
            raise FetchError(f'{VISITOR_PROFILE_METHOD} for {user.idvisitor} is malformed: {e}') from e
        return profile.to_visitor(fallback_id=user.label or user.idvisitor)

    async def fetch_visitors(self) -> List[Visitor]:
        """
        Fetch every visitor with their visits, in user-list order.

        Raises:
            FetchError: If listing users or any single profile request fails.
                Profiles already downloaded are discarded and pending
                requests are cancelled.
        """
        users = await self.list_users()
        logger.info(f'Found {len(users)} users, fetching visitor profiles')

        semaphore = asyncio.Semaphore(self.max_concurrency)
        tasks = [asyncio.ensure_future(self.fetch_profile(user, semaphore)) for user in users]
        try:
            visitors = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        logger.info('All data recovered')
        return list(visitors)
