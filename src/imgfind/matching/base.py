from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, List, TypeVar

from ..types import MatchRequest, MatchResult, NeedKind, Region

NeedleT = TypeVar("NeedleT")


class ImageFinder(ABC, Generic[NeedleT]):
    """
    Capability shared by every matcher the provider registry can hold.

    Implementations differ only in the needle they accept (an image, a text
    query, a window title); requests and results have the same shape.
    ``find_matches`` raises on invalid requests while ``find_match`` never
    raises and reports failures through ``MatchResult.error``.
    """

    need_kind: ClassVar[NeedKind]

    @abstractmethod
    def find_match(self, request: MatchRequest[NeedleT, Any]) -> MatchResult[Region]:
        """
        Return the single best match, or a zero-confidence result carrying the error.
        """

    @abstractmethod
    def find_matches(self, request: MatchRequest[NeedleT, Any]) -> List[MatchResult[Region]]:
        """
        Return every match at or above the request's confidence threshold.
        """

    async def find_match_async(self, request: MatchRequest[NeedleT, Any]) -> MatchResult[Region]:
        return await asyncio.to_thread(self.find_match, request)

    async def find_matches_async(
        self, request: MatchRequest[NeedleT, Any]
    ) -> List[MatchResult[Region]]:
        return await asyncio.to_thread(self.find_matches, request)


__all__ = ["ImageFinder"]
