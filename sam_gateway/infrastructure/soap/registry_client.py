"""SAM registry client.

Single entry point used by the query handlers: validates and builds the
envelope, serves live cached response text and otherwise sends the envelope
and caches the validated answer.

Components:
- SamEnvelopeBuilder: Builds SOAP envelopes
- ResponseCache: Per-data-class response cache
- SamTransportClient: Async HTTP transport
- SamResponseParser: Parses SOAP responses into raw records
"""
from __future__ import annotations

import logging
from typing import Optional

from sam_gateway.domain.value_objects.cache_policy import CachePolicy
from sam_gateway.infrastructure.cache.response_cache import ResponseCache
from sam_gateway.infrastructure.soap.envelope_builder import SamEnvelopeBuilder, SearchParams
from sam_gateway.infrastructure.soap.operations import get_operation
from sam_gateway.infrastructure.soap.response_parser import ParsedResponse, SamResponseParser
from sam_gateway.infrastructure.soap.transport_client import SamTransportClient

logger = logging.getLogger(__name__)


class SamRegistryClient:
    def __init__(
        self,
        transport: SamTransportClient,
        cache: ResponseCache,
        builder: Optional[SamEnvelopeBuilder] = None,
        parser: Optional[SamResponseParser] = None,
    ):
        self._transport = transport
        self._cache = cache
        self._builder = builder or SamEnvelopeBuilder()
        self._parser = parser or SamResponseParser()

    async def execute(self, operation: str, params: SearchParams) -> ParsedResponse:
        """Run ``operation`` with ``params``.

        Parameter errors are raised before the cache or the network is
        touched. Transport and parse failures propagate and are not cached.
        The cache holds the response text, which is parsed again on every
        call.
        """
        sam_operation = get_operation(operation)
        envelope = self._builder.build(sam_operation.name, params)

        async def fetch() -> str:
            xml_text = await self._transport.send(envelope, sam_operation.name)
            parsed = self._parser.parse(xml_text, sam_operation)
            logger.info(
                "%s returned %s records",
                sam_operation.name,
                len(parsed.records),
                extra={"operation": sam_operation.name, "records": len(parsed.records)},
            )
            return xml_text

        xml_text = await self._cache.get_or_fetch(sam_operation.name, params, sam_operation.data_class, fetch)
        return self._parser.parse(xml_text, sam_operation)

    def cache_policy(self, operation: str) -> CachePolicy:
        return self._cache.policy_for(get_operation(operation).data_class)

    async def close(self) -> None:
        await self._transport.close()
