import pytest

from types import SimpleNamespace

from relay.core.cache.cache import Cache
from relay.core.cache.errors import (
    CacheError,
    EntityLookupError,
    FetchFailedError,
    MissingEntryError,
    NilProviderError
)

class TestCache:
    """Tests for the cache facade"""

    @pytest.fixture
    def cache(self, provider, relay_config):
        """Create a cache over the stub provider"""
        return Cache(provider, relay_config)

    @pytest.fixture
    def descriptor(self):
        return SimpleNamespace(
            url="https://cdn.example.com/attachments/1/2/circuit_diagram.png",
            filename="circuit_diagram.png",
            content_type="image/png"
        )

    class TestConstructionFunctionality:
        """Tests for cache construction"""

        def test_nil_provider(self, relay_config):
            """Test that a missing provider is rejected"""
            with pytest.raises(NilProviderError):
                Cache(None, relay_config)

        def test_nil_provider_is_not_recoverable_cache_error(self):
            """Test that handlers catching cache errors do not catch misuse"""
            assert not issubclass(NilProviderError, CacheError)
            assert issubclass(NilProviderError, TypeError)

        @pytest.mark.asyncio
        async def test_instances_are_independent(self, provider, relay_config):
            """Test that two caches never share entries"""
            first = Cache(provider, relay_config)
            second = Cache(provider, relay_config)

            await first.channel("1234")

            assert "1234" in first.channel_cache
            assert "1234" not in second.channel_cache

    class TestLookupFunctionality:
        """Tests for entity lookups"""

        @pytest.mark.asyncio
        async def test_channel(self, cache, provider):
            channel = await cache.channel("1234")
            assert channel["guild_id"] == "9101112"

            await cache.channel("1234")
            assert provider.calls["channel"] == 1

        @pytest.mark.asyncio
        async def test_user(self, cache, provider):
            user = await cache.user("5678")
            assert user["username"] == "Testing User"

            await cache.user("5678")
            assert provider.calls["user"] == 1

        @pytest.mark.asyncio
        async def test_guild(self, cache, provider):
            guild = await cache.guild("9101112")
            assert guild["owner_id"] == "5678"

            await cache.guild("9101112")
            assert provider.calls["guild"] == 1

        @pytest.mark.asyncio
        @pytest.mark.parametrize("kind", ["channel", "user", "guild"])
        async def test_unknown_ids(self, cache, provider, kind):
            """Test that unknown IDs fail every time and are never stored"""
            lookup = getattr(cache, kind)

            for _ in range(2):
                with pytest.raises(EntityLookupError):
                    await lookup("abcd")

            assert provider.calls[kind] == 2
            assert "abcd" not in getattr(cache, f"{kind}_cache")

        @pytest.mark.asyncio
        async def test_kinds_are_separate(self, cache):
            """Test that an ID cached as one kind is unknown to another"""
            await cache.channel("1234")

            with pytest.raises(EntityLookupError):
                await cache.user("1234")

    class TestInvalidationFunctionality:
        """Tests for invalidation"""

        @pytest.mark.asyncio
        async def test_invalidate_channel(self, cache, provider):
            await cache.channel("1234")
            await cache.invalidate_channel("1234")

            with pytest.raises(MissingEntryError):
                await cache.invalidate_channel("1234")

            await cache.channel("1234")
            assert provider.calls["channel"] == 2

        @pytest.mark.asyncio
        async def test_invalidate_user(self, cache):
            await cache.user("5678")
            await cache.invalidate_user("5678")

            with pytest.raises(MissingEntryError):
                await cache.invalidate_user("5678")

        @pytest.mark.asyncio
        async def test_invalidate_guild(self, cache):
            await cache.guild("9101112")
            await cache.invalidate_guild("9101112")

            with pytest.raises(MissingEntryError):
                await cache.invalidate_guild("9101112")

    class TestAttachmentFunctionality:
        """Tests for attachment lookups"""

        @pytest.mark.asyncio
        async def test_attachment(self, cache, descriptor, session_factory):
            """Test downloading an attachment through its descriptor"""
            cache.attachment_cache.session = session_factory(body=b"diagram")

            attachment = await cache.attachment(descriptor)

            assert attachment.name == "circuit_diagram.png"
            assert attachment.content_type == "image/png"
            assert attachment.content == b"diagram"

            await cache.attachment(descriptor)
            cache.attachment_cache.session.get.assert_called_once_with(descriptor.url)

        @pytest.mark.asyncio
        async def test_attachment_failure(self, cache, descriptor, session_factory):
            cache.attachment_cache.session = session_factory(status=403)

            with pytest.raises(FetchFailedError):
                await cache.attachment(descriptor)

            assert descriptor.url not in cache.attachment_cache

        @pytest.mark.asyncio
        async def test_clean_attachments(self, cache, descriptor, session_factory):
            """Test that cleaning goes through to the attachment cache"""
            cache.attachment_cache.session = session_factory()
            cache.attachment_cache.prune_threshold = 0

            await cache.attachment(descriptor)

            assert await cache.clean_attachments() == 1
            assert len(cache.attachment_cache) == 0

        @pytest.mark.asyncio
        async def test_close(self, cache, session_factory):
            session = session_factory()
            cache.attachment_cache.session = session

            await cache.close()

            session.close.assert_awaited_once()
