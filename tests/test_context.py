"""Tests for the shared refresh context"""
import threading

import pytest

from cloudconfig.core.context import ConfigContext
from cloudconfig.models.config import Configuration


def _config(instance: str, version: str) -> Configuration:
    return Configuration.model_validate({
        'client': {'chainedServers': [{'addr': f'{instance}:443'}]},
        'instanceid': instance,
        'firetweetversion': version,
    })


@pytest.mark.unit
class TestETagCache:
    """Test ETag accessors"""

    def test_empty_at_startup(self, context):
        assert context.etag is None

    def test_set_etag(self, context):
        context.set_etag('abc123')

        assert context.etag == 'abc123'

    def test_empty_header_clears_cache(self, context):
        """Test a 200 without ETag disables conditional requests"""
        context.set_etag('abc123')
        context.set_etag('')

        assert context.etag is None

    def test_staged_etag_needs_commit(self, context):
        context.set_etag('old')
        context.stage_etag('new')

        assert context.etag == 'old'
        assert context.commit_etag() is True
        assert context.etag == 'new'

    def test_discarded_etag_never_commits(self, context):
        context.set_etag('old')
        context.stage_etag('new')
        context.discard_staged_etag()

        assert context.commit_etag() is False
        assert context.etag == 'old'

    def test_commit_without_stage_is_noop(self, context):
        context.set_etag('old')

        assert context.commit_etag() is False
        assert context.etag == 'old'


@pytest.mark.unit
class TestConfigSwap:
    """Test whole-object replacement"""

    def test_swap_returns_previous(self, context, default_config):
        new = _config('b', '2')

        previous = context.swap(new)

        assert previous is default_config
        assert context.config is new

    def test_readers_only_see_whole_snapshots(self):
        """Test concurrent readers never observe fields from two configurations"""
        first = _config('a', '1')
        second = _config('b', '2')
        allowed = {('a', '1', 'a:443'), ('b', '2', 'b:443')}
        context = ConfigContext(first)
        stop = threading.Event()
        seen = set()

        def reader():
            while not stop.is_set():
                config = context.config
                seen.add((config.instance_id, config.firetweet_version, config.client.chained_servers[0].addr))

        threads = [threading.Thread(target=reader) for _ in range(4)]
        for t in threads:
            t.start()
        for i in range(2000):
            context.swap(second if i % 2 == 0 else first)
        stop.set()
        for t in threads:
            t.join()

        assert seen
        assert seen <= allowed
