import threading

from newsel.models import SiteConfig
from newsel.storage import SiteConfigStore


def make_config(domain, priority=1, enabled=True, name=''):
    return SiteConfig(domain=domain, priority=priority, enabled=enabled, name=name)


def test_configs_are_ordered_by_priority():
    store = SiteConfigStore([make_config('c.cl', 3), make_config('a.cl', 2), make_config('b.cl', 1)])

    assert [c.domain for c in store.all()] == ['b.cl', 'a.cl', 'c.cl']


def test_put_inserts_and_replaces_in_priority_order():
    store = SiteConfigStore([make_config('a.cl', 2)])
    store.put(make_config('b.cl', 1))
    store.put(make_config('a.cl', 0, name='renamed'))

    assert [c.domain for c in store.all()] == ['a.cl', 'b.cl']
    assert store.get('a.cl').name == 'renamed'
    assert len(store) == 2


def test_get_normalizes_the_lookup_key():
    store = SiteConfigStore([make_config('example.com')])

    assert store.get('https://www.Example.com/news').domain == 'example.com'
    assert 'WWW.example.com' in store
    assert 'other.com' not in store


def test_find_for_url_prefers_the_most_specific_domain():
    store = SiteConfigStore([make_config('site.cl', 1), make_config('site.cl/deportes', 5)])

    assert store.find_for_url('https://www.site.cl/deportes/futbol').domain == 'site.cl/deportes'
    assert store.find_for_url('https://site.cl/politica').domain == 'site.cl'
    assert store.find_for_url('https://other.cl/') is None


def test_find_for_url_skips_disabled_configs():
    store = SiteConfigStore([make_config('site.cl'), make_config('site.cl/deportes', enabled=False)])

    assert store.find_for_url('https://site.cl/deportes/x').domain == 'site.cl'
    assert store.find_for_url('https://site.cl/deportes/x', enabled_only=False).domain == 'site.cl/deportes'


def test_enabled_only_listing():
    store = SiteConfigStore([make_config('a.cl'), make_config('b.cl', enabled=False)])

    assert [c.domain for c in store.all(enabled_only=True)] == ['a.cl']


def test_readers_keep_their_snapshot_during_writes():
    store = SiteConfigStore([make_config('a.cl')])
    snapshot = store.snapshot()

    store.replace_all([make_config('b.cl')])

    assert list(snapshot) == ['a.cl']
    assert list(store.snapshot()) == ['b.cl']


def test_concurrent_puts_are_not_lost():
    store = SiteConfigStore()
    threads = [threading.Thread(target=store.put, args=(make_config(f's{i}.cl'),)) for i in range(20)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(store) == 20
