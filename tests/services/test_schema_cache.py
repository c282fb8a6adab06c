from wikibase_forms.models.schema import FormMode, Schema
from wikibase_forms.services.schema_cache import SchemaCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_entries_expire_after_ttl():
    clock = FakeClock()
    cache = SchemaCache(ttl=3600, clock=clock)
    schema = Schema()
    key = (FormMode.CREATE, "Q507", "default")

    cache.put(key, schema)
    clock.now += 3599
    assert cache.get(key) is schema

    clock.now += 1
    assert cache.get(key) is None
    assert len(cache) == 0


def test_invalidate():
    cache = SchemaCache(ttl=60, clock=FakeClock())
    cache.put("a", Schema())
    cache.put("b", Schema())

    cache.invalidate("a")
    assert cache.get("a") is None
    assert cache.get("b") is not None

    cache.invalidate()
    assert len(cache) == 0
