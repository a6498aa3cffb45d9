import threading
import unittest

from integral_engine.engine.cache import CacheKey, ResultCache
from integral_engine.engine.errors import EvalError
from integral_engine.engine.quadrature import IntegrationResult


def _result(value: float) -> IntegrationResult:
    return IntegrationResult(value=value, points=((0.0, value),), steps=100, estimated_error=0.0)


def _key(expression: str, method: str = "trapezoid") -> CacheKey:
    return CacheKey(expression, 0.0, 1.0, 100, method)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class ResultCacheTestCase(unittest.TestCase):
    def test_get_or_compute_computes_once(self) -> None:
        cache = ResultCache()
        calls = []

        def compute() -> IntegrationResult:
            calls.append(1)
            return _result(1.0)

        first = cache.get_or_compute(_key("t"), compute)
        second = cache.get_or_compute(_key("t"), compute)
        self.assertIs(first, second)
        self.assertEqual(len(calls), 1)
        stats = cache.stats()
        self.assertEqual(stats["hits"], 1)
        self.assertEqual(stats["misses"], 1)

    def test_failures_are_not_cached(self) -> None:
        cache = ResultCache()

        def failing() -> IntegrationResult:
            raise EvalError("boom", expression="1/t", t=0.0)

        with self.assertRaises(EvalError):
            cache.get_or_compute(_key("1/t"), failing)
        self.assertEqual(len(cache), 0)
        self.assertEqual(cache.get_or_compute(_key("1/t"), lambda: _result(2.0)).value, 2.0)

    def test_method_is_part_of_key(self) -> None:
        cache = ResultCache()
        cache.put(_key("t", "trapezoid"), _result(1.0))
        self.assertIsNone(cache.get(_key("t", "adaptive")))

    def test_lru_eviction(self) -> None:
        cache = ResultCache(max_entries=2)
        cache.put(_key("a"), _result(1.0))
        cache.put(_key("b"), _result(2.0))
        self.assertIsNotNone(cache.get(_key("a")))
        cache.put(_key("c"), _result(3.0))

        self.assertEqual(len(cache), 2)
        self.assertIsNone(cache.get(_key("b")))
        self.assertIsNotNone(cache.get(_key("a")))
        self.assertIsNotNone(cache.get(_key("c")))
        self.assertEqual(cache.stats()["evictions"], 1)

    def test_ttl_expiry(self) -> None:
        clock = FakeClock()
        cache = ResultCache(ttl_seconds=10, clock=clock)
        cache.put(_key("t"), _result(1.0))

        clock.now = 5.0
        self.assertIsNotNone(cache.get(_key("t")))
        clock.now = 10.0
        self.assertIsNone(cache.get(_key("t")))
        self.assertEqual(len(cache), 0)

    def test_clear_and_stats(self) -> None:
        cache = ResultCache(max_entries=8, ttl_seconds=None)
        cache.put(_key("t"), _result(1.0))
        cache.clear()
        stats = cache.stats()
        self.assertEqual(stats["size"], 0)
        self.assertEqual(stats["max_entries"], 8)
        self.assertIsNone(stats["ttl_seconds"])

    def test_concurrent_puts_respect_capacity(self) -> None:
        cache = ResultCache(max_entries=16)

        def worker(offset: int) -> None:
            for i in range(50):
                key = _key("t+{}".format(offset * 100 + i))
                cache.get_or_compute(key, lambda: _result(float(i)))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(cache), 16)
        self.assertEqual(cache.stats()["misses"], 200)


if __name__ == "__main__":
    unittest.main()
