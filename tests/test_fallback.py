from container_monitor.utils.fallback import first_success


class Provider:
    def __init__(self, name, result=None, error=None):
        self.name = name
        self.result = result
        self.error = error
        self.calls = 0

    def run(self):
        self.calls += 1
        if self.error:
            raise self.error
        return self.result


def test_first_accepted_result_wins():
    a, b, c = Provider("a"), Provider("b", result="B"), Provider("c", result="C")

    outcome = first_success([a, b, c], lambda p: p.run())

    assert outcome.provider is b
    assert outcome.result == "B"
    assert outcome.attempts == 2
    assert c.calls == 0


def test_exceptions_are_skipped():
    a, b = Provider("a", error=RuntimeError("down")), Provider("b", result=[])

    outcome = first_success([a, b], lambda p: p.run())

    assert outcome.provider is b
    assert outcome.result == []


def test_custom_accept():
    a, b = Provider("a", result=False), Provider("b", result=True)

    outcome = first_success([a, b], lambda p: p.run(), accept=lambda r: r is True)

    assert outcome.provider is b


def test_all_failing_returns_none():
    providers = [Provider("a", error=OSError("x")), Provider("b")]
    assert first_success(providers, lambda p: p.run()) is None


def test_no_providers_returns_none():
    assert first_success([], lambda p: p.run()) is None
