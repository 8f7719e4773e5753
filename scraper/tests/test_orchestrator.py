import asyncio
import pytest
from urllib.parse import parse_qs, urlparse
from fakes import FakeExtractor, FakeLauncher, FakePage, ScriptedDetector
from scraper.jobfeed.errors import AuthenticationFailed, NotInitialized
from scraper.jobfeed.models import LoadResult
from scraper.jobfeed.orchestrator import SearchOrchestrator, SearchState, build_search_url


def run(coro):
    return asyncio.run(coro)


def make_orchestrator(settings, launcher, diagnostics, **kw):
    kw.setdefault('extractor', FakeExtractor(per_batch=10))
    return SearchOrchestrator(settings=settings, launcher=launcher, diagnostics=diagnostics, **kw)


def test_search_before_initialize_fails_without_navigation(settings, launcher, diagnostics):
    orch = make_orchestrator(settings, launcher, diagnostics)
    with pytest.raises(NotInitialized):
        run(orch.search_jobs('python', 'Remote'))
    assert launcher.launches == 0
    assert orch.extractor.calls == 0
    assert orch.state == SearchState.UNINITIALIZED


def test_quota_reached_after_three_cycles(settings, launcher, diagnostics):
    orch = make_orchestrator(settings, launcher, diagnostics)

    async def scenario():
        await orch.initialize('good-token')
        assert orch.state == SearchState.AUTHENTICATED
        return await orch.search_jobs('python developer', 'Remote', limit=25)

    jobs = run(scenario())
    assert len(jobs) == 30
    assert orch.extractor.calls == 3
    page = orch.session.page
    urls = [u for u, _ in page.navigations]
    # home, search, then exactly two paginations (no pagination after the quota stop)
    assert len(urls) == 4
    assert [parse_qs(urlparse(u).query).get('start') for u in urls[2:]] == [['25'], ['50']]
    assert diagnostics.labels == ['Home page', 'Search jobs page', 'Job limit reached']
    assert orch.state == SearchState.DONE


def test_failed_convergence_discards_partial_results(settings, launcher, diagnostics):
    detector = ScriptedDetector([LoadResult(success=True, total_jobs=10), LoadResult(success=False)])
    orch = make_orchestrator(settings, launcher, diagnostics, detector=detector)

    async def scenario():
        await orch.initialize('good-token')
        return await orch.search_jobs('python', 'Remote', limit=50)

    assert run(scenario()) == []
    assert orch.extractor.calls == 1
    assert detector.calls == 2
    assert diagnostics.labels[-1] == 'No jobs found'


def test_real_detector_drives_the_loop(settings, diagnostics):
    launcher = FakeLauncher(page_factory=lambda: FakePage(counts=[10, 25, 25]))
    orch = make_orchestrator(settings, launcher, diagnostics, extractor=FakeExtractor(per_batch=25))

    async def scenario():
        await orch.initialize('good-token')
        return await orch.search_jobs('data', 'Berlin', limit=25)

    assert len(run(scenario())) == 25
    assert orch.extractor.calls == 1


def test_limit_zero_returns_immediately(settings, launcher, diagnostics):
    orch = make_orchestrator(settings, launcher, diagnostics)

    async def scenario():
        await orch.initialize('good-token')
        return await orch.search_jobs('python', 'Remote', limit=0)

    assert run(scenario()) == []
    assert orch.extractor.calls == 0


def test_failed_initialize_leaves_orchestrator_uninitialized(settings, launcher, diagnostics):
    orch = make_orchestrator(settings, launcher, diagnostics)
    with pytest.raises(AuthenticationFailed):
        run(orch.initialize('stale-token'))
    assert orch.state == SearchState.UNINITIALIZED
    with pytest.raises(NotInitialized):
        run(orch.search_jobs('python', 'Remote'))


def test_navigation_failure_is_captured_and_propagated(settings, diagnostics):
    class FlakyPage(FakePage):
        async def goto(self, url, wait_until=None, **kwargs):
            if 'jobs/search' in url:
                raise RuntimeError('net::ERR_TIMED_OUT')
            await super().goto(url, wait_until=wait_until)

    launcher = FakeLauncher(page_factory=FlakyPage)
    orch = make_orchestrator(settings, launcher, diagnostics)

    async def scenario():
        await orch.initialize('good-token')
        await orch.search_jobs('python', 'Remote')

    with pytest.raises(RuntimeError):
        run(scenario())
    assert diagnostics.labels[-1] == 'Search failed'


def test_close_twice_and_before_initialize(settings, launcher, diagnostics):
    orch = make_orchestrator(settings, launcher, diagnostics)
    run(orch.close())

    async def scenario():
        async with orch:
            await orch.initialize('good-token')
        await orch.close()

    run(scenario())
    assert launcher.browsers[0].closed == 1
    assert orch.state == SearchState.UNINITIALIZED


def test_search_url_is_encoded():
    url = build_search_url('python developer', 'New York, NY')
    assert url == 'https://www.linkedin.com/jobs/search/?keywords=python%20developer&location=New%20York%2C%20NY'


@pytest.mark.parametrize('label', ['Search jobs page', 'Job limit reached'])
def test_failing_sink_does_not_change_search_result(settings, launcher, label):
    from fakes import FailingDiagnostics
    diagnostics = FailingDiagnostics(fail_on=[label])
    orch = make_orchestrator(settings, launcher, diagnostics)

    async def scenario():
        await orch.initialize('good-token')
        return await orch.search_jobs('python', 'Remote', limit=25)

    assert len(run(scenario())) == 30
    assert label in diagnostics.labels


def test_failing_sink_keeps_authentication_error(settings, launcher):
    from fakes import FailingDiagnostics
    orch = make_orchestrator(settings, launcher, FailingDiagnostics(fail_on=['Authentication failed']))
    with pytest.raises(AuthenticationFailed):
        run(orch.initialize('stale-token'))
    assert orch.state == SearchState.UNINITIALIZED
    assert launcher.browsers[0].closed == 1


def test_failing_home_page_capture_still_authenticates(settings, launcher):
    from fakes import FailingDiagnostics
    orch = make_orchestrator(settings, launcher, FailingDiagnostics(fail_on=['Home page']))
    run(orch.initialize('good-token'))
    assert orch.session.authenticated
    assert orch.state == SearchState.AUTHENTICATED
