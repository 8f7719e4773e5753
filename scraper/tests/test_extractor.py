import asyncio
from fakes import FakeElement, FakePage
from scraper.jobfeed.extractor import JobCardExtractor, RecordExtractor

SEARCH = 'https://www.linkedin.com/jobs/search/?keywords=data&location=Remote'


def make_card(job_id, title='Data Engineer', company='ACME', location='Remote', href=None):
    children = {
        'a.job-card-list__title': FakeElement(text=f'{title}\n{title} with verification'),
        '.artdeco-entity-lockup__subtitle': FakeElement(text=company),
        '.job-card-container__metadata-wrapper li': FakeElement(text=location),
    }
    if href:
        children['a[href*="/jobs/view/"]'] = FakeElement(attrs={'href': href})
    attrs = {'data-occludable-job-id': job_id} if job_id else {}
    return FakeElement(attrs=attrs, children=children)


def test_extracts_fields_from_cards():
    page = FakePage(url=SEARCH, cards=[make_card('101', href='/jobs/view/101/?refId=abc')])
    batch = asyncio.run(JobCardExtractor().extract_batch(page))
    assert len(batch) == 1
    job = batch[0]
    assert job.job_id == '101'
    assert job.title == 'Data Engineer'
    assert job.company_name == 'ACME'
    assert job.location == 'Remote'
    assert job.url == 'https://www.linkedin.com/jobs/view/101/'


def test_missing_fields_fall_back():
    card = FakeElement(attrs={'data-job-id': '202'})
    page = FakePage(url=SEARCH, cards=[card])
    job = asyncio.run(JobCardExtractor().extract_batch(page))[0]
    assert job.title == 'Unknown' and job.company_name == 'Unknown'
    assert job.location is None
    assert job.url == 'https://www.linkedin.com/jobs/view/202/'


def test_only_new_cards_are_returned():
    extractor = JobCardExtractor()
    page = FakePage(url=SEARCH, cards=[make_card('1'), make_card('2'), make_card(None)])
    first = asyncio.run(extractor.extract_batch(page))
    assert [j.job_id for j in first] == ['1', '2']
    page.cards.append(make_card('3'))
    second = asyncio.run(extractor.extract_batch(page))
    assert [j.job_id for j in second] == ['3']
    assert sorted(extractor.cached_jobs) == ['1', '2', '3']


def test_extractor_satisfies_protocol():
    assert isinstance(JobCardExtractor(), RecordExtractor)
